"""Deterministic, network-free plan refinement."""

from .engine import replace_option

__all__ = ["replace_option"]
