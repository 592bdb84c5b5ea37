"""Adapters for the catalog store, hosted LLM and routing service."""
