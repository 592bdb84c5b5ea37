"""Travelme travel planning library."""
