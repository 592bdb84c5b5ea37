"""Travelme planning engine: catalog-grounded, LLM-assisted activity plans."""
