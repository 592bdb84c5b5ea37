"""Plan generation: scoring, synthesis, fallback, enrichment and orchestration."""
