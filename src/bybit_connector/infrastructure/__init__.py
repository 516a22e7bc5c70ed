"""Cross-cutting infrastructure (observability)."""
