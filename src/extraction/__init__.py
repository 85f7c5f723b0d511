"""Per-kind reference extractors."""
