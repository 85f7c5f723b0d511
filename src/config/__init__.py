"""Process settings and per-run options."""
