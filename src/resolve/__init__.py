"""Reference and URL resolution."""
