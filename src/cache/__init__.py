"""Content-addressed cache stores and handles."""
