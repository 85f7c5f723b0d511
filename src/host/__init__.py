"""Host contract and the in-memory host."""
