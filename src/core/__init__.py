"""Domain models, errors and token rendering."""
