"""Domain layer - schema, rows and run lifecycle."""
