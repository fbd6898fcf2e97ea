"""Command-line interface for schemabin."""
