"""CLI module - the schemaflow command."""
