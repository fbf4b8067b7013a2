"""Command line interface for previewing tables."""
