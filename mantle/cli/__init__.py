"""Command-line interface for Mantle."""
