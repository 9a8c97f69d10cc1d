"""Command-line interface for rcdash."""
