"""Command-line interface for got."""
