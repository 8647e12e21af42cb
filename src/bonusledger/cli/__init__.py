"""Command-line interface for bonusledger."""
