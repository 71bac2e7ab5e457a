"""Command-line interface for Task Master."""
