"""Command-line interface for prreview."""
