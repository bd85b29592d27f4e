"""Command-line tools for extraction and aggregation."""
