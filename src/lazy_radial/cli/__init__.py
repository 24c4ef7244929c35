"""Command-line interface for lazy-radial."""
