"""CLI commands for lazy-radial."""
