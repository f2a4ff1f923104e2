"""Command-line interface for the affiliation survey."""
