"""Command-line interface for shiftcycle."""
