"""Command-line interface for the Button Men rules engine."""
