"""Web interface for the Button Men rules engine."""
