"""Command-line helpers: trace replay and API server."""
