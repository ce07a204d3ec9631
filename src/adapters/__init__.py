"""Adapters: HTTP client, response sinks, artifact verification."""
