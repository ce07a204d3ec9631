"""Core: configuration, domain and services. No CLI concerns."""
