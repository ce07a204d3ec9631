"""Core interfaces.

Contracts (Protocol) implemented by the adapters, so services depend on
abstractions only.
"""
