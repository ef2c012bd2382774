"""Unhandled-exception interceptor that relays diagnostics to a collector."""

__version__ = "0.1.0"
