"""Core configuration for error-relay."""
