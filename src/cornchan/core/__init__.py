"""Core configuration, errors and application context."""
