"""Core infrastructure: configuration, logging, event routing and pipeline context."""
