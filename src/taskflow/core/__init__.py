"""Core infrastructure: configuration, logging, security and policy."""
