"""Core layer: configuration, Result types, errors, and the container."""
