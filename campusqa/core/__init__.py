"""Core utilities: constants, exceptions and logging."""
