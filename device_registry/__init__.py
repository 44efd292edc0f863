"""Device check-in/check-out registry service."""

__version__ = "0.1.0"
