"""Configuration, wiring and request authentication."""
