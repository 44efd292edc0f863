"""Outbound adapters: database and photo storage."""
