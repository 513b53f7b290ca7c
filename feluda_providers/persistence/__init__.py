"""Persistence layer: repository protocols and the SQLite implementation."""
