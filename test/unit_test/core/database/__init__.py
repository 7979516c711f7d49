"""Unit tests for the database layer.

Entities and repositories are exercised against in-memory SQLite.
"""
