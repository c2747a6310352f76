"""Unit tests for Capaz web route modules.

Each route module has a corresponding test file. Requests go through the full
app with ``get_db`` overridden to the in-memory test database.
"""
