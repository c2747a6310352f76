"""Capaz HTTP API."""
