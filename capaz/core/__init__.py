"""Shared infrastructure: errors, logging, security helpers."""
