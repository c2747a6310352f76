"""Capaz - multi-tenant skills assessment backend."""

__version__ = "1.0.0"
