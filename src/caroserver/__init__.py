"""Caro game API server bootstrap."""

__version__ = "0.1.0"
