"""Boarding-house utility billing and debt calculation engine."""

__version__ = "1.0.0"
