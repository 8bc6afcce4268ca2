"""Pharmacy inventory and point-of-sale client core."""

__version__ = "0.1.0"
