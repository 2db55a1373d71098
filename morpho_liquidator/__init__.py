"""Morpho Blue liquidation scanner."""

__version__ = "0.1.0"
