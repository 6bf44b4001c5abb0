"""Delivery-trip lifecycle and progress tracking."""

__version__ = "0.1.0"
