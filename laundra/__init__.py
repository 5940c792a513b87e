"""Laundra back-office core: order pricing and status workflow."""

__version__ = "1.0.0"
