"""Yearly UK Price Paid trends per postcode outcode."""

__version__ = "1.0.0"
