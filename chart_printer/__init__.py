"""Capture TradingView charts headlessly and print them as one PDF per symbol."""

__version__ = "1.0.0"
