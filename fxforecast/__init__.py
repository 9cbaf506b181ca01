"""Currency exchange rate forecasting service."""

__version__ = "1.0.0"
