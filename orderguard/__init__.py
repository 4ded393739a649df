"""orderguard - defensive validation and aggregation of order data."""

__version__ = "1.0.0"
