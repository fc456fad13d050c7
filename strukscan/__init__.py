"""strukscan: structured data extraction from receipt and transfer-proof images."""

__version__ = "0.1.0"
