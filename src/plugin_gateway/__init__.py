"""Plugin gateway: one operation catalog over many backend capability servers."""

__version__ = "0.1.0"
