"""Ordinal satoshi numbering, notations and inscription decoding."""

__version__ = "0.1.0"