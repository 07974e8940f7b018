"""Epoch progress monitor: snapshot normalization, charts, lookups, countdowns."""

__version__ = "0.1.0"
