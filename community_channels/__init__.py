"""Channel data-access layer for community messaging."""

__version__ = "0.1.0"
