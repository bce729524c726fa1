"""GlobeTrotter travel-planning backend."""

__version__ = "1.0.0"
