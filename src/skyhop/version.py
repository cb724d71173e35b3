"""Version information for Skyhop."""

__version__ = "0.1.0"
