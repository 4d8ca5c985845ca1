"""Transform and publish authored documentation trees."""

__version__ = "1.0.0"
