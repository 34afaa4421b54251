"""Products and carts backend persisted to flat JSON files."""

__version__ = "1.0.0"
