"""hamspot - amateur radio spot relay."""

__version__ = "0.1.0"
