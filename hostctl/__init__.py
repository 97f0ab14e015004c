"""hostctl — interactive host management recipes."""

__version__ = "0.1.0"
