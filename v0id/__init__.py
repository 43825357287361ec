"""v0id: a small mind that keeps thinking on a timer."""

__version__ = "0.1.0"
