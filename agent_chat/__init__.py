"""Client-side controller for streaming agent conversations."""

__version__ = "0.1.0"
