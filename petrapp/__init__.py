"""petrapp - adaptive workout generation."""

__version__ = "0.1.0"
