"""yellowpages — a file-backed service catalog for humans and coding agents."""

__version__ = "0.1.0"
