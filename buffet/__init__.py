"""Buffet Admin - party/buffet management backend and dashboard client"""

__version__ = "1.0.0"
