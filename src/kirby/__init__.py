"""Kirby: a file-backed CMS core."""

__version__ = "0.1.0"
