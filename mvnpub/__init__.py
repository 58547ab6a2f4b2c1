"""Publish pre-built Maven bundles to a central or direct repository."""

__version__ = "0.3.0"
