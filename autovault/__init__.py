"""
autovault: share-based autocompounding vault accounting.
"""

__version__ = "0.1.0"
