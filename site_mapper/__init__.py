"""
SiteMapper package initializer.
Depth-limited, de-duplicated site maps built by a breadth-first crawler.
"""
__version__ = "0.1.0"
