"""
Yelp AI Business Analyzer backend.
"""

__version__ = "1.0.0"
