"""
Finance Categories

Category management service for personal finance tracking.
"""

__version__ = "0.1.0"
