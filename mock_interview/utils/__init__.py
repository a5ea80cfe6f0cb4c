"""
Utility helpers.
"""

from .logging import setup_logging
