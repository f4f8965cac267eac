"""
Core Models Package

Exports base models per facile import nelle app.
"""

from .base import BaseModel

__all__ = ["BaseModel"]
