"""
ModelKit utilities.
"""

from .strings import camelize, capitalize, decapitalize, singularize, snakeize

__all__ = ["camelize", "capitalize", "decapitalize", "singularize", "snakeize"]
