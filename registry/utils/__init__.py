"""Utility functions for the land registry."""

from . import uid

__all__ = ["uid"]
