"""Utility modules for wgconf."""

from . import hashing

__all__ = ['hashing']
