"""Command-line interface module for XML Surgeon.

This module provides CLI tools for inspecting XML files and applying
single-match edits with atomic commits.
"""

from .main import main

__all__ = ["main"]
