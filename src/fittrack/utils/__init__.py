"""Utility helpers for fittrack."""

from .copy_naming import extract_base_name, generate_copy_name

__all__ = ["extract_base_name", "generate_copy_name"]
