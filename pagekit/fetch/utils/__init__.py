"""Utility functions."""

from .http import parse_link_header
from .paths import get_path

__all__ = ["get_path", "parse_link_header"]
