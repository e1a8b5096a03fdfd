"""
Shared utility functions.

This package contains utility code used across multiple
build stages.
"""

from .files import atomic_write_all, atomic_write_text
from .logging import JsonlFormatter, build_stage, log_event, setup_logging

__all__ = [
    "atomic_write_all",
    "atomic_write_text",
    "setup_logging",
    "log_event",
    "build_stage",
    "JsonlFormatter",
]
