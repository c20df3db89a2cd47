"""Utility modules for tokentree.

Provides:
- logger: get_logger for logging
"""

from tokentree.utils.logger import get_logger

__all__ = ["get_logger"]
