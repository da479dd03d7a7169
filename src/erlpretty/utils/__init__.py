"""Utility modules for erlpretty.

Provides:
- logger: get_logger for logging
"""

from erlpretty.utils.logger import get_logger

__all__ = ["get_logger"]
