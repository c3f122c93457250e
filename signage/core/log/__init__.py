"""Logging micro API for signage-composer."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
