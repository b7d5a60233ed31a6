"""
Utility modules for the deep-link service.
"""

from .formatting import format_price, format_area
from .config import Config
from .log_config import configure_logging

__all__ = ["format_price", "format_area", "Config", "configure_logging"]
