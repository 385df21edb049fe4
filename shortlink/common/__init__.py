"""Common utilities for shortlink."""

from .headers import extract_forwarded_headers, build_base_url, extract_geo
from .logging_config import setup_logging, get_logger, mask_key

__all__ = [
    "extract_forwarded_headers",
    "build_base_url",
    "extract_geo",
    "setup_logging",
    "get_logger",
    "mask_key",
]
