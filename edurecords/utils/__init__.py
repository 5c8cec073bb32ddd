"""
Shared utilities.
"""

from .logger import setup_logger, mask_email, SensitiveDataFilter

__all__ = [
    "setup_logger",
    "mask_email",
    "SensitiveDataFilter",
]
