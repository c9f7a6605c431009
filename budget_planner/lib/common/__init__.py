"""Common utilities shared by the budget core, the report and the UI.

This module provides formatting and file operation helpers.
"""

from .formatting import format_amount, format_currency, format_percent
from .file_operations import atomic_write, ensure_directory, safe_filename

__all__ = [
    'format_amount',
    'format_currency',
    'format_percent',
    'atomic_write',
    'ensure_directory',
    'safe_filename',
]
