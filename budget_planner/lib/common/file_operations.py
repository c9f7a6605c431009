"""File operation utilities for safe filename handling and path management."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union


def safe_filename(name: str, default: str = 'file', max_length: Optional[int] = None) -> str:
    """Create a safe filename from a user-provided name.
    
    Removes or replaces characters that are not safe for filenames and
    normalizes the result. Preserves alphanumeric characters, spaces, underscores,
    and hyphens. Converts spaces to underscores.
    
    Args:
        name: The original filename or name to sanitize
        default: Default name to use if sanitization results in empty string
        max_length: Optional maximum length for the filename (truncates if provided)
        
    Returns:
        Sanitized filename safe for use in file systems
        
    Example:
        >>> safe_filename("QAWAM Report 2024!")
        'QAWAM_Report_2024'
        >>> safe_filename("", default="report")
        'report'
    """
    if not name:
        return default
    
    cleaned = ''.join(c for c in name if c.isalnum() or c in {' ', '_', '-'})
    cleaned = cleaned.strip().replace(' ', '_')
    
    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')
    
    if max_length is not None and len(cleaned) > max_length:
        cleaned = cleaned[:max_length]
    
    cleaned = cleaned.rstrip('_')
    
    return cleaned if cleaned else default


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.
    
    Args:
        path: The directory path to ensure exists
        
    Returns:
        The path object (for chaining)
        
    Raises:
        OSError: If the directory cannot be created
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Path, content: Union[str, bytes]) -> Path:
    """Write content to ``path`` through a temporary file and an atomic rename.
    
    A failure while writing leaves any previous file untouched and removes
    the temporary file, so readers never observe a partially written target.
    
    Raises:
        OSError: If the file cannot be written
    """
    ensure_directory(path.parent)
    data = content.encode('utf-8') if isinstance(content, str) else content
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as handle:
            handle.write(data)
        os.replace(tmp_name, path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return path
