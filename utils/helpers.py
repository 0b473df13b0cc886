#!/usr/bin/env python3
"""
SQLShift Utilities and Helper Functions

File helpers shared by configuration loading and file translation:
size-checked reads, writes that create parent directories, and JSON
parsing with errors reported as FileOperationError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from sqlshift.errors import ErrorCode, SQLShiftError

# Configure logging
logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB
DEFAULT_ENCODING = 'utf-8'


class FileOperationError(SQLShiftError):
    """Exception for file operation errors"""

    def __init__(self, message: str, path: str = None):
        super().__init__(message, ErrorCode.UNKNOWN, {'path': path})
        self.path = path

# ============================================================================
# FILE I/O UTILITIES
# ============================================================================

def read_file(file_path: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Safely read a file with error handling

    Args:
        file_path: Path to file
        encoding: File encoding

    Returns:
        File contents as string

    Raises:
        FileOperationError: If file cannot be read
    """
    path = Path(file_path)
    if not path.exists():
        raise FileOperationError(f"File not found: {file_path}", str(file_path))
    try:
        if path.stat().st_size > MAX_FILE_SIZE:
            raise FileOperationError(f"File too large: {file_path} (max {MAX_FILE_SIZE} bytes)", str(file_path))
        with open(path, 'r', encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileOperationError(f"Encoding error reading {file_path}: {e}", str(file_path))
    except OSError as e:
        raise FileOperationError(f"OS error reading {file_path}: {e}", str(file_path))


def write_file(file_path: str, content: str, encoding: str = DEFAULT_ENCODING,
               create_dirs: bool = True) -> bool:
    """
    Safely write content to file

    Raises:
        FileOperationError: If file cannot be written
    """
    try:
        path = Path(file_path)
        if create_dirs:
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding=encoding) as f:
            f.write(content)
        logger.info(f"File written successfully: {file_path}")
        return True
    except OSError as e:
        raise FileOperationError(f"Error writing {file_path}: {e}", str(file_path))


def read_json_file(file_path: str) -> Dict[str, Any]:
    """
    Read and parse a JSON object from a file

    Raises:
        FileOperationError: If file cannot be read, parsed, or is not an object
    """
    content = read_file(file_path)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise FileOperationError(f"Invalid JSON in {file_path}: {e}", str(file_path))
    if not isinstance(data, dict):
        raise FileOperationError(f"Expected a JSON object in {file_path}", str(file_path))
    return data

