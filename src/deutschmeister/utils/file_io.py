"""File I/O utilities for lesson data and validation reports.

Lesson data is stored as UTF-8 JSON: one catalog file, one purpose flavor file,
and one definition file per lesson under ``lessons/``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


# ============================================================================
# JSON Functions
# ============================================================================


def read_json(file_path: Union[str, Path]) -> Any:
    """Read JSON file and return the parsed value.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON (dict or list)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    file_path = Path(file_path)
    logger.debug(f"Reading JSON from {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(
    data: Union[Dict[str, Any], List[Any]],
    file_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False,
) -> None:
    """Write data to JSON file with pretty printing.

    Creates parent directories if they don't exist.

    Args:
        data: Data to write (dict or list)
        file_path: Path to output JSON file
        indent: Number of spaces for indentation (default: 2)
        ensure_ascii: If False, umlauts and ß are written as-is (default: False)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Writing JSON to {file_path}")

    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)

    logger.info(f"Wrote JSON to {file_path}")


# ============================================================================
# Directory Listing
# ============================================================================


def list_files(
    directory: Union[str, Path],
    pattern: str = "*",
) -> List[Path]:
    """List files in directory matching pattern, sorted by name.

    Args:
        directory: Directory to search
        pattern: Glob pattern (default: '*' = all files)

    Returns:
        Sorted list of Path objects matching pattern

    Example:
        >>> list_files('data/lessons', '*.json')
        [Path('data/lessons/accusative-case.json'), ...]
    """
    directory = Path(directory)

    if not directory.exists():
        logger.warning(f"Directory does not exist: {directory}")
        return []

    files = sorted(f for f in directory.glob(pattern) if f.is_file())

    logger.debug(f"Found {len(files)} files in {directory} matching '{pattern}'")
    return files
