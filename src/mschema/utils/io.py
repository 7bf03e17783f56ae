"""JSON file helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mschema.utils.logging import get_logger

logger = get_logger(__name__)


def write_json(path: str | Path, data: Any, indent: int = 2) -> Path:
    """Write data to a UTF-8 JSON file, creating parent directories.

    Args:
        path: Destination file
        data: JSON-serializable data
        indent: Indentation width

    Returns:
        Path that was written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)

    logger.debug(f"Wrote JSON to {path}")
    return path


def read_json(path: str | Path) -> Any:
    """Read a UTF-8 JSON file.

    Args:
        path: Source file

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    logger.debug(f"Read JSON from {path}")
    return data
