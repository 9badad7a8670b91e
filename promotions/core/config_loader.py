"""Loader for JSON promotion definition files."""

import json
import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def load_promotion_config(path: Union[str, Path]) -> List[dict]:
    """
    Load promotion definitions from one JSON file.

    A file may hold a single promotion object or a list of them.

    Args:
        path: Path to the JSON file

    Returns:
        List of promotion definition dicts (empty if the file is missing or invalid)
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Promotion config not found: {path}")
        return []
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        return []

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        definitions = [d for d in data if isinstance(d, dict)]
        if len(definitions) != len(data):
            logger.warning(f"Skipped {len(data) - len(definitions)} non-object entries in {path}")
        return definitions

    logger.error(f"Promotion config {path} must contain an object or a list")
    return []


def load_all_promotion_configs(directory: Union[str, Path]) -> List[dict]:
    """
    Load every *.json promotion definition under a directory.

    Files are read in name order so registry contents are deterministic.
    """
    directory = Path(directory)
    if not directory.exists():
        logger.warning(f"Promotions config directory not found: {directory}")
        return []

    definitions: List[dict] = []
    for path in sorted(directory.glob("*.json")):
        definitions.extend(load_promotion_config(path))
    return definitions
