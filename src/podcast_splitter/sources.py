"""
Loading of archived episode records.

Archive files are JSON arrays of flat episode objects scraped from older
hosting platforms. A missing or broken archive only weakens the merged
feed, so every failure here degrades to an empty list with a warning.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def load_archive_records(path: Optional[Path]) -> List[Dict[str, Any]]:
    """
    Load episode records from a JSON archive file.

    Args:
        path: Path to the JSON file, or None when the show has no such
              source

    Returns:
        List of record dicts; empty if the file is missing, unreadable,
        not valid JSON or not a JSON array

    Example:
        >>> records = load_archive_records(Path("input/advicesradio-muscle-minds.json"))
        >>> print(f"Found {len(records)} episodes in archive")
    """
    if path is None:
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Could not load %s: file not found", path.name)
        return []
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not load %s: %s", path.name, exc)
        return []

    if not isinstance(data, list):
        logger.warning("Could not load %s: expected a JSON array, got %s",
                       path.name, type(data).__name__)
        return []

    records = [record for record in data if isinstance(record, dict)]
    skipped = len(data) - len(records)
    if skipped:
        logger.warning("Skipped %d non-object entries in %s", skipped, path.name)

    return records
