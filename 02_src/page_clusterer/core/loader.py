"""Loader for the renderer's per-tier document pool (JSON)."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..schemas.document import Document

logger = logging.getLogger(__name__)


class LoaderError(RuntimeError):
    """Raised when the document pool cannot be read or parsed."""


def load_documents(
    path: Path,
    base_dir: Optional[Path] = None,
) -> Dict[str, List[Document]]:
    """Load documents grouped by tier.

    Expected format::

        {
          "tier_1": [
            {"filename": "a.html", "text": "...", "screenshot": "shots/a.jpg"},
            ...
          ],
          ...
        }

    Extra keys (``filepath``, ``tier``, ``error``) are ignored. When
    ``filename`` is absent, the basename of ``filepath`` is used. A missing
    or null ``text`` becomes an empty string; a missing ``screenshot``
    becomes None.

    Args:
        path: Path to the JSON file
        base_dir: Directory against which relative screenshot paths are resolved

    Returns:
        Mapping of tier to documents, both in file order

    Raises:
        LoaderError: If the file is missing, not valid JSON, or malformed
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise LoaderError(f"Input file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Cannot read {path}: {e}") from e

    tiers = parse_documents(raw, base_dir=base_dir)
    total = sum(len(docs) for docs in tiers.values())
    logger.info(f"Loaded {total} documents in {len(tiers)} tiers from {path}")
    return tiers


def parse_documents(
    raw: Any,
    base_dir: Optional[Path] = None,
) -> Dict[str, List[Document]]:
    """Build Document records from an already-decoded JSON object.

    Raises:
        LoaderError: If the structure is not ``{tier: [record, ...]}``
    """
    if not isinstance(raw, dict):
        raise LoaderError(f"Expected a JSON object of tiers, got {type(raw).__name__}")

    tiers: Dict[str, List[Document]] = {}
    for tier, items in raw.items():
        if not isinstance(items, list):
            raise LoaderError(f"Tier '{tier}' must hold a list, got {type(items).__name__}")
        tiers[str(tier)] = [
            _parse_record(tier, position, item, base_dir)
            for position, item in enumerate(items)
        ]
    return tiers


def _parse_record(tier: str, position: int, item: Any, base_dir: Optional[Path]) -> Document:
    if not isinstance(item, dict):
        raise LoaderError(f"Tier '{tier}' record {position} is not an object")

    filename = item.get("filename")
    if not filename and item.get("filepath"):
        filename = Path(item["filepath"]).name
    if not filename:
        raise LoaderError(f"Tier '{tier}' record {position} has no filename")

    text = item.get("text") or ""

    screenshot = item.get("screenshot")
    screenshot_path = Path(screenshot) if screenshot else None
    if screenshot_path is not None and base_dir is not None and not screenshot_path.is_absolute():
        screenshot_path = Path(base_dir) / screenshot_path

    return Document(filename=str(filename), text=str(text), screenshot=screenshot_path)
