"""Shared skip log and result storage with memory and disk backends."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Protocol

import yaml

from ..schemas.common import PipelineResult, SkipRecord

logger = logging.getLogger(__name__)


class SkipLog:
    """Append-only collection of SkipRecords shared by all tier workers.

    Every access goes through a single lock.
    """

    def __init__(self) -> None:
        self._records: List[SkipRecord] = []
        self._lock = threading.Lock()

    def append(self, record: SkipRecord) -> None:
        with self._lock:
            self._records.append(record)

    def extend(self, records: Iterable[SkipRecord]) -> None:
        """Append several records as one atomic write."""
        records = list(records)
        with self._lock:
            self._records.extend(records)

    def snapshot(self) -> List[SkipRecord]:
        """Copy of all records in append order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class StorageBackend(Protocol):
    """Protocol for result storage backends."""

    def save(self, key: str, value: Any) -> None:
        """Save value by key.

        Args:
            key: Storage key (e.g., "results/clusters", "logs/error_log")
            value: Value to save (dict for json/yaml, str for text)
        """
        ...

    def load(self, key: str, default: Any = None) -> Any:
        """Load value by key, or default if the key doesn't exist."""
        ...

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        ...


class MemoryStorage:
    """In-memory storage backend for experiments and testing."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        logger.info("Initialized MemoryStorage backend")

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value
        logger.debug(f"MemoryStorage: saved key '{key}'")

    def load(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def exists(self, key: str) -> bool:
        return key in self._data


class DiskStorage:
    """File-based storage backend with JSON/YAML/text support.

    Layout:
        <state_dir>/results/<name>.json   cluster groups
        <state_dir>/results/<name>.yaml   run summaries
        <state_dir>/logs/<name>.txt       error logs
    """

    def __init__(self, state_dir: Path) -> None:
        """Initialize disk storage with directory structure.

        Args:
            state_dir: Root directory for run output
        """
        self.state_dir = Path(state_dir)
        self.results_dir = self.state_dir / "results"
        self.logs_dir = self.state_dir / "logs"

        for directory in (self.results_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized DiskStorage backend at {self.state_dir}")

    def _get_file_path(self, key: str) -> tuple[Path, str]:
        """Parse key and determine file path and format.

        ``results/`` keys map to JSON, except ``results/summary`` which is YAML.
        ``logs/`` keys map to plain text.
        """
        parts = key.split("/", 1)

        if len(parts) != 2:
            raise ValueError(f"Invalid key format: '{key}'. Expected 'type/name'")

        key_type, name = parts

        if key_type == "results":
            if name == "summary":
                return self.results_dir / f"{name}.yaml", "yaml"
            return self.results_dir / f"{name}.json", "json"

        elif key_type == "logs":
            return self.logs_dir / f"{name}.txt", "text"

        else:
            raise ValueError(f"Unknown key type: '{key_type}'")

    def save(self, key: str, value: Any) -> None:
        file_path, format_type = self._get_file_path(key)

        try:
            if format_type == "json":
                with file_path.open("w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False, indent=2)

            elif format_type == "yaml":
                with file_path.open("w", encoding="utf-8") as f:
                    yaml.safe_dump(value, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

            elif format_type == "text":
                if not isinstance(value, str):
                    raise TypeError(f"Text save requires str, got {type(value)}")
                file_path.write_text(value, encoding="utf-8")

            logger.info(f"DiskStorage: saved key '{key}' to {file_path}")

        except Exception as e:
            logger.error(f"DiskStorage: failed to save key '{key}': {e}")
            raise

    def load(self, key: str, default: Any = None) -> Any:
        file_path, format_type = self._get_file_path(key)

        if not file_path.exists():
            logger.debug(f"DiskStorage: key '{key}' not found, returning default")
            return default

        if format_type == "json":
            with file_path.open("r", encoding="utf-8") as f:
                return json.load(f)

        elif format_type == "yaml":
            with file_path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f)

        return file_path.read_text(encoding="utf-8")

    def exists(self, key: str) -> bool:
        file_path, _ = self._get_file_path(key)
        return file_path.exists()


class ResultStore:
    """Persists pipeline results through a pluggable storage backend."""

    CLUSTERS_KEY = "results/clusters"
    SUMMARY_KEY = "results/summary"
    ERROR_LOG_KEY = "logs/error_log"

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage
        logger.info(f"Initialized ResultStore with {type(storage).__name__}")

    def save(self, result: PipelineResult) -> None:
        """Save clusters, run summary and error log."""
        self.save_clusters(result)
        self.save_summary(result)
        self.save_error_log(result.skipped)

    def save_clusters(self, result: PipelineResult) -> None:
        """Save ``{tier: [[filename, ...], ...]}`` with tiers sorted by name."""
        clusters = {tier: result.tiers[tier].clusters for tier in sorted(result.tiers)}
        self.storage.save(self.CLUSTERS_KEY, clusters)

    def save_summary(self, result: PipelineResult) -> None:
        summary = {
            "started_at": result.started_at.isoformat(),
            "finished_at": result.finished_at.isoformat(),
            "total_clusters": result.total_clusters,
            "total_skipped": len(result.skipped),
            "tiers": {
                tier: {
                    "documents": tier_result.documents,
                    "clusters": len(tier_result.clusters),
                    "skipped": tier_result.skipped,
                    "vocabulary_size": tier_result.vocabulary_size,
                    "error": tier_result.error,
                }
                for tier, tier_result in sorted(result.tiers.items())
            },
        }
        self.storage.save(self.SUMMARY_KEY, summary)

    def save_error_log(self, records: List[SkipRecord]) -> None:
        """Save one ``[timestamp] filename - reason`` line per record."""
        self.storage.save(self.ERROR_LOG_KEY, "\n".join(r.to_log_line() for r in records))
