"""Common result schemas."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SkipRecord:
    """A document excluded from clustering.

    Attributes:
        timestamp: UTC time the failure was recorded
        filename: Document filename
        reason: Failure detail
        tier: Tier the document belonged to
    """
    timestamp: datetime
    filename: str
    reason: str
    tier: Optional[str] = None

    @classmethod
    def now(cls, filename: str, reason: str, tier: Optional[str] = None) -> "SkipRecord":
        """Create a record stamped with the current UTC time."""
        return cls(
            timestamp=datetime.now(timezone.utc),
            filename=filename,
            reason=reason,
            tier=tier,
        )

    def to_log_line(self) -> str:
        """Format as an error-log line: ``[timestamp] filename - reason``."""
        return f"[{self.timestamp.isoformat()}] {self.filename} - {self.reason}"


@dataclass
class TierResult:
    """Clustering outcome for one tier.

    Attributes:
        tier: Tier identifier
        clusters: Member-filename groups in cluster creation order
        documents: Number of input documents in the tier
        skipped: Number of documents excluded from clustering
        vocabulary_size: Size of the tier vocabulary
        error: Failure detail if the tier could not be processed
    """
    tier: str
    clusters: List[List[str]] = field(default_factory=list)
    documents: int = 0
    skipped: int = 0
    vocabulary_size: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineResult:
    """Result of a full pipeline run across all tiers.

    Attributes:
        tiers: Mapping of tier identifier to its result
        skipped: Skip records accumulated across all tiers
        started_at: UTC time the run started
        finished_at: UTC time the run finished
    """
    tiers: Dict[str, TierResult]
    skipped: List[SkipRecord]
    started_at: datetime
    finished_at: datetime

    @property
    def clusters(self) -> Dict[str, List[List[str]]]:
        """Per-tier member-filename groups."""
        return {tier: result.clusters for tier, result in self.tiers.items()}

    @property
    def total_clusters(self) -> int:
        return sum(len(result.clusters) for result in self.tiers.values())

    @property
    def failed_tiers(self) -> List[str]:
        return [tier for tier, result in self.tiers.items() if not result.ok]
