"""Data schemas for page-clusterer."""

from .document import Document, TextFeatures, ImageFeatures
from .common import SkipRecord, TierResult, PipelineResult
from .config import ClusteringConfig, PipelineConfig, ConfigError

__all__ = [
    "Document",
    "TextFeatures",
    "ImageFeatures",
    "SkipRecord",
    "TierResult",
    "PipelineResult",
    "ClusteringConfig",
    "PipelineConfig",
    "ConfigError",
]
