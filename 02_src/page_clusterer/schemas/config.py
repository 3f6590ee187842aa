"""Configuration schemas for the clustering engine and the tier pipeline."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass(frozen=True)
class ClusteringConfig:
    """Weights and similarity floors for the fused clustering score.

    Attributes:
        text_threshold: Cosine similarity floor for the text modality
        image_threshold: Histogram-intersection floor for the image modality
        text_weight: Weight of the text similarity in the fused score
        image_weight: Weight of the image similarity in the fused score

    The two weights must sum to 1. Per-modality thresholds are only used to
    derive ``combined_threshold``; they are never checked on their own.
    """
    text_threshold: float = 0.7
    image_threshold: float = 0.85
    text_weight: float = 0.7
    image_weight: float = 0.3

    def __post_init__(self):
        """Validate thresholds and weights."""
        for name in ("text_threshold", "image_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be in [0, 1], got {value}")

        for name in ("text_weight", "image_weight"):
            value = getattr(self, name)
            if value < 0.0:
                raise ConfigError(f"{name} must be non-negative, got {value}")

        if abs(self.text_weight + self.image_weight - 1.0) > 1e-9:
            raise ConfigError(
                f"text_weight + image_weight must equal 1 "
                f"(got {self.text_weight} + {self.image_weight})"
            )

    @property
    def combined_threshold(self) -> float:
        """Floor the fused score must meet or exceed to join a cluster."""
        return (
            self.text_weight * self.text_threshold
            + self.image_weight * self.image_threshold
        )


@dataclass
class PipelineConfig:
    """Configuration for ClusteringPipeline.

    Attributes:
        clustering: Fused-score weights and thresholds
        max_tier_workers: Parallel tier workers (1 = sequential)
        max_decode_workers: Parallel screenshot decoders within a tier
        output_dir: Parent directory for run folders (optional)
        log_level: Logging level (default: INFO)
    """
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    max_tier_workers: int = 4
    max_decode_workers: int = 8
    output_dir: Optional[Path] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_tier_workers < 1:
            raise ConfigError(f"max_tier_workers must be >= 1, got {self.max_tier_workers}")
        if self.max_decode_workers < 1:
            raise ConfigError(f"max_decode_workers must be >= 1, got {self.max_decode_workers}")
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build configuration from environment variables (.env is loaded first).

        Unset variables fall back to the dataclass defaults.

        Raises:
            ConfigError: If a variable holds a value that cannot be parsed
        """
        load_dotenv()
        defaults = ClusteringConfig()

        clustering = ClusteringConfig(
            text_threshold=_env_float("PAGE_CLUSTER_TEXT_THRESHOLD", defaults.text_threshold),
            image_threshold=_env_float("PAGE_CLUSTER_IMAGE_THRESHOLD", defaults.image_threshold),
            text_weight=_env_float("PAGE_CLUSTER_TEXT_WEIGHT", defaults.text_weight),
            image_weight=_env_float("PAGE_CLUSTER_IMAGE_WEIGHT", defaults.image_weight),
        )

        output_dir = os.getenv("PAGE_CLUSTER_OUTPUT_DIR")

        return cls(
            clustering=clustering,
            max_tier_workers=_env_int("PAGE_CLUSTER_TIER_WORKERS", 4),
            max_decode_workers=_env_int("PAGE_CLUSTER_DECODE_WORKERS", 8),
            output_dir=Path(output_dir) if output_dir else None,
            log_level=os.getenv("PAGE_CLUSTER_LOG_LEVEL", "INFO"),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from None
