"""Unit tests for configuration schemas."""

from pathlib import Path

import pytest

from page_clusterer.schemas.config import ClusteringConfig, ConfigError, PipelineConfig

ENV_VARS = [
    "PAGE_CLUSTER_TEXT_THRESHOLD",
    "PAGE_CLUSTER_IMAGE_THRESHOLD",
    "PAGE_CLUSTER_TEXT_WEIGHT",
    "PAGE_CLUSTER_IMAGE_WEIGHT",
    "PAGE_CLUSTER_TIER_WORKERS",
    "PAGE_CLUSTER_DECODE_WORKERS",
    "PAGE_CLUSTER_OUTPUT_DIR",
    "PAGE_CLUSTER_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove page-clusterer variables and keep .env files out of the way."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("page_clusterer.schemas.config.load_dotenv", lambda: False)
    return monkeypatch


class TestClusteringConfig:
    """Test ClusteringConfig."""

    def test_defaults(self) -> None:
        config = ClusteringConfig()
        assert config.text_threshold == 0.7
        assert config.image_threshold == 0.85
        assert config.text_weight == 0.7
        assert config.image_weight == 0.3

    def test_combined_threshold(self) -> None:
        assert ClusteringConfig().combined_threshold == pytest.approx(0.7 * 0.7 + 0.3 * 0.85)

    def test_text_only_combined_threshold(self) -> None:
        config = ClusteringConfig(text_threshold=0.7, image_threshold=0.85, text_weight=1.0, image_weight=0.0)
        assert config.combined_threshold == 0.7

    def test_frozen(self) -> None:
        config = ClusteringConfig()
        with pytest.raises(AttributeError):
            config.text_weight = 0.5

    @pytest.mark.parametrize("kwargs", [
        {"text_threshold": -0.1},
        {"text_threshold": 1.5},
        {"image_threshold": 2.0},
    ])
    def test_threshold_out_of_range(self, kwargs) -> None:
        with pytest.raises(ConfigError, match="must be in \\[0, 1\\]"):
            ClusteringConfig(**kwargs)

    def test_negative_weight(self) -> None:
        with pytest.raises(ConfigError, match="non-negative"):
            ClusteringConfig(text_weight=1.5, image_weight=-0.5)

    def test_weights_must_sum_to_one(self) -> None:
        with pytest.raises(ConfigError, match="must equal 1"):
            ClusteringConfig(text_weight=0.5, image_weight=0.3)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ClusteringConfig(text_weight=0.9, image_weight=0.9)


class TestPipelineConfig:
    """Test PipelineConfig."""

    def test_defaults(self) -> None:
        config = PipelineConfig()
        assert config.clustering == ClusteringConfig()
        assert config.max_tier_workers == 4
        assert config.max_decode_workers == 8
        assert config.output_dir is None
        assert config.log_level == "INFO"

    def test_output_dir_coerced_to_path(self) -> None:
        assert PipelineConfig(output_dir="runs").output_dir == Path("runs")

    @pytest.mark.parametrize("field", ["max_tier_workers", "max_decode_workers"])
    def test_workers_must_be_positive(self, field) -> None:
        with pytest.raises(ConfigError, match=field):
            PipelineConfig(**{field: 0})

    def test_from_env_defaults(self, clean_env) -> None:
        assert PipelineConfig.from_env() == PipelineConfig()

    def test_from_env_values(self, clean_env) -> None:
        clean_env.setenv("PAGE_CLUSTER_TEXT_THRESHOLD", "0.6")
        clean_env.setenv("PAGE_CLUSTER_IMAGE_THRESHOLD", "0.9")
        clean_env.setenv("PAGE_CLUSTER_TEXT_WEIGHT", "0.5")
        clean_env.setenv("PAGE_CLUSTER_IMAGE_WEIGHT", "0.5")
        clean_env.setenv("PAGE_CLUSTER_TIER_WORKERS", "2")
        clean_env.setenv("PAGE_CLUSTER_DECODE_WORKERS", "16")
        clean_env.setenv("PAGE_CLUSTER_OUTPUT_DIR", "/tmp/runs")
        clean_env.setenv("PAGE_CLUSTER_LOG_LEVEL", "DEBUG")

        config = PipelineConfig.from_env()

        assert config.clustering == ClusteringConfig(
            text_threshold=0.6, image_threshold=0.9, text_weight=0.5, image_weight=0.5
        )
        assert config.max_tier_workers == 2
        assert config.max_decode_workers == 16
        assert config.output_dir == Path("/tmp/runs")
        assert config.log_level == "DEBUG"

    def test_from_env_invalid_number(self, clean_env) -> None:
        clean_env.setenv("PAGE_CLUSTER_TEXT_THRESHOLD", "high")
        with pytest.raises(ConfigError, match="must be a number"):
            PipelineConfig.from_env()

    def test_from_env_invalid_integer(self, clean_env) -> None:
        clean_env.setenv("PAGE_CLUSTER_TIER_WORKERS", "2.5")
        with pytest.raises(ConfigError, match="must be an integer"):
            PipelineConfig.from_env()
