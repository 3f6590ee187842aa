"""CLI interface for page clustering.

Reads the renderer's per-tier document pool, clusters every tier and writes
clusters, a run summary and the error log into a timestamped run directory.
"""

import argparse
import dataclasses
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .core.loader import LoaderError, load_documents
from .core.processor import ClusteringPipeline
from .core.state import DiskStorage, ResultStore
from .schemas.config import ConfigError, PipelineConfig

LOG_FORMAT = "%(asctime)s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

DEFAULT_OUTPUT_DIR = Path("output")


def setup_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """Setup logging: console + optional file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (UTF-8). If None, console only.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stdout,
        force=True,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logging.getLogger().addHandler(fh)


def validate_arguments(input_path: Path) -> None:
    """Validate CLI arguments.

    Raises:
        SystemExit: If validation fails
    """
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    if not input_path.is_file():
        print(f"Error: Path is not a file: {input_path}", file=sys.stderr)
        sys.exit(1)


def create_run_dir(parent_dir: Path) -> Path:
    """Create timestamped run subdirectory.

    Args:
        parent_dir: Parent directory for runs

    Returns:
        Path to created run directory, e.g. parent_dir/run_2026-02-09_171500/
    """
    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    run_dir = parent_dir / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge environment configuration with command-line overrides.

    Raises:
        ConfigError: If the merged values are invalid
    """
    config = PipelineConfig.from_env()

    overrides = {
        name: getattr(args, name)
        for name in ("text_threshold", "image_threshold", "text_weight", "image_weight")
        if getattr(args, name) is not None
    }
    # Setting one weight alone implies the other
    if "text_weight" in overrides and "image_weight" not in overrides:
        overrides["image_weight"] = 1.0 - overrides["text_weight"]
    elif "image_weight" in overrides and "text_weight" not in overrides:
        overrides["text_weight"] = 1.0 - overrides["image_weight"]

    return PipelineConfig(
        clustering=dataclasses.replace(config.clustering, **overrides),
        max_tier_workers=args.tier_workers if args.tier_workers is not None else config.max_tier_workers,
        max_decode_workers=args.decode_workers if args.decode_workers is not None else config.max_decode_workers,
        output_dir=args.output_dir or config.output_dir or DEFAULT_OUTPUT_DIR,
        log_level=args.log_level or config.log_level,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cluster rendered pages by text and screenshot similarity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  page-clusterer output_pool.json
  page-clusterer output_pool.json --output-dir ./runs --tier-workers 8
  page-clusterer output_pool.json --text-weight 1.0 --text-threshold 0.8

Each run creates a timestamped subdirectory inside --output-dir:
  output-dir/run_2026-02-09_171500/
    logs/run.log          full log
    logs/error_log.txt    skipped documents
    results/clusters.json clusters per tier
    results/summary.yaml  per-tier counts
        """,
    )

    parser.add_argument(
        "input_path",
        type=Path,
        help="Path to the renderer's JSON document pool",
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=None,
        help=f"Parent directory for run folders (default: {DEFAULT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--screenshot-root",
        type=Path,
        default=None,
        help="Directory for resolving relative screenshot paths (default: as-is)",
    )

    parser.add_argument("--text-threshold", type=float, default=None,
                        help="Cosine similarity floor for text (default: 0.7)")
    parser.add_argument("--image-threshold", type=float, default=None,
                        help="Histogram intersection floor for screenshots (default: 0.85)")
    parser.add_argument("--text-weight", type=float, default=None,
                        help="Weight of text similarity in the fused score (default: 0.7)")
    parser.add_argument("--image-weight", type=float, default=None,
                        help="Weight of screenshot similarity in the fused score (default: 0.3)")

    parser.add_argument(
        "--tier-workers",
        type=int,
        default=None,
        help="Max tiers processed in parallel (default: 4)",
    )

    parser.add_argument(
        "--decode-workers",
        type=int,
        default=None,
        help="Max parallel screenshot decoders per tier (default: 8)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        0 on success, 1 on error
    """
    args = build_parser().parse_args(argv)

    try:
        validate_arguments(args.input_path)

        try:
            config = build_config(args)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        run_dir = create_run_dir(config.output_dir)
        log_file = run_dir / "logs" / "run.log"

        setup_logging(config.log_level, log_file)
        logger = logging.getLogger(__name__)

        logger.info(f"Run directory: {run_dir}")
        logger.info(f"Input: {args.input_path}")

        try:
            tier_documents = load_documents(args.input_path, base_dir=args.screenshot_root)
        except LoaderError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1

        pipeline = ClusteringPipeline(config)
        result = pipeline.run(tier_documents)

        store = ResultStore(DiskStorage(run_dir))
        store.save(result)

        clusters_path = run_dir / "results" / "clusters.json"
        error_log_path = run_dir / "logs" / "error_log.txt"
        total_documents = sum(r.documents for r in result.tiers.values())
        elapsed = (result.finished_at - result.started_at).total_seconds()

        print()
        print("=" * 60)
        print("Clustering completed")
        print("=" * 60)
        print(f"Run directory:    {run_dir}")
        print(f"Tiers processed:  {len(result.tiers)}")
        print(f"Documents:        {total_documents}")
        print(f"Clusters:         {result.total_clusters}")
        print(f"Skipped:          {len(result.skipped)}")
        if result.failed_tiers:
            print(f"Failed tiers:     {', '.join(result.failed_tiers)}")
        print(f"Duration:         {elapsed:.2f}s")
        print(f"Results:          {clusters_path}")
        print(f"Error log:        {error_log_path}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 1

    except Exception as e:
        logging.getLogger(__name__).exception(f"Error during processing: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
