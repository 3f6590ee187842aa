"""Tier processing and the parallel clustering pipeline."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ..preprocessing.image import ImageDecodeError, ImageFeatureExtractor
from ..preprocessing.text import TextFeatureExtractor
from ..schemas.common import PipelineResult, SkipRecord, TierResult
from ..schemas.config import ClusteringConfig, PipelineConfig
from ..schemas.document import Document, ImageFeatures
from .clustering import ClusteringEngine
from .state import SkipLog

logger = logging.getLogger(__name__)


class TierProcessor:
    """Clusters the documents of a single tier.

    Steps:
    1. Build the tier vocabulary from every document's text
    2. Decode screenshots (parallel when max_decode_workers > 1)
    3. Skip documents whose screenshot fails to decode
    4. Feed the remaining documents, in input order, to a ClusteringEngine

    ``process`` has no shared state: skip records are returned to the caller
    rather than written anywhere.
    """

    def __init__(
        self,
        config: Optional[ClusteringConfig] = None,
        image_extractor: Optional[ImageFeatureExtractor] = None,
        max_decode_workers: int = 1,
    ):
        """Initialize tier processor.

        Args:
            config: Fused-score weights and thresholds
            image_extractor: Screenshot feature extractor (default: Pillow-based)
            max_decode_workers: Max parallel threads for screenshot decoding (1 = sequential)
        """
        self.config = config or ClusteringConfig()
        self.image_extractor = image_extractor or ImageFeatureExtractor()
        self.max_decode_workers = max_decode_workers

    def process(
        self,
        tier: str,
        documents: Sequence[Document],
    ) -> Tuple[TierResult, List[SkipRecord]]:
        """Cluster one tier.

        Args:
            tier: Tier identifier
            documents: Tier documents in input order

        Returns:
            (tier result, skip records for documents excluded from clustering)
        """
        logger.info(f"Processing tier {tier} ({len(documents)} documents)")

        text_extractor = TextFeatureExtractor.for_documents(documents)
        logger.info(f"Vocabulary size in {tier}: {len(text_extractor.vocabulary)}")

        skipped: List[SkipRecord] = []
        unique_documents: List[Document] = []
        seen = set()
        for document in documents:
            if document.filename in seen:
                skipped.append(SkipRecord.now(document.filename, "Duplicate filename in tier", tier))
                continue
            seen.add(document.filename)
            unique_documents.append(document)

        engine = ClusteringEngine(self.config)
        for document, image_features, error in self._extract_images(unique_documents):
            if error is not None:
                skipped.append(SkipRecord.now(document.filename, error, tier))
                logger.warning(f"Skipped {document.filename} in {tier}: {error}")
                continue

            text_features = text_extractor.extract(document)
            engine.add(
                document.filename,
                text_features.tfidf_vector,
                image_features.color_histogram,
            )

        result = TierResult(
            tier=tier,
            clusters=engine.groups(),
            documents=len(documents),
            skipped=len(skipped),
            vocabulary_size=len(text_extractor.vocabulary),
        )
        logger.info(
            f"Tier {tier}: {len(result.clusters)} clusters, "
            f"{result.skipped} skipped"
        )
        return result, skipped

    def _extract_images(
        self,
        documents: Sequence[Document],
    ) -> List[Tuple[Document, Optional[ImageFeatures], Optional[str]]]:
        """Compute image features for every document, preserving input order.

        Returns:
            List of (document, features, error) tuples; exactly one of
            features and error is None
        """
        def run_one(document: Document) -> Tuple[Document, Optional[ImageFeatures], Optional[str]]:
            try:
                return document, self.image_extractor.extract(document.screenshot), None
            except ImageDecodeError as e:
                return document, None, str(e)

        if self.max_decode_workers <= 1 or len(documents) <= 1:
            return [run_one(document) for document in documents]

        logger.debug(f"Decoding {len(documents)} screenshots with {self.max_decode_workers} workers")
        with ThreadPoolExecutor(max_workers=self.max_decode_workers) as pool:
            return list(pool.map(run_one, documents))


class ClusteringPipeline:
    """Runs TierProcessor over every tier, tiers in parallel.

    Skip records of all tiers are collected in one SkipLog. A tier that
    raises an unexpected error is reported in its TierResult and contributes
    no clusters and no skip records; other tiers are unaffected.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        image_extractor: Optional[ImageFeatureExtractor] = None,
    ):
        """Initialize pipeline.

        Args:
            config: Pipeline configuration (default: PipelineConfig())
            image_extractor: Screenshot feature extractor shared by all tiers
        """
        self.config = config or PipelineConfig()
        self.tier_processor = TierProcessor(
            config=self.config.clustering,
            image_extractor=image_extractor,
            max_decode_workers=self.config.max_decode_workers,
        )
        logger.info(
            f"ClusteringPipeline initialized "
            f"(combined_threshold={self.config.clustering.combined_threshold:.4f}, "
            f"tier_workers={self.config.max_tier_workers}, "
            f"decode_workers={self.config.max_decode_workers})"
        )

    def run(self, tier_documents: Dict[str, Sequence[Document]]) -> PipelineResult:
        """Cluster every tier.

        Args:
            tier_documents: Mapping of tier identifier to its ordered documents

        Returns:
            PipelineResult with one TierResult per input tier
        """
        started_at = datetime.now(timezone.utc)
        skip_log = SkipLog()
        results: Dict[str, TierResult] = {}
        total = len(tier_documents)

        logger.info(f"Starting pipeline over {total} tiers")

        with ThreadPoolExecutor(max_workers=self.config.max_tier_workers) as pool:
            futures = {
                pool.submit(self._run_tier, tier, documents, skip_log): tier
                for tier, documents in tier_documents.items()
            }
            for done, future in enumerate(as_completed(futures), start=1):
                tier = futures[future]
                result = future.result()
                results[tier] = result
                logger.info(
                    f"Tier {tier} done ({done}/{total}): "
                    f"{len(result.clusters)} clusters, {result.skipped} skipped"
                    + (f", error: {result.error}" if result.error else "")
                )

        ordered = {tier: results[tier] for tier in tier_documents}
        skipped = skip_log.snapshot()
        finished_at = datetime.now(timezone.utc)

        logger.info(
            f"Pipeline finished: {sum(len(r.clusters) for r in ordered.values())} clusters, "
            f"{len(skipped)} skipped documents"
        )
        return PipelineResult(
            tiers=ordered,
            skipped=skipped,
            started_at=started_at,
            finished_at=finished_at,
        )

    def _run_tier(
        self,
        tier: str,
        documents: Sequence[Document],
        skip_log: SkipLog,
    ) -> TierResult:
        try:
            result, skipped = self.tier_processor.process(tier, documents)
        except Exception as e:
            logger.exception(f"Tier {tier} failed: {e}")
            return TierResult(tier=tier, documents=len(documents), error=f"{type(e).__name__}: {e}")

        skip_log.extend(skipped)
        return result
