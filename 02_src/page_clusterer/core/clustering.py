"""Greedy online clustering over fused text and image similarity.

Documents are assigned one at a time, in input order. Each document joins
the best-scoring existing cluster whose fused score reaches the combined
threshold, or starts a new cluster. The result depends on input order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..schemas.config import ClusteringConfig
from ..schemas.document import ImageFeatures, TextFeatures
from .similarity import cosine_similarity, histogram_intersection

logger = logging.getLogger(__name__)


@dataclass
class Cluster:
    """A group of similar documents with running-mean centroids.

    Attributes:
        text_centroid: Mean of member text vectors
        image_centroid: Mean of member image histograms
        members: Member filenames
    """
    text_centroid: List[float]
    image_centroid: List[float]
    members: Set[str] = field(default_factory=set)

    @classmethod
    def seed(
        cls,
        filename: str,
        text_vector: Sequence[float],
        image_vector: Sequence[float],
    ) -> "Cluster":
        """Create a singleton cluster whose centroids are the given vectors."""
        return cls(
            text_centroid=list(text_vector),
            image_centroid=list(image_vector),
            members={filename},
        )

    @property
    def size(self) -> int:
        return len(self.members)

    def add(
        self,
        filename: str,
        text_vector: Sequence[float],
        image_vector: Sequence[float],
    ) -> None:
        """Add a member and fold its vectors into the centroids.

        Uses ``c = (c * (n - 1) + v) / n`` with ``n`` the member count after
        insertion. Re-adding an existing member leaves the cluster unchanged.

        Raises:
            ValueError: If a vector does not match the centroid dimensionality
        """
        if len(text_vector) != len(self.text_centroid):
            raise ValueError(
                f"Text vector has {len(text_vector)} dims, "
                f"centroid has {len(self.text_centroid)}"
            )
        if len(image_vector) != len(self.image_centroid):
            raise ValueError(
                f"Image vector has {len(image_vector)} dims, "
                f"centroid has {len(self.image_centroid)}"
            )
        if filename in self.members:
            return

        self.members.add(filename)
        n = len(self.members)
        self.text_centroid = _running_mean(self.text_centroid, text_vector, n)
        self.image_centroid = _running_mean(self.image_centroid, image_vector, n)


def _running_mean(centroid: Sequence[float], value: Sequence[float], n: int) -> List[float]:
    return [(c * (n - 1) + v) / n for c, v in zip(centroid, value)]


class ClusteringEngine:
    """Single-pass online clustering for one tier.

    Holds the clusters of one tier in creation order. Not thread-safe;
    each tier gets its own engine.
    """

    def __init__(self, config: Optional[ClusteringConfig] = None):
        """Initialize engine.

        Args:
            config: Weights and thresholds (default: ClusteringConfig())
        """
        self.config = config or ClusteringConfig()
        self.combined_threshold = self.config.combined_threshold
        self._clusters: List[Cluster] = []

    @property
    def clusters(self) -> List[Cluster]:
        """Clusters in creation order."""
        return self._clusters

    def score(
        self,
        cluster: Cluster,
        text_vector: Sequence[float],
        image_vector: Sequence[float],
    ) -> float:
        """Fused similarity of a document to a cluster's centroids."""
        return (
            self.config.text_weight * cosine_similarity(text_vector, cluster.text_centroid)
            + self.config.image_weight * histogram_intersection(image_vector, cluster.image_centroid)
        )

    def find_best(
        self,
        text_vector: Sequence[float],
        image_vector: Sequence[float],
    ) -> Tuple[Optional[int], Optional[float]]:
        """Find the qualifying cluster with the greatest fused score.

        Scans in creation order and replaces the candidate only on a strictly
        greater score, so the earliest cluster wins ties.

        Returns:
            (cluster index, score), or (None, None) if no cluster reaches
            the combined threshold
        """
        best_index: Optional[int] = None
        best_score: Optional[float] = None

        for index, cluster in enumerate(self._clusters):
            score = self.score(cluster, text_vector, image_vector)
            if score < self.combined_threshold:
                continue
            if best_score is None or score > best_score:
                best_index = index
                best_score = score

        return best_index, best_score

    def add(
        self,
        filename: str,
        text_vector: Sequence[float],
        image_vector: Sequence[float],
    ) -> int:
        """Assign one document to a cluster.

        Returns:
            Index of the cluster the document joined or created
        """
        index, score = self.find_best(text_vector, image_vector)

        if index is None:
            self._clusters.append(Cluster.seed(filename, text_vector, image_vector))
            index = len(self._clusters) - 1
            logger.debug(f"{filename}: new cluster #{index}")
        else:
            self._clusters[index].add(filename, text_vector, image_vector)
            logger.debug(f"{filename}: joined cluster #{index} (score={score:.4f})")

        return index

    def groups(self) -> List[List[str]]:
        """Member filenames per cluster, clusters in creation order.

        Members are sorted by name for stable output.
        """
        return [sorted(cluster.members) for cluster in self._clusters]


def cluster_documents(
    features: Iterable[Tuple[TextFeatures, ImageFeatures]],
    config: Optional[ClusteringConfig] = None,
) -> List[Cluster]:
    """Cluster documents from their (text, image) feature pairs, in order.

    Args:
        features: Ordered feature pairs of one tier
        config: Weights and thresholds

    Returns:
        Clusters in creation order (empty for empty input)
    """
    engine = ClusteringEngine(config)
    for text_features, image_features in features:
        engine.add(
            text_features.filename,
            text_features.tfidf_vector,
            image_features.color_histogram,
        )
    return engine.clusters
