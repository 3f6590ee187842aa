"""Page Clusterer - groups rendered pages by text and screenshot similarity.

Each tier of documents is clustered independently:
- Text: term-frequency vectors over a per-tier vocabulary, cosine similarity
- Screenshot: normalized grayscale histogram, histogram intersection
- Clustering: greedy single-pass assignment on a weighted fused score
"""

__version__ = "0.1.0"

# Core classes
from .core.clustering import Cluster, ClusteringEngine, cluster_documents
from .core.processor import ClusteringPipeline, TierProcessor
from .core.similarity import cosine_similarity, histogram_intersection
from .core.state import DiskStorage, MemoryStorage, ResultStore, SkipLog
from .core.loader import LoaderError, load_documents

# Preprocessing
from .preprocessing.text import TextFeatureExtractor, build_vocabulary, tokenize, vectorize
from .preprocessing.image import (
    ImageDecodeError,
    ImageDecoder,
    ImageFeatureExtractor,
    compute_gray_histogram,
)

# Schemas
from .schemas.config import ClusteringConfig, ConfigError, PipelineConfig
from .schemas.document import Document, ImageFeatures, TextFeatures
from .schemas.common import PipelineResult, SkipRecord, TierResult

__all__ = [
    # Version
    "__version__",

    # Core classes
    "Cluster",
    "ClusteringEngine",
    "cluster_documents",
    "ClusteringPipeline",
    "TierProcessor",
    "cosine_similarity",
    "histogram_intersection",
    "DiskStorage",
    "MemoryStorage",
    "ResultStore",
    "SkipLog",
    "LoaderError",
    "load_documents",

    # Preprocessing
    "TextFeatureExtractor",
    "build_vocabulary",
    "tokenize",
    "vectorize",
    "ImageDecodeError",
    "ImageDecoder",
    "ImageFeatureExtractor",
    "compute_gray_histogram",

    # Schemas - Config
    "ClusteringConfig",
    "ConfigError",
    "PipelineConfig",

    # Schemas - Document
    "Document",
    "ImageFeatures",
    "TextFeatures",

    # Schemas - Common
    "PipelineResult",
    "SkipRecord",
    "TierResult",
]
