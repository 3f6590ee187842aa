"""Core components: similarity, clustering, state, loading and orchestration."""

from .similarity import cosine_similarity, histogram_intersection
from .clustering import Cluster, ClusteringEngine, cluster_documents
from .state import (
    SkipLog,
    StorageBackend,
    MemoryStorage,
    DiskStorage,
    ResultStore,
)
from .loader import LoaderError, load_documents, parse_documents
from .processor import TierProcessor, ClusteringPipeline

__all__ = [
    # Similarity
    "cosine_similarity",
    "histogram_intersection",
    # Clustering
    "Cluster",
    "ClusteringEngine",
    "cluster_documents",
    # State
    "SkipLog",
    "StorageBackend",
    "MemoryStorage",
    "DiskStorage",
    "ResultStore",
    # Loading
    "LoaderError",
    "load_documents",
    "parse_documents",
    # Orchestration
    "TierProcessor",
    "ClusteringPipeline",
]
