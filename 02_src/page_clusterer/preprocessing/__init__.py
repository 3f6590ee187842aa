"""Preprocessing module for text and screenshot features."""

from .text import STOP_WORDS, TextFeatureExtractor, build_vocabulary, tokenize, vectorize
from .image import (
    ImageDecodeError,
    ImageDecoder,
    ImageFeatureExtractor,
    compute_gray_histogram,
)

__all__ = [
    "STOP_WORDS",
    "TextFeatureExtractor",
    "build_vocabulary",
    "tokenize",
    "vectorize",
    "ImageDecodeError",
    "ImageDecoder",
    "ImageFeatureExtractor",
    "compute_gray_histogram",
]
