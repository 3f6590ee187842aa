"""Document and per-document feature schemas."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class Document:
    """A rendered page: extracted text plus a companion screenshot.

    Attributes:
        filename: Unique name of the page within its tier
        text: Extracted text content
        screenshot: Path to the screenshot image (None if the renderer produced none)
    """
    filename: str
    text: str
    screenshot: Optional[Path] = None


@dataclass
class TextFeatures:
    """Term-frequency vector of a document over the tier vocabulary.

    Attributes:
        filename: Source document filename
        tfidf_vector: One component per vocabulary term, in vocabulary order.
            Holds raw term frequencies (count / total tokens); no inverse
            document frequency is applied.
    """
    filename: str
    tfidf_vector: List[float]


@dataclass
class ImageFeatures:
    """Normalized grayscale histogram of a screenshot.

    Attributes:
        color_histogram: 256 buckets, each divided by the pixel count
    """
    color_histogram: List[float]
