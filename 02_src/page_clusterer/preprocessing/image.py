"""Screenshot decoding and grayscale histogram features."""

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from PIL import Image

from ..schemas.document import ImageFeatures

logger = logging.getLogger(__name__)

HISTOGRAM_BINS = 256

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


class ImageDecodeError(RuntimeError):
    """Raised when a screenshot cannot be opened or decoded."""

    def __init__(self, path: Optional[Union[str, Path]], message: str):
        super().__init__(message)
        self.path = path


class ImageDecoder:
    """Decodes screenshot files into RGB images using Pillow."""

    def decode(self, path: Optional[Union[str, Path]]) -> Image.Image:
        """Open and fully decode an image.

        Args:
            path: Path to the image file

        Returns:
            Decoded image in RGB mode

        Raises:
            ImageDecodeError: If the path is missing or the file is not a decodable image
        """
        if path is None or str(path) == "":
            raise ImageDecodeError(path, "No screenshot path")

        try:
            with Image.open(path) as img:
                img.load()
                rgb = img.convert("RGB")
        except FileNotFoundError:
            raise ImageDecodeError(path, f"Screenshot not found: {path}") from None
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(path, f"Cannot decode screenshot {path}: {e}") from e

        logger.debug(f"Decoded {path} ({rgb.width}x{rgb.height})")
        return rgb


def compute_gray_histogram(image: Image.Image) -> List[float]:
    """Compute the normalized 256-bucket luminance histogram of an image.

    Each pixel maps to ``int(0.299*R + 0.587*G + 0.114*B)`` clamped to 255.
    Bucket counts are divided by the pixel count, so the result sums to 1.0.
    An image without pixels yields an all-zero histogram.
    """
    pixel_count = image.width * image.height
    if pixel_count == 0:
        return [0.0] * HISTOGRAM_BINS

    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    gray = rgb[..., 0] * LUMA_R + rgb[..., 1] * LUMA_G + rgb[..., 2] * LUMA_B
    buckets = np.minimum(gray.astype(np.int64), HISTOGRAM_BINS - 1)

    counts = np.bincount(buckets.ravel(), minlength=HISTOGRAM_BINS)
    return (counts / float(pixel_count)).tolist()


class ImageFeatureExtractor:
    """Turns screenshot paths into normalized grayscale histograms."""

    def __init__(self, decoder: Optional[ImageDecoder] = None):
        """Initialize extractor.

        Args:
            decoder: Image decoder (default: Pillow-based ImageDecoder)
        """
        self.decoder = decoder or ImageDecoder()

    def extract(self, path: Optional[Union[str, Path]]) -> ImageFeatures:
        """Decode a screenshot and compute its histogram.

        Raises:
            ImageDecodeError: Propagated from the decoder
        """
        image = self.decoder.decode(path)
        return ImageFeatures(color_histogram=compute_gray_histogram(image))
