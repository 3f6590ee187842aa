"""Root conftest: loads .env, configures logging and shared image fixtures."""

import logging
from pathlib import Path
from typing import Callable, Tuple

import pytest
from dotenv import load_dotenv
from PIL import Image

load_dotenv()

# Surface debug output of the package in pytest's captured logs
logging.getLogger("page_clusterer").setLevel(logging.DEBUG)


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a solid-color PNG into tmp_path.

    Usage: make_image("a.png", color=(255, 0, 0), size=(4, 4))
    """
    def _make(
        name: str,
        color: Tuple[int, int, int] = (255, 255, 255),
        size: Tuple[int, int] = (8, 8),
    ) -> Path:
        path = tmp_path / name
        Image.new("RGB", size, color).save(path, format="PNG")
        return path

    return _make
