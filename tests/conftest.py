"""Shared fixtures for octamap tests."""

import os
import sys

# Allow running without installing: python -m pytest tests/
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts"))

import numpy as np
import pytest


@pytest.fixture
def coordinate_image():
    """16x9 RGB image whose red/green channels hold each texel's (x, y)."""
    height, width = 9, 16
    ys, xs = np.mgrid[0:height, 0:width]
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[..., 0] = xs
    image[..., 1] = ys
    image[..., 2] = 255
    return image


@pytest.fixture
def distinct_image():
    """4x2 equirectangular source with a different solid colour per texel."""
    image = np.zeros((2, 4, 3), dtype=np.uint8)
    for y in range(2):
        for x in range(4):
            image[y, x] = (10 + 40 * x, 20 + 100 * y, 30 * (x + y))
    return image
