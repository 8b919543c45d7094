"""
Pytest configuration and shared fixtures for ID Card Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import datetime
import random

import numpy as np
import pytest
from PIL import Image

from ICS_Libs.CardModelLib.id_card import create_initial_card
from ICS_Libs.ImageEditingLib.image_models import RasterBuffer


@pytest.fixture
def gray_source():
    """400x400 opaque mid-gray source buffer."""
    return RasterBuffer.solid(400, 400, (128, 128, 128, 255))


@pytest.fixture
def patterned_source():
    """
    Provide a small buffer where every pixel is distinct.

    Returns:
        5x8 RasterBuffer with varying RGB and alpha values
    """
    rng = np.random.RandomState(7)
    pixels = rng.randint(0, 256, size=(8, 5, 4), dtype=np.uint8)
    return RasterBuffer.from_array(pixels)


@pytest.fixture
def quadrant_image():
    """4x4 RGBA PIL Image with four differently coloured 2x2 quadrants."""
    image = Image.new("RGBA", (4, 4))
    pixels = image.load()
    colors = {
        (0, 0): (255, 0, 0, 255),    # Red
        (1, 0): (0, 255, 0, 255),    # Green
        (0, 1): (0, 0, 255, 255),    # Blue
        (1, 1): (255, 255, 0, 255),  # Yellow
    }
    for y in range(4):
        for x in range(4):
            pixels[x, y] = colors[(x // 2, y // 2)]
    return image


@pytest.fixture
def initial_card():
    """Default card with a fixed issue date and employee ID."""
    return create_initial_card(today=datetime.date(2024, 5, 17), rng=random.Random(42))
