"""Shared test fixtures for image comparison tests."""

import numpy as np
import pytest


@pytest.fixture
def screenshot_image():
    """Generate a 280x210 search-page screenshot: white page, colored logo, search box."""
    img = np.ones((210, 280, 3), dtype=np.uint8) * 255
    # Logo letters
    img[40:80, 60:90] = [66, 133, 244]
    img[40:80, 95:125] = [219, 68, 55]
    img[40:80, 130:160] = [244, 180, 0]
    img[40:80, 165:195] = [15, 157, 88]
    # Search box outline
    img[110:140, 40:240] = [220, 220, 220]
    img[113:137, 43:237] = [255, 255, 255]
    # Footer bar
    img[190:210, :] = [242, 242, 242]
    return img


@pytest.fixture
def other_site_image():
    """Generate a 280x210 screenshot of a different site: dark page, orange header, tiles."""
    img = np.ones((210, 280, 3), dtype=np.uint8) * 34
    img[0:40, :] = [240, 120, 20]
    for col in range(20, 260, 60):
        img[70:170, col:col + 40] = [0, 120, 180]
    return img


@pytest.fixture
def buttons_image():
    """Generate a 280x140 row of colored buttons on white background."""
    img = np.ones((140, 280, 3), dtype=np.uint8) * 255
    colors = [
        [220, 40, 40], [40, 180, 60], [40, 80, 220],
        [240, 150, 20], [150, 50, 190], [20, 170, 170],
    ]
    for i, color in enumerate(colors):
        row = 20 if i < 3 else 80
        col = 20 + (i % 3) * 85
        img[row:row + 40, col:col + 60] = color
    return img


@pytest.fixture
def photo_image():
    """Generate a 280x210 smooth two-axis color gradient, standing in for a photo."""
    height, width = 210, 280
    xs = np.linspace(40, 220, width)
    ys = np.linspace(60, 200, height)
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :, 0] = xs[np.newaxis, :].astype(np.uint8)
    img[:, :, 1] = ys[:, np.newaxis].astype(np.uint8)
    img[:, :, 2] = 120
    return img


@pytest.fixture
def noise_image():
    """Generate a 280x210 random noise image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 255, (210, 280, 3), dtype=np.uint8)
