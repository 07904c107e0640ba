"""
Low-resolution color signatures.

A signature is an n x n grid of averaged colors. Cell (x, y) averages a
square window centered at (prop[x] * W, prop[y] * H), where the
proportional coordinates split each axis into n + 1 equal steps:

    prop[i] = (i + 1) / (n + 1)

The window half-width starts at a target size and is reduced until every
window stays strictly inside the image. Callers building a second
signature pass the reduced value on so both grids share one geometry.
"""

import logging
import math
import os
from typing import List, Tuple

import numpy as np

from .errors import InvalidArgumentError
from .preprocessing import Color, normalize_image

logger = logging.getLogger(__name__)

# Target half-width of the averaging window, in pixels.
TARGET_SAMPLE_SIZE = int(os.environ.get("IMAGECOMPARE_SAMPLE_SIZE", "12"))


def proportional_coordinates(regions_per_dimension: int) -> List[float]:
    """Evenly spaced centers in (0, 1), one per region."""
    step = 1.0 / (regions_per_dimension + 1)
    return [(i + 1) * step for i in range(regions_per_dimension)]


def _largest_below(bound: float) -> int:
    # Largest integer strictly less than bound.
    return math.ceil(bound) - 1


def fit_sample_half_width(props: List[float],
                          width: int,
                          height: int,
                          half_width: int) -> int:
    """
    Largest half-width <= half_width that keeps every window in bounds.

    Only the outermost coordinates matter: a window around prop[0] must
    satisfy prop[0] * dim - s > 0 and one around prop[-1] must satisfy
    prop[-1] * dim + s < dim, on both axes. Never returns less than 0;
    0 means each window collapses to a single pixel.

    Raises:
        InvalidArgumentError: If half_width is negative.
    """
    if half_width < 0:
        raise InvalidArgumentError(
            f"Sample half-width must be zero or higher, got {half_width}"
        )
    if not props:
        return half_width

    low, high = props[0], props[-1]
    bound = min(
        low * width,
        width - high * width,
        low * height,
        height - high * height,
    )
    return max(0, min(half_width, _largest_below(bound)))


def _window_indices(center: float, half_width: int, size: int) -> np.ndarray:
    if half_width == 0:
        indices = np.array([int(center)])
    else:
        indices = (center - half_width + np.arange(2 * half_width)).astype(int)
    return np.clip(indices, 0, size - 1)


def average_around(image_np: np.ndarray,
                   px: float,
                   py: float,
                   half_width: int) -> Color:
    """
    Average the pixels in the window centered at proportional (px, py).

    Sample coordinates run from center - half_width up to (excluding)
    center + half_width in unit steps and are truncated to pixel indices.
    Channels are summed and divided independently, truncating the result.

    Args:
        image_np: H x W x 3 uint8 RGB image.
        px: Horizontal center as a fraction of the width.
        py: Vertical center as a fraction of the height.
        half_width: Window half-width from fit_sample_half_width().

    Raises:
        InvalidArgumentError: If the window holds no pixels.
    """
    h, w = image_np.shape[:2]
    xs = _window_indices(px * w, half_width, w)
    ys = _window_indices(py * h, half_width, h)

    count = len(xs) * len(ys)
    if count == 0:
        raise InvalidArgumentError(
            f"Empty sampling window at ({px:.4f}, {py:.4f})"
        )

    window = image_np[np.ix_(ys, xs)].astype(np.int64)
    totals = window.reshape(-1, 3).sum(axis=0)
    red, green, blue = (int(t) // count for t in totals)
    return Color(red, green, blue)


def build_signature(image_np: np.ndarray,
                    regions_per_dimension: int,
                    sample_half_width: int = TARGET_SAMPLE_SIZE
                    ) -> Tuple[np.ndarray, int]:
    """
    Build the color signature of an image.

    Args:
        image_np: Image in any layout accepted by normalize_image().
        regions_per_dimension: Grid size n. Zero yields an empty signature.
        sample_half_width: Starting window half-width.

    Returns:
        Tuple of (signature, half_width). Signature is an n x n x 3 int64
        array indexed [x, y]; half_width is the possibly reduced value
        that was actually used.

    Raises:
        InvalidArgumentError: If regions_per_dimension or
            sample_half_width is negative, or the image is empty.
    """
    if regions_per_dimension < 0:
        raise InvalidArgumentError(
            "Number of reference regions must be zero or higher."
        )

    image_np = normalize_image(image_np)
    n = regions_per_dimension
    signature = np.zeros((n, n, 3), dtype=np.int64)
    if n == 0:
        return signature, sample_half_width

    h, w = image_np.shape[:2]
    props = proportional_coordinates(n)
    half_width = fit_sample_half_width(props, w, h, sample_half_width)
    if half_width != sample_half_width:
        logger.debug(
            f"Sample half-width reduced {sample_half_width} -> {half_width} "
            f"for {w}x{h} image"
        )

    for x in range(n):
        for y in range(n):
            signature[x, y] = average_around(image_np, props[x], props[y], half_width)

    return signature, half_width
