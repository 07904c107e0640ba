"""
Signature distance and percentage-of-equality scoring.

The distance between two signatures is the sum of per-region Euclidean
distances in RGB space. Dividing by the largest distance the same number
of regions could produce (every region black against white) turns it
into a 0-100 percentage of equality.
"""

import logging
import math
import os

import numpy as np

from .errors import InvalidArgumentError
from .preprocessing import Color

logger = logging.getLogger(__name__)

MAX_RGB_VALUE = 255
ONE_HUNDRED = 100.0

# Distance between pure black and pure white: sqrt(3 * 255^2).
MAX_DISTANCE_MULTIPLIER = math.sqrt(3 * MAX_RGB_VALUE * MAX_RGB_VALUE)

# Minimum percentage of equality for two images to count as equal.
DEFAULT_EQUAL_PERCENTAGE = float(os.environ.get("IMAGECOMPARE_EQUAL_PERCENTAGE", "99.94"))


def euclidean_rgb(c1: Color, c2: Color) -> float:
    """Euclidean distance between two colors."""
    return math.sqrt(
        (c1[0] - c2[0]) ** 2
        + (c1[1] - c2[1]) ** 2
        + (c1[2] - c2[2]) ** 2
    )


def _check_signature_size(signature: np.ndarray, regions: int, side: str) -> None:
    shape = np.shape(signature)
    if len(shape) != 3 or shape[0] != regions or shape[1] != regions or shape[2] != 3:
        raise InvalidArgumentError(
            f"{side.capitalize()} signature size {shape[:2]} doesn't match "
            f"number of regions ({regions})."
        )


def signature_distance(source: np.ndarray,
                       target: np.ndarray,
                       regions_per_dimension: int) -> float:
    """
    Sum of region-wise Euclidean RGB distances between two signatures.

    Args:
        source: n x n x 3 signature.
        target: n x n x 3 signature.
        regions_per_dimension: Expected grid size n.

    Returns:
        Total distance; 0.0 when there are no regions.

    Raises:
        InvalidArgumentError: If regions_per_dimension is negative or
            either signature does not have n x n regions.
    """
    if regions_per_dimension < 0:
        raise InvalidArgumentError(
            "Number of reference regions must be zero or higher."
        )
    if regions_per_dimension == 0:
        return 0.0

    _check_signature_size(source, regions_per_dimension, "source")
    _check_signature_size(target, regions_per_dimension, "target")

    diff = np.asarray(source, dtype=np.float64) - np.asarray(target, dtype=np.float64)
    per_region = np.sqrt(np.sum(diff * diff, axis=-1))
    return float(per_region.sum())


def max_distance(total_regions: int) -> float:
    """
    Largest possible signature distance for a number of regions.

    Returns -1.0 for a negative region count.
    """
    if total_regions < 0:
        return -1.0
    return total_regions * MAX_DISTANCE_MULTIPLIER


def percentage_of_equality(distance: float, maximum: float) -> float:
    """
    Convert a signature distance into a 0-100 equality percentage.

    With no regions to compare (maximum == 0) the images are treated as
    trivially equal and 100.0 is returned.

    Raises:
        InvalidArgumentError: If maximum is negative, or zero while the
            distance is not.
    """
    if maximum < 0:
        raise InvalidArgumentError(
            f"Maximum distance must be zero or higher, got {maximum}"
        )
    if maximum == 0:
        if distance != 0:
            raise InvalidArgumentError(
                f"Distance {distance} is not possible without regions."
            )
        return ONE_HUNDRED
    return ONE_HUNDRED - (distance / maximum) * ONE_HUNDRED


def validate_threshold(min_equal_percentage: float) -> float:
    """
    Check that an equality threshold lies in [0, 100].

    Raises:
        InvalidArgumentError: If the value is outside the range or NaN.
    """
    value = float(min_equal_percentage)
    if not 0.0 <= value <= ONE_HUNDRED:
        raise InvalidArgumentError(
            f"Minimum equal percentage must be between 0 and 100, got {min_equal_percentage}"
        )
    return value
