"""
Image comparison engine.

Orchestrates the signature comparison pipeline:
    1. Derive the region grid from the reference width
    2. Build the reference signature (fits the sampling window)
    3. Resize the test image to the reference width
    4. Build the test signature with the same window half-width
    5. Sum region distances and normalize to a percentage of equality

An ImageComparison only holds configuration. Everything derived for one
comparison lives in that call's locals, so a single instance can serve
concurrent callers.
"""

import logging
import os
from typing import Any, Callable, Dict, Optional

import numpy as np

from .distance import (
    DEFAULT_EQUAL_PERCENTAGE, max_distance, percentage_of_equality,
    signature_distance, validate_threshold,
)
from .errors import InvalidArgumentError
from .preprocessing import PathLike, load_image, normalize_image, resize_to_width
from .signature import TARGET_SAMPLE_SIZE, build_signature

logger = logging.getLogger(__name__)

# Spacing between reference points along one axis, in pixels. Smaller
# values give more regions and a stricter comparison.
DISTANCE_BETWEEN_REFERENCE_PIXELS = int(
    os.environ.get("IMAGECOMPARE_REGION_SPACING", "28")
)

ResizeFn = Callable[[np.ndarray, int], np.ndarray]


class ImageComparison:
    """
    Signature-based image equality check.

    Compares a test image against a reference image after fitting the
    test image to the reference width, and declares them equal when the
    percentage of equality reaches a threshold.
    """

    def __init__(self,
                 resize: ResizeFn = resize_to_width,
                 region_spacing: int = DISTANCE_BETWEEN_REFERENCE_PIXELS,
                 sample_size: int = TARGET_SAMPLE_SIZE,
                 min_equal_percentage: float = DEFAULT_EQUAL_PERCENTAGE):
        """
        Args:
            resize: Callable(image, target_width) returning the image
                scaled to target_width with its aspect ratio kept.
            region_spacing: Pixels between reference points; the grid
                has reference_width // region_spacing regions per axis.
            sample_size: Starting half-width of each sampling window.
            min_equal_percentage: Threshold used when compare() is
                called without one.

        Raises:
            InvalidArgumentError: On a non-positive spacing, a negative
                sample size or a threshold outside [0, 100].
        """
        if region_spacing < 1:
            raise InvalidArgumentError(
                f"Region spacing must be at least 1, got {region_spacing}"
            )
        if sample_size < 0:
            raise InvalidArgumentError(
                f"Sample size must be zero or higher, got {sample_size}"
            )
        self.resize = resize
        self.region_spacing = region_spacing
        self.sample_size = sample_size
        self.min_equal_percentage = validate_threshold(min_equal_percentage)

    def regions_per_dimension(self, reference_width: int) -> int:
        return reference_width // self.region_spacing

    def measure(self,
                test_image: np.ndarray,
                reference_image: np.ndarray) -> Dict[str, Any]:
        """
        Compute how much of the test image matches the reference.

        Args:
            test_image: Image under test; resized to the reference width.
            reference_image: Reference image; never resized.

        Returns:
            Dict with regions_per_dimension, max_distance,
            sample_half_width, distance and percentage_of_equality.
        """
        reference = normalize_image(reference_image)
        ref_h, ref_w = reference.shape[:2]

        regions = self.regions_per_dimension(ref_w)
        maximum = max_distance(regions * regions)
        logger.debug(
            f"Reference {ref_w}x{ref_h}: {regions} regions per dimension, "
            f"max distance {maximum:.2f}"
        )

        ref_signature, half_width = build_signature(reference, regions, self.sample_size)

        test_rescaled = self.resize(test_image, ref_w)
        test_signature, half_width = build_signature(test_rescaled, regions, half_width)

        distance = signature_distance(test_signature, ref_signature, regions)
        percentage = percentage_of_equality(distance, maximum)
        logger.debug(
            f"Distance {distance:.2f} at half-width {half_width}: "
            f"{percentage:.4f}% equal"
        )

        return {
            "regions_per_dimension": regions,
            "max_distance": maximum,
            "sample_half_width": half_width,
            "distance": distance,
            "percentage_of_equality": percentage,
        }

    def compare(self,
                test_image: np.ndarray,
                reference_image: np.ndarray,
                min_equal_percentage: Optional[float] = None) -> bool:
        """
        Decide whether the test image equals the reference image.

        Args:
            test_image: Image under test.
            reference_image: Reference image.
            min_equal_percentage: Threshold in [0, 100]. Defaults to the
                instance threshold (99.94 unless configured otherwise).

        Returns:
            True if the percentage of equality reaches the threshold.

        Raises:
            InvalidArgumentError: If min_equal_percentage is outside
                [0, 100]. Raised before any image is read.
        """
        if min_equal_percentage is None:
            threshold = self.min_equal_percentage
        else:
            threshold = validate_threshold(min_equal_percentage)

        result = self.measure(test_image, reference_image)
        equal = result["percentage_of_equality"] >= threshold
        logger.info(
            f"Comparison {'passed' if equal else 'failed'}: "
            f"{result['percentage_of_equality']:.4f}% equal, threshold {threshold}%"
        )
        return equal

    def compare_files(self,
                      test_path: PathLike,
                      reference_path: PathLike,
                      min_equal_percentage: Optional[float] = None) -> bool:
        """Load two image files and compare() them."""
        if min_equal_percentage is not None:
            validate_threshold(min_equal_percentage)
        return self.compare(
            load_image(test_path), load_image(reference_path), min_equal_percentage
        )


_default_comparison = ImageComparison()


def measure(test_image: np.ndarray, reference_image: np.ndarray) -> Dict[str, Any]:
    """measure() with the default configuration."""
    return _default_comparison.measure(test_image, reference_image)


def compare(test_image: np.ndarray,
            reference_image: np.ndarray,
            min_equal_percentage: Optional[float] = None) -> bool:
    """compare() with the default configuration."""
    return _default_comparison.compare(test_image, reference_image, min_equal_percentage)


def compare_files(test_path: PathLike,
                  reference_path: PathLike,
                  min_equal_percentage: Optional[float] = None) -> bool:
    """compare_files() with the default configuration."""
    return _default_comparison.compare_files(test_path, reference_path, min_equal_percentage)
