"""
imagecompare: tolerant visual equality for raster images.

Reduces both images to a coarse grid of averaged colors (a signature),
sums the color distances between the two grids and accepts the pair as
equal when the resulting percentage of equality reaches a threshold.

Modules:
    engine          ImageComparison class and compare() entry points
    signature       Signature construction and sampling-window fitting
    distance        Signature distance and percentage scoring
    preprocessing   Pixel normalization, resizing and image loading
    errors          Exception types
"""

from .engine import ImageComparison, compare, compare_files, measure
from .errors import ImageLoadError, InvalidArgumentError

__version__ = "1.0.0"

__all__ = [
    "ImageComparison",
    "ImageLoadError",
    "InvalidArgumentError",
    "compare",
    "compare_files",
    "measure",
]
