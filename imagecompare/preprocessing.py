"""
Image preprocessing for signature comparison.

Brings caller images into the single pixel layout the signature builder
samples from (H x W x 3 uint8 RGB), and provides the two collaborators
that sit outside the comparison core:

    resize_to_width   aspect-preserving width fit of the test image
    load_image        file decoding via OpenCV

Source arrays are never modified in place.
"""

import logging
import os
from typing import NamedTuple, Union

import cv2
import numpy as np

from .errors import ImageLoadError, InvalidArgumentError

logger = logging.getLogger(__name__)

RED_SHIFT = 16
GREEN_SHIFT = 8
CHANNEL_MASK = 0xFF

PathLike = Union[str, os.PathLike]


class Color(NamedTuple):
    """An RGB color with integer channels in [0, 255]."""

    red: int
    green: int
    blue: int


def unpack_argb(pixel: int) -> Color:
    """
    Split a packed 32-bit ARGB value into its RGB channels.

    Layout is 0xAARRGGBB; the alpha byte is ignored. Negative values
    (signed 32-bit pixels) unpack the same as their unsigned form.
    """
    return Color(
        (pixel >> RED_SHIFT) & CHANNEL_MASK,
        (pixel >> GREEN_SHIFT) & CHANNEL_MASK,
        pixel & CHANNEL_MASK,
    )


def unpack_argb_array(pixels: np.ndarray) -> np.ndarray:
    """Vectorized unpack_argb over an H x W array of packed pixels."""
    packed = (pixels.astype(np.int64) & 0xFFFFFFFF).astype(np.uint32)
    return np.stack([
        (packed >> RED_SHIFT) & CHANNEL_MASK,
        (packed >> GREEN_SHIFT) & CHANNEL_MASK,
        packed & CHANNEL_MASK,
    ], axis=-1).astype(np.uint8)


def normalize_image(image_np: np.ndarray) -> np.ndarray:
    """
    Ensure image is H x W x 3 uint8 RGB.

    Accepts packed ARGB (2-D integer arrays of 32 bits or wider, signed
    or unsigned), grayscale (2-D uint8, 16-bit integer or float), RGB and
    RGBA arrays. Float images in [0, 1] are scaled to [0, 255].

    Raises:
        InvalidArgumentError: If the array is empty or has an
            unsupported shape, or 16-bit grayscale values exceed 255.
    """
    if image_np is None:
        raise InvalidArgumentError("Image must not be None.")
    image_np = np.asarray(image_np)

    if image_np.ndim not in (2, 3):
        raise InvalidArgumentError(
            f"Unsupported image shape {image_np.shape}, expected H x W or H x W x C"
        )
    if image_np.shape[0] < 1 or image_np.shape[1] < 1:
        raise InvalidArgumentError(
            f"Image must be at least 1x1 pixels, got {image_np.shape[1]}x{image_np.shape[0]}"
        )

    if image_np.ndim == 2:
        if np.issubdtype(image_np.dtype, np.integer):
            if image_np.dtype.itemsize >= 4:
                return unpack_argb_array(image_np)
            if image_np.min() < 0 or image_np.max() > 255:
                raise InvalidArgumentError(
                    f"Grayscale values must be in [0, 255], got "
                    f"[{image_np.min()}, {image_np.max()}]"
                )
        image_np = image_np[:, :, np.newaxis]

    channels = image_np.shape[2]
    if channels not in (1, 3, 4):
        raise InvalidArgumentError(f"Unsupported channel count: {channels}")

    if image_np.dtype != np.uint8:
        if np.issubdtype(image_np.dtype, np.floating) and image_np.max() <= 1.0:
            image_np = (image_np * 255).astype(np.uint8)
        else:
            image_np = np.clip(image_np, 0, 255).astype(np.uint8)

    if channels == 1:
        return np.repeat(image_np, 3, axis=2)
    if channels == 4:
        return image_np[:, :, :3]
    return image_np


def resize_to_width(image_np: np.ndarray, target_width: int) -> np.ndarray:
    """
    Scale an image to target_width, keeping its aspect ratio.

    Uses area interpolation when shrinking and bilinear when enlarging.
    The input is returned as-is when it already has the target width.

    Args:
        image_np: Image in any layout accepted by normalize_image.
        target_width: Width of the result in pixels.

    Returns:
        H' x target_width x 3 uint8 RGB image.

    Raises:
        InvalidArgumentError: If target_width is not positive.
    """
    if target_width < 1:
        raise InvalidArgumentError(
            f"Target width must be at least 1, got {target_width}"
        )

    image_np = normalize_image(image_np)
    h, w = image_np.shape[:2]
    if w == target_width:
        return image_np

    target_height = max(1, int(round(h * target_width / w)))
    interpolation = cv2.INTER_AREA if target_width < w else cv2.INTER_LINEAR
    resized = cv2.resize(image_np, (target_width, target_height),
                         interpolation=interpolation)
    logger.debug(f"Resized {w}x{h} -> {target_width}x{target_height}")
    return resized


def load_image(path: PathLike) -> np.ndarray:
    """
    Decode an image file into an RGB uint8 array.

    Raises:
        ImageLoadError: If OpenCV cannot read the file.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ImageLoadError(f"Could not read image: {path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
