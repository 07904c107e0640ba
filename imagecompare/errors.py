"""Exception types raised by imagecompare."""


class InvalidArgumentError(ValueError):
    """A comparison argument is outside its allowed range or shape."""


class ImageLoadError(OSError):
    """An image file could not be decoded."""
