"""Exceptions raised while reading Out of the World image files."""


class ImageFormatError(ValueError):
    """Input bytes do not describe a valid image."""


class TruncatedDataError(ImageFormatError):
    """Input ends before the layout described by its footer is complete."""
