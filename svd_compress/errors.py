"""Exceptions raised by the compression engine."""


class SVDCompressError(Exception):
    """Base class for all svd_compress errors."""


class InvalidDimensionsError(SVDCompressError, ValueError):
    """Raised when matrix or buffer shapes break a call's contract.

    This is a programming error on the caller's side (mismatched inner
    dimensions, a pixel buffer of the wrong length, ...), never a numerical
    condition.
    """
