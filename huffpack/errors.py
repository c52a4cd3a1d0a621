class CompressionError(ValueError):
    """Base class for every failure raised by the codec itself.

    I/O failures are not wrapped: an OSError from a source or sink is
    propagated to the caller unchanged.
    """


class EmptyInputError(CompressionError):
    """The frequency table has no nonzero counter, so there is nothing to encode."""


class FormatError(CompressionError):
    """The data being decompressed is not a valid (or complete) container."""


class DegenerateInputError(CompressionError):
    """Single-symbol input refused because the degenerate policy is 'reject'."""


class InputTooLargeError(CompressionError):
    """A symbol occurs more often than a 32-bit header counter can record."""


class SourceChangedError(CompressionError):
    """The source yielded different data on the encoding pass than on the counting pass."""
