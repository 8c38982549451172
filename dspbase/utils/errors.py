"""Error types raised by dspbase."""


class InvalidArgumentError(ValueError):
    """
    Precondition violation in a filtering or convolution call.

    Raised before any output array is written. Subclasses ValueError so
    callers that already catch ValueError keep working.
    """
