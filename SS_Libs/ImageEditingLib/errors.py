"""
Exceptions raised by the slicing pipeline.

Both classes extend built-in exception types so callers that already catch
ValueError / RuntimeError keep working.
"""


class DimensionMismatchError(ValueError):
    """A selection mask was applied to an image of a different size."""


class SurfaceAcquisitionError(RuntimeError):
    """A drawing canvas for an output frame could not be allocated."""
