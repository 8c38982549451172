"""
Utility functions for dspbase.

This module provides helper functions for:
- Column canonicalization and state validation
- Working dtype resolution
- FFT length selection
"""

from dspbase.utils.errors import InvalidArgumentError
from dspbase.utils.shapes import (
    as_columns,
    state_as_columns,
    state_shape,
    trailing_size,
    working_dtype,
)
from dspbase.utils.sizes import (
    next_5_smooth,
    next_power_of_two,
    transform_length,
)

__all__ = [
    "InvalidArgumentError",
    "as_columns",
    "next_5_smooth",
    "next_power_of_two",
    "state_as_columns",
    "state_shape",
    "trailing_size",
    "transform_length",
    "working_dtype",
]
