"""
Classical digital signal processing primitives.

This package provides LTI filtering of sampled signals through rational
transfer functions, FFT convolution, polynomial deconvolution and
cross-correlation.

Features:
---------
- Direct form II transposed filtering of any number of columns, with
  explicit, resumable filter state
- Numba-compiled recurrence kernels, NumPy reference kernels for any dtype
- FFT convolution with a 1D fast path (rfft, power-of-two / 5-smooth sizes)
  and an N-D path
- Polynomial division and cross-correlation built on the two engines

Typical usage:
--------------
    import numpy as np
    from dspbase import filt, conv, deconv, xcorr

    # One-pole smoother over 4 columns
    y = filt([0.5], [1.0, -0.5], np.random.randn(1000, 4))

    # Resume from the final state of the previous chunk
    y1, zf = filt(b, a, x1, return_state=True)
    y2, zf = filt(b, a, x2, zf, return_state=True)

    conv([1, 1], [1, 1])        # array([1, 2, 1])
    deconv([1, 2, 1], [1, 1])   # array([1., 1.])
"""

from dspbase.coefficients import (
    ArrayF,
    FilterCoefficients,
    state_length,
    zero_state,
)
from dspbase.config import ConvolutionConfig, FilterConfig
from dspbase.correlation import xcorr
from dspbase.engines_fft import conv
from dspbase.engines_filter import (
    FilterEngine,
    NumbaFilterEngine,
    NumpyFilterEngine,
)
from dspbase.filtering import filt, filt_into
from dspbase.polynomial import deconv, polydiv
from dspbase.processor import FilterProcessor
from dspbase.utils.errors import InvalidArgumentError
from dspbase.utils.sizes import (
    next_5_smooth,
    next_power_of_two,
    transform_length,
)

__version__ = "0.1.0"

__all__ = [
    # Core types
    "ArrayF",
    "FilterCoefficients",
    "InvalidArgumentError",
    # Configuration
    "ConvolutionConfig",
    "FilterConfig",
    # Filtering
    "filt",
    "filt_into",
    "state_length",
    "zero_state",
    "FilterProcessor",
    # Engines
    "FilterEngine",
    "NumbaFilterEngine",
    "NumpyFilterEngine",
    # Convolution family
    "conv",
    "deconv",
    "polydiv",
    "xcorr",
    # Transform sizes
    "next_5_smooth",
    "next_power_of_two",
    "transform_length",
]
