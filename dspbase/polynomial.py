"""
Polynomial division through filtering.

The impulse response of b(z)/a(z), truncated to len(b) - len(a) + 1 samples,
is exactly the quotient of the polynomial long division of b by a.
"""

import numpy as np

from dspbase.coefficients import ArrayF
from dspbase.engines_fft import conv
from dspbase.filtering import filt
from dspbase.utils.errors import InvalidArgumentError
from dspbase.utils.shapes import working_dtype


def _as_polynomial(p, name: str) -> np.ndarray:
    p = np.atleast_1d(np.asarray(p))
    if p.ndim != 1:
        raise InvalidArgumentError(f"{name} must be 1D, got shape {p.shape}")
    return p


def deconv(b, a) -> ArrayF:
    """
    Construct c such that b = conv(a, c) + r.

    Equivalent to polynomial division with coefficients in descending
    powers. When len(b) < len(a) the quotient is [0].

    Args:
        b: Dividend coefficients (1D)
        a: Divisor coefficients (1D), a[0] != 0

    Returns:
        Quotient c of length len(b) - len(a) + 1

    Examples:
        >>> deconv([1, 2, 1], [1, 1])
        array([1., 1.])
    """
    b = _as_polynomial(b, "dividend")
    a = _as_polynomial(a, "divisor")
    dtype = working_dtype(b, a)

    lb = b.shape[0]
    la = a.shape[0]
    if lb < la:
        return np.zeros(1, dtype=dtype)

    x = np.zeros(lb - la + 1, dtype=dtype)
    x[0] = 1
    return filt(b, a, x)


def polydiv(b, a) -> tuple[ArrayF, ArrayF]:
    """
    Polynomial division returning quotient and remainder.

    Args:
        b: Dividend coefficients (1D)
        a: Divisor coefficients (1D), a[0] != 0

    Returns:
        (c, r) with b == conv(a, c) + r. r has the length of b.
    """
    b = _as_polynomial(b, "dividend")
    a = _as_polynomial(a, "divisor")
    c = deconv(b, a)

    if b.shape[0] < a.shape[0]:
        return c, b.astype(c.dtype)

    return c, b - conv(a, c)
