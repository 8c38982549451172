"""Cross-correlation on top of FFT convolution."""

from __future__ import annotations

import numpy as np

from dspbase.config import ConvolutionConfig
from dspbase.engines_fft import conv


def _pad_rows(x: np.ndarray, n: int) -> np.ndarray:
    """Zero-pad x at the end of axis 0 to n rows."""
    if x.shape[0] >= n:
        return x
    pad = np.zeros((n - x.shape[0],) + x.shape[1:], dtype=x.dtype)
    return np.concatenate([x, pad], axis=0)


def xcorr(u, v, config: ConvolutionConfig | None = None) -> np.ndarray:
    """
    Cross-correlation of two sequences.

    The shorter input is zero-padded at its end so both have the same
    length along axis 0; v is then conjugated, reversed along axis 0 and
    convolved with u.

    Args:
        u: First sequence (1D, or ND with time along axis 0)
        v: Second sequence
        config: Convolution configuration

    Returns:
        Correlation of length 2*max(len(u), len(v)) - 1. Lag zero sits at
        index max(len(u), len(v)) - 1.

    Examples:
        >>> xcorr([1.0, 2.0], [1.0, 2.0])
        array([2., 5., 2.])
    """
    u = np.atleast_1d(np.asarray(u))
    v = np.atleast_1d(np.asarray(v))

    n = max(u.shape[0], v.shape[0])
    u = _pad_rows(u, n)
    v = _pad_rows(v, n)

    return conv(u, np.conj(v)[::-1], config=config)
