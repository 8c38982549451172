"""
FFT-based full linear convolution.

This module implements two convolution paths:
1. 1D fast path: rfft/irfft for real data, fft/ifft for complex data,
   with a power-of-two transform for short outputs and the next 5-smooth
   length (scipy.fft.next_fast_len) for long ones
2. N-D path: fftn/ifftn over every axis at the exact output shape

Both paths zero-pad the inputs at the origin corner to a length at least
len(u) + len(v) - 1 on every axis, so the cyclic product of the spectra
equals the linear convolution.

Integer inputs are convolved in float64 and rounded back. The 1D path
returns int64 so that narrow integer products cannot wrap; the N-D path
keeps the common integral input dtype.
"""

from __future__ import annotations

import numpy as np
from scipy import fft

from dspbase.config import ConvolutionConfig
from dspbase.utils.errors import InvalidArgumentError
from dspbase.utils.sizes import transform_length


def conv(A, B, config: ConvolutionConfig | None = None) -> np.ndarray:
    """
    Full convolution of two arrays.

    Parameters
    ----------
    A, B : array_like
        Inputs. Two 1D inputs take the 1D fast path; anything else takes the
        N-D path, with the lower-rank input extended by trailing size-1 axes.
    config : ConvolutionConfig, optional
        Transform length selection

    Returns
    -------
    C : np.ndarray
        Convolution with shape A.shape[i] + B.shape[i] - 1 on every axis.
        Integer inputs give an integer result (int64 on the 1D path, the
        common input dtype on the N-D path), real inputs a real result.

    Raises
    ------
    InvalidArgumentError
        If either input is empty

    Examples
    --------
    >>> conv([1, 1], [1, 1])
    array([1, 2, 1])
    """
    config = config or ConvolutionConfig()
    A = np.asarray(A)
    B = np.asarray(B)

    if A.size == 0 or B.size == 0:
        raise InvalidArgumentError("convolution inputs must be non-empty")

    dtype = np.result_type(A, B)
    if dtype.kind not in "biufc":
        raise InvalidArgumentError(f"cannot convolve arrays of dtype {dtype}")

    if A.ndim <= 1 and B.ndim <= 1:
        return _conv_1d(np.atleast_1d(A), np.atleast_1d(B), dtype, config)
    return _conv_nd(A, B, dtype, config)


def _fft_dtype(dtype: np.dtype) -> np.dtype:
    """Floating dtype the transform runs in for a given input dtype."""
    if dtype.kind in "biu":
        return np.dtype(np.float64)
    # float16 has no transform support; lift it to single precision
    return np.result_type(dtype, np.float32)


def _conv_1d(u: np.ndarray, v: np.ndarray, dtype: np.dtype, config: ConvolutionConfig) -> np.ndarray:
    """1D convolution with a fast transform length."""
    nu = u.shape[0]
    nv = v.shape[0]
    n = nu + nv - 1
    np2 = transform_length(n, config.smooth_threshold)

    if config.verbose:
        print(f"1D convolution: n={n}, transform length={np2}, dtype={dtype}")

    work = _fft_dtype(dtype)
    u = u.astype(work, copy=False)
    v = v.astype(work, copy=False)

    if work.kind == "c":
        y = fft.ifft(fft.fft(u, n=np2) * fft.fft(v, n=np2), n=np2)
    else:
        y = fft.irfft(fft.rfft(u, n=np2) * fft.rfft(v, n=np2), n=np2)

    return _restore_dtype(y[:n], dtype, np.dtype(np.int64))


def _conv_nd(A: np.ndarray, B: np.ndarray, dtype: np.dtype, config: ConvolutionConfig) -> np.ndarray:
    """N-D convolution over every axis."""
    maxnd = max(A.ndim, B.ndim)
    A = A.reshape(A.shape + (1,) * (maxnd - A.ndim))
    B = B.reshape(B.shape + (1,) * (maxnd - B.ndim))

    ftshape = tuple(A.shape[i] + B.shape[i] - 1 for i in range(maxnd))
    axes = tuple(range(maxnd))

    if config.verbose:
        print(f"N-D convolution: output shape={ftshape}, dtype={dtype}")

    work = _fft_dtype(dtype)
    A = A.astype(work, copy=False)
    B = B.astype(work, copy=False)

    # fftn pads at the end of every axis, placing the data at the origin corner
    C = fft.ifftn(fft.fftn(A, s=ftshape, axes=axes) * fft.fftn(B, s=ftshape, axes=axes), axes=axes)

    return _restore_dtype(C, dtype)


def _restore_dtype(C: np.ndarray, dtype: np.dtype, int_dtype: np.dtype | None = None) -> np.ndarray:
    """
    Drop round-off imaginary residue and round integral results.

    Integral results are cast to ``int_dtype`` when given, otherwise to the
    input dtype (int64 for booleans).
    """
    if dtype.kind != "c":
        C = C.real
    if dtype.kind in "biu":
        if int_dtype is None:
            int_dtype = np.dtype(np.int64) if dtype.kind == "b" else dtype
        return np.rint(C).astype(int_dtype)
    return np.ascontiguousarray(C)
