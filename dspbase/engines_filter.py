"""
Recurrence engines for rational LTI filtering.

Both engines implement the direct form II transposed recurrence:
- Memory: L = max(len(a), len(b)) - 1 state cells per column
- Computation: O(L·T) per column, single pass over the data

Columns are independent. Each column runs on a private copy of its initial
state, so the output array may alias the input signal.
"""

import warnings
from typing import Protocol

import numpy as np
from numba import njit

from dspbase.coefficients import ArrayF


class FilterEngine(Protocol):
    """Strategy interface for the per-column filter recurrence."""

    def run(
        self,
        b: ArrayF,
        a: ArrayF,
        x: ArrayF,
        zi: ArrayF
    ) -> tuple[ArrayF, ArrayF]:
        """
        Filter every column of a canonical signal.

        Args:
            b: Normalized, padded numerator (sz,)
            a: Normalized denominator, (sz,) for IIR or (1,) for FIR
            x: Signal (T, C) in the working dtype
            zi: Initial state (L, C) in the working dtype

        Returns:
            (y, zf): output (T, C) and final state (L, C)
        """
        ...


class NumpyFilterEngine:
    """
    Reference engine with plain Python loops.

    Works for every dtype NumPy can do arithmetic on, including object
    arrays of Fractions or Decimals. Roughly 100x slower than the Numba
    engine for float data.
    """

    def run(
        self,
        b: ArrayF,
        a: ArrayF,
        x: ArrayF,
        zi: ArrayF
    ) -> tuple[ArrayF, ArrayF]:
        T, C = x.shape
        y = np.empty((T, C), dtype=x.dtype)
        zf = np.empty_like(zi)

        for col in range(C):
            si = zi[:, col].copy()
            if a.shape[0] > 1:
                self._filt_iir(b, a, x[:, col], si, y[:, col])
            else:
                self._filt_fir(b, x[:, col], si, y[:, col])
            zf[:, col] = si

        return y, zf

    @staticmethod
    def _filt_iir(b: ArrayF, a: ArrayF, x: ArrayF, si: ArrayF, out: ArrayF) -> None:
        """Feedback recurrence, updates si in place."""
        silen = si.shape[0]
        for i in range(x.shape[0]):
            xi = x[i]
            val = si[0] + b[0] * xi
            for j in range(silen - 1):
                si[j] = si[j + 1] + b[j + 1] * xi - a[j + 1] * val
            si[silen - 1] = b[silen] * xi - a[silen] * val
            out[i] = val

    @staticmethod
    def _filt_fir(b: ArrayF, x: ArrayF, si: ArrayF, out: ArrayF) -> None:
        """Feedforward-only recurrence, updates si in place."""
        silen = si.shape[0]
        for i in range(x.shape[0]):
            xi = x[i]
            val = si[0] + b[0] * xi
            for j in range(silen - 1):
                si[j] = si[j + 1] + b[j + 1] * xi
            si[silen - 1] = b[silen] * xi
            out[i] = val


@njit(cache=True)
def _numba_filt_iir(
    b: np.ndarray,
    a: np.ndarray,
    x: np.ndarray,
    zi: np.ndarray
) -> tuple:
    """Numba-compiled feedback recurrence over all columns."""
    T, C = x.shape
    silen = zi.shape[0]
    y = np.empty_like(x)
    zf = np.empty_like(zi)
    si = np.zeros_like(zi[:, 0])

    for col in range(C):
        for j in range(silen):
            si[j] = zi[j, col]
        for i in range(T):
            xi = x[i, col]
            val = si[0] + b[0] * xi
            for j in range(silen - 1):
                si[j] = si[j + 1] + b[j + 1] * xi - a[j + 1] * val
            si[silen - 1] = b[silen] * xi - a[silen] * val
            y[i, col] = val
        for j in range(silen):
            zf[j, col] = si[j]

    return y, zf


@njit(cache=True)
def _numba_filt_fir(
    b: np.ndarray,
    x: np.ndarray,
    zi: np.ndarray
) -> tuple:
    """Numba-compiled feedforward recurrence over all columns."""
    T, C = x.shape
    silen = zi.shape[0]
    y = np.empty_like(x)
    zf = np.empty_like(zi)
    si = np.zeros_like(zi[:, 0])

    for col in range(C):
        for j in range(silen):
            si[j] = zi[j, col]
        for i in range(T):
            xi = x[i, col]
            val = si[0] + b[0] * xi
            for j in range(silen - 1):
                si[j] = si[j + 1] + b[j + 1] * xi
            si[silen - 1] = b[silen] * xi
            y[i, col] = val
        for j in range(silen):
            zf[j, col] = si[j]

    return y, zf


class NumbaFilterEngine:
    """
    Numba-accelerated engine for single and double precision dtypes.

    Kernels are compiled once per dtype signature on first use and cached
    on disk. Object dtype is not supported; use NumpyFilterEngine.
    """

    SUPPORTED_DTYPES = (np.float32, np.float64, np.complex64, np.complex128)

    @classmethod
    def supports(cls, dtype: np.dtype) -> bool:
        return any(dtype == np.dtype(dt) for dt in cls.SUPPORTED_DTYPES)

    def run(
        self,
        b: ArrayF,
        a: ArrayF,
        x: ArrayF,
        zi: ArrayF
    ) -> tuple[ArrayF, ArrayF]:
        if not self.supports(x.dtype):
            raise TypeError(f"Numba engine does not support dtype {x.dtype}")

        if x.shape[1] == 0:
            return np.empty_like(x), zi.copy()

        x = np.ascontiguousarray(x)
        zi = np.ascontiguousarray(zi)
        if a.shape[0] > 1:
            return _numba_filt_iir(b, a, x, zi)
        return _numba_filt_fir(b, x, zi)


def select_engine(dtype: np.dtype, engine: str = "auto") -> FilterEngine:
    """
    Pick the recurrence engine for a working dtype.

    Args:
        dtype: Working dtype of the call
        engine: 'auto', 'numpy' or 'numba'

    Returns:
        Engine instance
    """
    if engine == "numpy":
        return NumpyFilterEngine()
    if NumbaFilterEngine.supports(dtype):
        return NumbaFilterEngine()

    if engine == "numba":
        warnings.warn(
            f"Numba engine does not support dtype {dtype}, "
            "falling back to the NumPy engine.",
            UserWarning,
            stacklevel=3,
        )
    return NumpyFilterEngine()
