"""
Rational transfer function coefficients and filter state helpers.

This module provides the (b, a) coefficient container used by the filtering
engine together with the zero-state helper that sizes the filter memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from dspbase.utils.errors import InvalidArgumentError

ArrayF = npt.NDArray[np.inexact]


def _as_coefficient_vector(c, name: str) -> np.ndarray:
    c = np.atleast_1d(np.asarray(c))
    if c.ndim != 1:
        raise InvalidArgumentError(f"{name} must be a scalar or 1D, got shape {c.shape}")
    return c


@dataclass(frozen=True)
class FilterCoefficients:
    """
    Numerator and denominator of an LTI filter H(z) = b(z) / a(z).

    Convention (direct form II transposed, a[0] == 1 after normalization):
    - y[n] = Σₖ b[k]·x[n-k] - Σₖ₌₁ a[k]·y[n-k]

    Scalars are promoted to length-1 vectors. Neither vector may be empty
    and a[0] must be nonzero since it is the normalization divisor.

    The stored arrays are private copies; normalized() and padded() return
    new instances and never touch the caller's coefficient storage.
    """

    b: ArrayF  # Numerator (feedforward) coefficients
    a: ArrayF  # Denominator (feedback) coefficients

    def __post_init__(self):
        """Validate and enforce coefficient constraints."""
        b = _as_coefficient_vector(self.b, "numerator")
        a = _as_coefficient_vector(self.a, "denominator")

        if b.size == 0:
            raise InvalidArgumentError("numerator must be non-empty")
        if a.size == 0:
            raise InvalidArgumentError("denominator must be non-empty")
        if a[0] == 0:
            raise InvalidArgumentError("leading denominator coefficient must be nonzero")

        object.__setattr__(self, "b", b.copy())
        object.__setattr__(self, "a", a.copy())

    @property
    def order_length(self) -> int:
        """Common padded length sz = max(len(a), len(b))."""
        return max(self.a.shape[0], self.b.shape[0])

    @property
    def state_length(self) -> int:
        """Filter memory length L = sz - 1."""
        return self.order_length - 1

    @property
    def is_pure_gain(self) -> bool:
        """Both vectors have length 1: no memory, just b[0]/a[0]."""
        return self.order_length == 1

    @property
    def is_fir(self) -> bool:
        """No feedback terms."""
        return self.a.shape[0] == 1

    @property
    def gain(self):
        """Scalar gain b[0]/a[0]."""
        return self.b[0] / self.a[0]

    def astype(self, dtype) -> FilterCoefficients:
        """Coefficients cast to a working dtype."""
        return FilterCoefficients(b=self.b.astype(dtype), a=self.a.astype(dtype))

    def normalized(self) -> FilterCoefficients:
        """Coefficients scaled so that a[0] == 1."""
        norml = self.a[0]
        if norml == 1:
            return self
        return FilterCoefficients(b=self.b / norml, a=self.a / norml)

    def padded(self) -> FilterCoefficients:
        """
        Coefficients zero-padded to the common length sz.

        b is always padded to sz. a is padded only when it carries feedback
        (1 < len(a) < sz); an FIR denominator stays a length-1 vector.
        """
        sz = self.order_length
        b, a = self.b, self.a

        if b.shape[0] < sz:
            b = np.concatenate([b, np.zeros(sz - b.shape[0], dtype=b.dtype)])
        if 1 < a.shape[0] < sz:
            a = np.concatenate([a, np.zeros(sz - a.shape[0], dtype=a.dtype)])

        return FilterCoefficients(b=b, a=a)

    def to_npz(self, path: Path) -> None:
        """Save coefficients to compressed NPZ file."""
        np.savez_compressed(path, b=self.b, a=self.a)

    @staticmethod
    def from_npz(path: Path) -> FilterCoefficients:
        """Load coefficients from NPZ file."""
        with np.load(path) as data:
            return FilterCoefficients(b=data["b"], a=data["a"])


def state_length(b, a) -> int:
    """Filter state length max(len(a), len(b)) - 1."""
    return max(np.size(a), np.size(b)) - 1


def zero_state(b, a, dtype=np.float64, ncols: int | None = None) -> np.ndarray:
    """
    Zero-initialized filter state.

    Args:
        b: Numerator coefficients (vector or scalar)
        a: Denominator coefficients (vector or scalar)
        dtype: Signal dtype; promoted with the coefficient dtypes
        ncols: Number of signal columns. None gives a shared (L,) vector.

    Returns:
        Zeros of shape (L,) or (L, ncols)
    """
    dtype = np.result_type(np.asarray(b), np.asarray(a), np.dtype(dtype))
    silen = state_length(b, a)
    if ncols is None:
        return np.zeros(silen, dtype=dtype)
    return np.zeros((silen, ncols), dtype=dtype)
