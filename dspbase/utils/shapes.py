"""
Shape handling and dtype resolution for column-wise filtering.

Column Conventions
------------------
Axis 0 of a signal is time. Every trailing axis is treated as an
independent column:

Signal x:
    - 1D: shape (T,)          -> one column
    - ND: shape (T, d1, d2..) -> d1*d2*... columns

Internally, all processing works with canonicalized shapes:
    - x_canon: (T, C)
    - state:   (L, C) where L = max(len(a), len(b)) - 1

This module provides utilities to:
1. Canonicalize signals and states to (rows, columns) format
2. Validate state shapes against a signal
3. Resolve a common working dtype for mixed inputs
"""

import numpy as np

from dspbase.utils.errors import InvalidArgumentError


def trailing_size(x: np.ndarray, axis: int = 1) -> int:
    """
    Product of the sizes of all axes from ``axis`` onwards.

    Returns 1 when ``axis`` is past the last dimension.

    Examples
    --------
    >>> trailing_size(np.zeros((10, 3, 2)))
    6
    >>> trailing_size(np.zeros(10))
    1
    """
    return int(np.prod(x.shape[axis:], dtype=np.int64))


def as_columns(x: np.ndarray) -> np.ndarray:
    """
    Canonicalize a signal to shape (T, C).

    Parameters
    ----------
    x : np.ndarray
        Signal with time along axis 0, shape (T,) or (T, ...)

    Returns
    -------
    x_canon : np.ndarray
        Signal reshaped to (T, C). A view when the memory layout allows it.

    Raises
    ------
    InvalidArgumentError
        If x is 0-dimensional

    Examples
    --------
    >>> as_columns(np.arange(4)).shape
    (4, 1)
    >>> as_columns(np.zeros((4, 3, 2))).shape
    (4, 6)
    """
    if x.ndim == 0:
        raise InvalidArgumentError("signal must have at least one dimension")
    return x.reshape(x.shape[0], trailing_size(x))


def state_as_columns(si: np.ndarray, silen: int, ncols: int) -> np.ndarray:
    """
    Validate an initial state and canonicalize it to shape (L, C).

    Only a vector state (L,) is broadcast to every column. A state with
    trailing axes must hold exactly ``ncols`` columns across them, so an
    (L, 1) state is rejected for a multi-column signal.

    Parameters
    ----------
    si : np.ndarray
        Initial state, shape (L,) or (L, ...)
    silen : int
        Required state length L
    ncols : int
        Number of signal columns C

    Returns
    -------
    si_canon : np.ndarray
        State of shape (L, C). Always a fresh array.

    Raises
    ------
    InvalidArgumentError
        If the row count is not L, or the column count does not match
    """
    si = np.atleast_1d(si)
    if si.shape[0] != silen:
        raise InvalidArgumentError(
            "initial state must have length max(len(a),len(b))-1 "
            f"(expected {silen}, got {si.shape[0]})"
        )
    if si.ndim > 1 and trailing_size(si) != ncols:
        raise InvalidArgumentError(
            f"state column count mismatch (expected {ncols}, got {trailing_size(si)})"
        )

    si_canon = si.reshape(silen, -1) if silen > 0 else si.reshape(0, trailing_size(si))
    if si_canon.shape[1] == ncols:
        return si_canon.copy()
    return np.repeat(si_canon[:, :1], ncols, axis=1)


def state_shape(x_shape: tuple, silen: int) -> tuple:
    """
    Shape of the final state returned for a signal of shape ``x_shape``.

    (L,) for a 1D signal, (L, d1, d2, ...) otherwise.
    """
    return (silen,) + tuple(x_shape[1:])


def working_dtype(*arrays) -> np.dtype:
    """
    Resolve the common arithmetic dtype for a filtering call.

    Integral and boolean results are promoted to float64 since coefficient
    normalization divides by a[0]. Object dtype is kept as is.

    Examples
    --------
    >>> working_dtype(np.array([1, 2]), np.array([1.0], dtype=np.float32))
    dtype('float64')
    >>> working_dtype(np.array([1j]), np.array([0.5]))
    dtype('complex128')
    """
    dtype = np.result_type(*[np.asarray(arr) for arr in arrays if arr is not None])
    if dtype.kind in "biu":
        return np.dtype(np.float64)
    return dtype
