"""
Column-wise LTI filtering through a rational transfer function.

filt_into() is the engine entry point: it validates every precondition
before touching the output, handles the degenerate cases (empty signal,
pure gain), normalizes and pads the coefficients on private copies, then
runs one recurrence per column.

Typical usage:
--------------
    from dspbase import filt

    # One-pole lowpass
    y = filt([1.0], [1.0, -0.5], x)

    # Chunked filtering with explicit state continuation
    y1, zf = filt(b, a, x[:512], return_state=True)
    y2, zf = filt(b, a, x[512:], zf, return_state=True)
"""

from __future__ import annotations

import numpy as np

from dspbase.coefficients import ArrayF, FilterCoefficients
from dspbase.config import FilterConfig
from dspbase.engines_filter import select_engine
from dspbase.utils.errors import InvalidArgumentError
from dspbase.utils.shapes import (
    as_columns,
    state_as_columns,
    state_shape,
    trailing_size,
    working_dtype,
)


def filt(
    b,
    a,
    x,
    si=None,
    *,
    return_state: bool = False,
    config: FilterConfig | None = None,
):
    """
    Apply the filter b(z)/a(z) to x along axis 0.

    Parameters
    ----------
    b : array_like
        Numerator coefficients, scalar or 1D
    a : array_like
        Denominator coefficients, scalar or 1D, a[0] != 0
    x : array_like
        Signal, shape (T,) or (T, ...). Trailing axes are independent columns.
    si : array_like, optional
        Initial state, shape (L,) shared by all columns or (L, ...) with one
        column per signal column. Defaults to zeros.
    return_state : bool, default=False
        Also return the final filter state
    config : FilterConfig, optional
        Engine selection

    Returns
    -------
    y : np.ndarray
        Filtered signal, same shape as x, in the promoted working dtype
    zf : np.ndarray
        Final state, only when return_state=True

    Raises
    ------
    InvalidArgumentError
        If any precondition fails

    Examples
    --------
    >>> filt([1.0], [1.0, -0.5], [1.0, 0.0, 0.0, 0.0])
    array([1.   , 0.5  , 0.25 , 0.125])
    """
    x = np.asarray(x)
    dtype = working_dtype(b, a, x, si)
    out = np.empty(x.shape, dtype=dtype)
    return filt_into(out, b, a, x, si, return_state=return_state, config=config)


def filt_into(
    out: np.ndarray,
    b,
    a,
    x,
    si=None,
    *,
    return_state: bool = False,
    config: FilterConfig | None = None,
):
    """
    Same as filt() but writes the result into ``out``.

    ``out`` may be ``x`` itself to filter in place.

    Args:
        out: Output array, same shape as x
        b: Numerator coefficients
        a: Denominator coefficients
        x: Signal (T,) or (T, ...)
        si: Initial state (L,) or (L, ...), defaults to zeros
        return_state: Also return the final state
        config: Engine selection

    Returns:
        out, or (out, zf) when return_state=True

    Raises:
        InvalidArgumentError: On empty coefficients, a[0] == 0, shape
            mismatches, or an output dtype the result cannot be cast to
            without losing its kind (e.g. float into int). Raised before
            out is modified.
    """
    config = config or FilterConfig()
    coeffs = FilterCoefficients(b=b, a=a)
    x = np.asarray(x)

    if x.shape != out.shape:
        raise InvalidArgumentError(
            f"output size must match input size (output {out.shape}, input {x.shape})"
        )

    if x.ndim == 0:
        raise InvalidArgumentError("signal must have at least one dimension")

    silen = coeffs.state_length
    ncols = trailing_size(x)
    dtype = working_dtype(coeffs.b, coeffs.a, x, si)
    if not np.can_cast(dtype, out.dtype, casting="same_kind"):
        raise InvalidArgumentError(
            f"cannot write {dtype} result into output of dtype {out.dtype}"
        )

    if si is None:
        zi = np.zeros((silen, ncols), dtype=dtype)
    else:
        zi = state_as_columns(np.asarray(si), silen, ncols).astype(dtype)

    if x.shape[0] == 0:
        return _finish(out, zi, x.shape, silen, return_state)

    if coeffs.is_pure_gain:
        out[...] = x * coeffs.astype(dtype).gain
        return _finish(out, zi, x.shape, silen, return_state)

    coeffs = coeffs.astype(dtype).normalized().padded()
    engine = select_engine(dtype, config.engine)
    if config.verbose:
        kind = "FIR" if coeffs.is_fir else "IIR"
        print(f"Using {engine.__class__.__name__} ({kind}, L={silen}, columns={ncols}, dtype={dtype})")

    y, zf = engine.run(coeffs.b, coeffs.a, as_columns(x).astype(dtype, copy=False), zi)

    # x is fully consumed at this point, so out may share memory with it
    out[...] = y.reshape(x.shape)
    return _finish(out, zf, x.shape, silen, return_state)


def _finish(out: ArrayF, zf: ArrayF, x_shape: tuple, silen: int, return_state: bool):
    if not return_state:
        return out
    return out, zf.reshape(state_shape(x_shape, silen))
