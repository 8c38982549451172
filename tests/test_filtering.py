"""
Filtering engine tests.

These tests verify:
1. IIR and FIR recurrences against known responses and scipy.signal.lfilter
2. Coefficient normalization and padding
3. Pure-gain and empty-signal short-circuits
4. Multi-column filtering with shared and per-column state
5. Final state continuation (chunked == whole signal)
6. In-place filtering (output aliasing the input)
7. Precondition validation before any output mutation
"""

from fractions import Fraction

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy.signal import lfilter

from dspbase import (
    FilterConfig,
    InvalidArgumentError,
    NumbaFilterEngine,
    NumpyFilterEngine,
    filt,
    filt_into,
)

ENGINES = ["numpy", "numba"]


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def iir_coeffs():
    """Second-order resonator with a longer numerator than denominator."""
    b = np.array([0.2, 0.3, -0.1, 0.05])
    a = np.array([1.0, -1.1, 0.45])
    return b, a


class TestRecurrence:
    """Known responses of the IIR and FIR kernels."""

    @pytest.mark.parametrize("engine", ENGINES)
    def test_one_pole_geometric_decay(self, engine):
        """b=[1], a=[1,-0.5] on an impulse decays by halves."""
        y = filt([1], [1, -0.5], [1, 0, 0, 0], config=FilterConfig(engine=engine))
        assert_allclose(y, [1.0, 0.5, 0.25, 0.125])

    @pytest.mark.parametrize("engine", ENGINES)
    def test_fir_impulse_response_is_b(self, engine):
        b = np.array([0.5, -0.25, 0.125, 2.0])
        x = np.zeros(6)
        x[0] = 1.0
        y = filt(b, 1.0, x, config=FilterConfig(engine=engine))
        assert_allclose(y, [0.5, -0.25, 0.125, 2.0, 0.0, 0.0])

    @pytest.mark.parametrize("engine", ENGINES)
    def test_matches_scipy_lfilter(self, engine, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal(500)
        y = filt(b, a, x, config=FilterConfig(engine=engine))
        assert_allclose(y, lfilter(b, a, x), rtol=1e-12, atol=1e-12)

    @pytest.mark.parametrize("engine", ENGINES)
    def test_longer_denominator(self, engine, rng):
        """Numerator shorter than denominator is padded with zeros."""
        b = np.array([1.0])
        a = np.array([1.0, -0.3, 0.2, -0.1])
        x = rng.standard_normal(200)
        y = filt(b, a, x, config=FilterConfig(engine=engine))
        assert_allclose(y, lfilter(b, a, x), rtol=1e-12, atol=1e-12)

    @pytest.mark.parametrize("engine", ENGINES)
    def test_complex_signal(self, engine, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal(300) + 1j * rng.standard_normal(300)
        y = filt(b, a, x, config=FilterConfig(engine=engine))

        assert y.dtype == np.complex128
        assert_allclose(y, lfilter(b, a, x), rtol=1e-12, atol=1e-12)

    def test_object_dtype_is_exact(self):
        """Fractions run through the NumPy engine without rounding."""
        x = np.array([Fraction(1), Fraction(0), Fraction(0), Fraction(0)], dtype=object)
        a = np.array([Fraction(1), Fraction(-1, 3)], dtype=object)
        y = filt(np.array([Fraction(1)], dtype=object), a, x)

        assert list(y) == [Fraction(1), Fraction(1, 3), Fraction(1, 9), Fraction(1, 27)]

    def test_numba_request_for_object_dtype_warns(self):
        x = np.array([Fraction(1), Fraction(2)], dtype=object)
        with pytest.warns(UserWarning, match="falling back to the NumPy engine"):
            y = filt([Fraction(1), Fraction(1)], [Fraction(1)], x, config=FilterConfig(engine="numba"))
        assert list(y) == [Fraction(1), Fraction(3)]

    def test_engines_agree(self, iir_coeffs, rng):
        """Engines take normalized coefficients padded to a common length."""
        b, a = iir_coeffs
        a = np.concatenate([a, [0.0]])
        x = rng.standard_normal((128, 3))
        zi = rng.standard_normal((3, 3))

        y_np, zf_np = NumpyFilterEngine().run(b, a, x, zi)
        y_nb, zf_nb = NumbaFilterEngine().run(b, a, x, zi)

        assert_allclose(y_np, y_nb, rtol=1e-12, atol=1e-12)
        assert_allclose(zf_np, zf_nb, rtol=1e-12, atol=1e-12)


class TestNormalization:
    """Coefficients are scaled by a[0] on private copies."""

    def test_leading_coefficient_normalized(self, rng):
        b = np.array([2.0, 1.0])
        a = np.array([4.0, -2.0])
        x = rng.standard_normal(64)

        assert_allclose(filt(b, a, x), filt(b / 4.0, a / 4.0, x), rtol=1e-12)

    def test_caller_coefficients_not_mutated(self, rng):
        b = np.array([2.0, 1.0])
        a = np.array([4.0, -2.0, 0.5])
        b_before = b.copy()
        a_before = a.copy()

        filt(b, a, rng.standard_normal(32))

        assert_array_equal(b, b_before)
        assert_array_equal(a, a_before)

    def test_integer_inputs_promote_to_float(self):
        y = filt([1], [2, -1], [2, 0, 0])
        assert y.dtype == np.float64
        assert_allclose(y, [1.0, 0.5, 0.25])

    def test_float32_preserved(self, rng):
        b = np.array([0.5, 0.5], dtype=np.float32)
        a = np.array([1.0, -0.2], dtype=np.float32)
        x = rng.standard_normal(100).astype(np.float32)
        y = filt(b, a, x)

        assert y.dtype == np.float32
        assert_allclose(y, lfilter(b, a, x), rtol=1e-5, atol=1e-5)


class TestShortCircuits:
    """Degenerate cases that bypass the recurrence."""

    @pytest.mark.parametrize("k, m", [(1.0, 3.0), (2.0, 3.0), (-4.0, 0.5)])
    def test_pure_gain(self, k, m, rng):
        x = rng.standard_normal((50, 2))
        assert_allclose(filt([m], [k], x), x * (m / k))

    def test_pure_gain_scalar_coefficients(self):
        assert_allclose(filt(3.0, 2.0, [1.0, 2.0]), [1.5, 3.0])

    def test_pure_gain_returns_empty_state(self):
        y, zf = filt([2.0], [1.0], np.ones((4, 3)), return_state=True)
        assert_allclose(y, 2.0 * np.ones((4, 3)))
        assert zf.shape == (0, 3)

    def test_empty_signal_leaves_output_untouched(self):
        x = np.zeros((0, 3))
        out = np.zeros((0, 3))
        assert filt_into(out, [1.0, 1.0], [1.0, -0.5], x) is out

    def test_empty_signal_returns_initial_state(self):
        si = np.array([0.25])
        _, zf = filt([1.0, 1.0], [1.0, -0.5], np.zeros(0), si, return_state=True)
        assert_allclose(zf, si)


class TestColumns:
    """Trailing axes are independent columns."""

    @pytest.mark.parametrize("engine", ENGINES)
    def test_each_column_filtered_independently(self, engine, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal((200, 4))
        y = filt(b, a, x, config=FilterConfig(engine=engine))

        for col in range(4):
            assert_allclose(y[:, col], lfilter(b, a, x[:, col]), rtol=1e-12, atol=1e-12)

    def test_three_dimensional_signal(self, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal((100, 2, 3))
        y = filt(b, a, x)

        assert y.shape == x.shape
        assert_allclose(y, lfilter(b, a, x, axis=0), rtol=1e-12, atol=1e-12)

    def test_vector_state_broadcast_to_all_columns(self, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal((50, 3))
        si = np.array([0.1, -0.2, 0.3])
        y = filt(b, a, x, si)

        zi = np.repeat(si[:, np.newaxis], 3, axis=1)
        expected, _ = lfilter(b, a, x, axis=0, zi=zi)
        assert_allclose(y, expected, rtol=1e-12, atol=1e-12)

    def test_per_column_state(self, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal((50, 3))
        si = rng.standard_normal((3, 3))
        y, zf = filt(b, a, x, si, return_state=True)

        expected, expected_zf = lfilter(b, a, x, axis=0, zi=si)
        assert_allclose(y, expected, rtol=1e-12, atol=1e-12)
        assert_allclose(zf, expected_zf, rtol=1e-12, atol=1e-12)

    def test_caller_state_not_mutated(self, iir_coeffs, rng):
        b, a = iir_coeffs
        si = rng.standard_normal((3, 2))
        si_before = si.copy()

        filt(b, a, rng.standard_normal((20, 2)), si)

        assert_array_equal(si, si_before)


class TestStateContinuity:
    """Chunked filtering with carried state equals whole-signal filtering."""

    @pytest.mark.parametrize("engine", ENGINES)
    @pytest.mark.parametrize("split", [1, 17, 250, 499])
    def test_split_equals_whole(self, engine, split, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal(500)
        config = FilterConfig(engine=engine)

        y_whole = filt(b, a, x, config=config)
        y1, zf = filt(b, a, x[:split], return_state=True, config=config)
        y2 = filt(b, a, x[split:], zf, config=config)

        assert_allclose(np.concatenate([y1, y2]), y_whole, rtol=1e-12, atol=1e-12)

    def test_fir_split_equals_whole(self, rng):
        b = rng.standard_normal(8)
        x = rng.standard_normal(100)

        y1, zf = filt(b, [1.0], x[:33], return_state=True)
        y2 = filt(b, [1.0], x[33:], zf)

        assert_allclose(np.concatenate([y1, y2]), filt(b, [1.0], x), rtol=1e-12)

    def test_final_state_shape_follows_signal(self, iir_coeffs):
        b, a = iir_coeffs
        _, zf_1d = filt(b, a, np.ones(10), return_state=True)
        _, zf_nd = filt(b, a, np.ones((10, 2, 5)), return_state=True)

        assert zf_1d.shape == (3,)
        assert zf_nd.shape == (3, 2, 5)

    def test_final_state_matches_scipy(self, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal(64)
        _, zf = filt(b, a, x, return_state=True)
        _, expected = lfilter(b, a, x, zi=np.zeros(3))

        assert_allclose(zf, expected, rtol=1e-12, atol=1e-12)


class TestAliasing:
    """Output may share memory with the input."""

    @pytest.mark.parametrize("engine", ENGINES)
    def test_in_place_equals_fresh_output(self, engine, iir_coeffs, rng):
        b, a = iir_coeffs
        x = rng.standard_normal((100, 3))
        config = FilterConfig(engine=engine)

        expected = filt_into(np.empty_like(x), b, a, x, config=config)
        result = filt_into(x, b, a, x, config=config)

        assert result is x
        assert_allclose(x, expected, rtol=1e-14)

    def test_in_place_pure_gain(self):
        x = np.array([1.0, 2.0, 3.0])
        filt_into(x, [3.0], [2.0], x)
        assert_allclose(x, [1.5, 3.0, 4.5])

    def test_in_place_non_contiguous(self, iir_coeffs, rng):
        b, a = iir_coeffs
        data = rng.standard_normal((100, 6))
        x = data[:, ::2]
        expected = filt(b, a, x.copy())

        filt_into(x, b, a, x)

        assert_allclose(data[:, ::2], expected, rtol=1e-14)


class TestValidation:
    """Preconditions fail with InvalidArgumentError before out is touched."""

    @pytest.fixture
    def out(self):
        return np.full(4, 7.0)

    @pytest.mark.parametrize(
        "b, a, match",
        [
            ([], [1.0], "numerator must be non-empty"),
            ([1.0], [], "denominator must be non-empty"),
            ([1.0], [0.0, 1.0], "leading denominator coefficient must be nonzero"),
        ],
    )
    def test_bad_coefficients(self, b, a, match, out):
        with pytest.raises(InvalidArgumentError, match=match):
            filt_into(out, b, a, np.ones(4))
        assert_array_equal(out, np.full(4, 7.0))

    def test_filt_rejects_bad_coefficients(self):
        with pytest.raises(InvalidArgumentError, match="numerator must be non-empty"):
            filt([], [1.0], np.ones(4))

    def test_output_shape_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="output size must match input size"):
            filt_into(np.zeros(5), [1.0], [1.0, 0.5], np.ones(4))

    def test_state_length_mismatch(self, out):
        with pytest.raises(InvalidArgumentError, match="initial state must have length"):
            filt_into(out, [1.0, 1.0, 1.0], [1.0, 0.5], np.ones(4), np.zeros(1))
        assert_array_equal(out, np.full(4, 7.0))

    def test_state_column_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="state column count mismatch"):
            filt([1.0, 1.0], [1.0, 0.5], np.ones((4, 3)), np.zeros((1, 2)))

    def test_single_column_state_not_broadcast(self):
        with pytest.raises(InvalidArgumentError, match="state column count mismatch"):
            filt([1.0, 1.0], [1.0, 0.5], np.ones((4, 3)), np.zeros((1, 1)))

    def test_integer_output_rejected(self):
        x = np.array([1, 0, 0, 0])
        with pytest.raises(InvalidArgumentError, match="cannot write float64 result"):
            filt_into(x, [1.0], [1.0, -0.5], x)
        assert_array_equal(x, [1, 0, 0, 0])

    def test_complex_into_real_output_rejected(self, out):
        with pytest.raises(InvalidArgumentError, match="cannot write complex128 result"):
            filt_into(out, [1.0j], [1.0], np.ones(4))
        assert_array_equal(out, np.full(4, 7.0))

    def test_float32_output_accepted(self):
        out = np.zeros(4, dtype=np.float32)
        filt_into(out, [1.0], [1.0, -0.5], [1.0, 0.0, 0.0, 0.0])
        assert_allclose(out, [1.0, 0.5, 0.25, 0.125])

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            filt([1.0], [0.0], np.ones(3))

    def test_zero_dimensional_signal(self):
        with pytest.raises(InvalidArgumentError, match="at least one dimension"):
            filt([1.0], [1.0, 0.5], 3.0)

    def test_two_dimensional_coefficients(self):
        with pytest.raises(InvalidArgumentError, match="numerator must be a scalar or 1D"):
            filt(np.ones((2, 2)), [1.0], np.ones(3))

    def test_bad_engine_name(self):
        with pytest.raises(ValueError, match="engine must be one of"):
            FilterConfig(engine="gpu")


class TestNumericPropagation:
    """NaN and Inf flow through as ordinary values."""

    def test_nan_propagates(self):
        y = filt([1.0], [1.0, -0.5], [np.nan, 0.0, 0.0])
        assert np.all(np.isnan(y))

    def test_inf_in_fir(self):
        y = filt([1.0, 1.0], [1.0], [np.inf, 0.0, 0.0])
        assert_array_equal(y, [np.inf, np.inf, 0.0])
