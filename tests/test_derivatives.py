"""Tests for central_diff and the gap-aware central_diff_segments.

Validates central differences on synthetic signals with known
analytical derivatives.

Reference: Winter DA. Biomechanics and Motor Control of Human
Movement. 4th ed. Wiley; 2009. Chapter 2.
"""

import numpy as np
import pytest

from gaitcore.derivatives import central_diff, central_diff_segments
from gaitcore.errors import DimensionMismatch, InvalidInput


class TestCentralDiff:

    # Linear signal -> constant first derivative everywhere
    def test_linear_first_order(self):
        dt = 0.01
        t = np.arange(50) * dt
        x = 3.0 * t + 1.0
        v = central_diff(x, 1, dt=dt)
        assert v.shape == x.shape
        np.testing.assert_allclose(v, 3.0, rtol=1e-9)

    # Quadratic signal -> constant second derivative, including boundaries
    def test_quadratic_second_order(self):
        dt = 0.01
        t = np.arange(50) * dt
        x = 0.5 * 500.0 * t**2
        a = central_diff(x, 2, dt=dt)
        np.testing.assert_allclose(a, 500.0, rtol=1e-6)

    def test_quadratic_first_order_interior_exact(self):
        dt = 0.1
        t = np.arange(20) * dt
        x = t**2
        v = central_diff(x, 1, dt=dt, padding=None)
        np.testing.assert_allclose(v, 2 * t[1:-1], atol=1e-10)

    def test_no_padding_is_two_shorter(self):
        x = np.arange(10.0)
        assert central_diff(x, padding=None).shape == (8,)
        assert central_diff(x, 2, padding=None).shape == (8,)

    def test_fill_padding(self):
        x = np.arange(10.0) ** 2
        v = central_diff(x, padding=np.nan)
        assert np.isnan(v[0]) and np.isnan(v[-1])
        assert np.all(np.isfinite(v[1:-1]))

        v0 = central_diff(x, padding=0.0)
        assert v0[0] == 0.0 and v0[-1] == 0.0

    def test_forward_backward_first_order_ends(self):
        x = np.array([0.0, 1.0, 4.0, 9.0, 16.0])
        v = central_diff(x, 1)
        assert v[0] == pytest.approx(1.0)
        assert v[-1] == pytest.approx(7.0)
        np.testing.assert_allclose(v[1:-1], [2.0, 4.0, 6.0])

    def test_sine_wave(self):
        fs = 500.0
        dt = 1.0 / fs
        omega = 2.0 * np.pi * 2.0
        t = np.arange(1000) * dt
        v = central_diff(np.sin(omega * t), 1, dt=dt, padding=None)
        np.testing.assert_allclose(v, omega * np.cos(omega * t[1:-1]), atol=1e-2)

    def test_two_dimensional_columns(self):
        t = np.arange(30, dtype=float)
        x = np.column_stack([2 * t, -t])
        v = central_diff(x)
        assert v.shape == x.shape
        np.testing.assert_allclose(v[:, 0], 2.0)
        np.testing.assert_allclose(v[:, 1], -1.0)

    def test_does_not_mutate_input(self):
        x = np.arange(10.0)
        before = x.copy()
        central_diff(x, 2)
        np.testing.assert_array_equal(x, before)

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_too_short_raises(self, n):
        with pytest.raises(DimensionMismatch):
            central_diff(np.arange(float(n)))

    def test_too_short_is_invalid_input(self):
        with pytest.raises(InvalidInput):
            central_diff([1.0, 2.0], 2)

    def test_bad_order_raises(self):
        with pytest.raises(InvalidInput, match="order"):
            central_diff(np.arange(10.0), 3)

    def test_bad_padding_raises(self):
        with pytest.raises(InvalidInput, match="padding"):
            central_diff(np.arange(10.0), padding="reflect")


class TestCentralDiffSegments:

    def test_gap_does_not_leak(self):
        x = 2.0 * np.arange(12, dtype=float)
        x[5] = np.nan
        v = central_diff_segments(x)
        assert np.isnan(v[5])
        np.testing.assert_allclose(np.delete(v, 5), 2.0)

    def test_matches_per_run_central_diff(self):
        rng = np.random.RandomState(42)
        x = np.cumsum(rng.randn(40))
        x[[10, 11, 25]] = np.nan
        v = central_diff_segments(x, 2, dt=0.5)
        np.testing.assert_allclose(v[:10], central_diff(x[:10], 2, dt=0.5))
        np.testing.assert_allclose(v[12:25], central_diff(x[12:25], 2, dt=0.5))
        np.testing.assert_allclose(v[26:], central_diff(x[26:], 2, dt=0.5))
        assert np.all(np.isnan(v[[10, 11, 25]]))

    def test_short_runs_are_nan(self):
        x = np.array([1.0, 2.0, np.nan, 1.0, 2.0, 3.0, 4.0])
        v = central_diff_segments(x)
        assert np.all(np.isnan(v[:3]))
        np.testing.assert_allclose(v[3:], 1.0)

    def test_none_values_are_missing(self):
        v = central_diff_segments([0.0, 1.0, 2.0, None, 4.0, 5.0, 6.0])
        assert np.isnan(v[3])
        np.testing.assert_allclose(v[[0, 1, 2, 4, 5, 6]], 1.0)

    def test_no_padding_marks_run_edges(self):
        x = np.array([0.0, 1.0, 2.0, 3.0, np.nan, 5.0, 6.0, 7.0])
        v = central_diff_segments(x, padding=None)
        assert v.shape == x.shape
        assert np.all(np.isnan(v[[0, 3, 4, 5, 7]]))
        np.testing.assert_allclose(v[[1, 2, 6]], 1.0)

    def test_two_dimensional(self):
        x = np.column_stack([np.arange(10.0), 3 * np.arange(10.0)])
        x[4, 1] = np.nan
        v = central_diff_segments(x)
        np.testing.assert_allclose(v[:, 0], 1.0)
        assert np.isnan(v[4, 1])
        np.testing.assert_allclose(np.delete(v[:, 1], 4), 3.0)

    def test_all_missing(self):
        v = central_diff_segments(np.full(6, np.nan))
        assert np.all(np.isnan(v))
