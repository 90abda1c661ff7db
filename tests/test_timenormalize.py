"""Tests for time normalization of gait cycles."""

import numpy as np
import pytest

from gaitcore.errors import InvalidInput
from gaitcore.timenormalize import (
    cycle_times_to_indices,
    normalized_time,
    time_normalize,
    times_to_indices,
)


class TestNormalizedTime:

    def test_default_length(self):
        t1 = 0.37
        nt = normalized_time(t1, t1 + 1)
        assert len(nt) == 100
        assert nt[0] == t1
        assert nt[-1] < t1 + 1

    def test_custom_length(self):
        nt = normalized_time(2.0, 3.0, 65)
        assert len(nt) == 65
        assert nt[0] == 2.0
        assert nt[-1] < 3.0
        np.testing.assert_allclose(np.diff(nt), 1.0 / 65)

    def test_invalid_length(self):
        with pytest.raises(InvalidInput):
            normalized_time(0.0, 1.0, 0)


class TestTimeNormalize:

    def test_periodic_round_trip(self):
        two_pi = 2 * np.pi
        t200 = np.concatenate([normalized_time(0, two_pi, 200), normalized_time(two_pi, 2 * two_pi, 200)])
        t100 = np.concatenate([normalized_time(0, two_pi, 100), normalized_time(two_pi, 2 * two_pi, 100)])

        normx200 = time_normalize(np.sin(t200), [0, 200, 400], 100)

        assert normx200.shape == (200,)
        np.testing.assert_allclose(normx200, np.sin(t100), atol=1e-10)

    def test_fractional_boundaries_match_analytic(self):
        period = 100.0
        idx = np.arange(401, dtype=float)
        signal = np.sin(2 * np.pi * idx / period)
        bounds = [0.0, 137.5, 275.0, 399.0]

        normed = time_normalize(signal, bounds, 100)

        t = np.concatenate([normalized_time(bounds[i], bounds[i + 1], 100) for i in range(3)])
        np.testing.assert_allclose(normed, np.sin(2 * np.pi * t / period), atol=1e-5)

    def test_two_dimensional(self):
        idx = np.arange(300, dtype=float)
        sig = np.column_stack([np.sin(idx / 20), np.cos(idx / 20)])
        normed = time_normalize(sig, [0, 90, 200, 299], 50)
        assert normed.shape == (150, 2)
        np.testing.assert_allclose(normed[:, 0], time_normalize(sig[:, 0], [0, 90, 200, 299], 50))
        np.testing.assert_allclose(normed[:, 1], time_normalize(sig[:, 1], [0, 90, 200, 299], 50))

    def test_locates_events_in_normalized_cycle(self):
        signal = np.arange(1, 301) * 0.01
        normed = time_normalize(signal, [131, 245])
        times = np.array([1.56, 2.0])
        idx = times_to_indices(1.32, 2.46, times)
        np.testing.assert_allclose(normed[idx], times, atol=0.02)

    def test_does_not_mutate_input(self):
        sig = np.sin(np.arange(50) / 5.0)
        before = sig.copy()
        time_normalize(sig, [0, 20, 40])
        np.testing.assert_array_equal(sig, before)

    @pytest.mark.parametrize("bounds", [[-1, 10], [0, 52], [10]])
    def test_bad_boundaries_raise(self, bounds):
        with pytest.raises(InvalidInput):
            time_normalize(np.arange(50.0), bounds)

    def test_non_increasing_boundaries_raise(self):
        with pytest.raises(InvalidInput, match="increasing"):
            time_normalize(np.arange(50.0), [0, 30, 20])

    def test_final_boundary_may_equal_length(self):
        normed = time_normalize(np.arange(50.0), [0, 50], 25)
        np.testing.assert_allclose(normed, np.arange(0, 50, 2.0), atol=1e-10)

    def test_missing_values_raise(self):
        sig = np.arange(50.0)
        sig[10] = np.nan
        with pytest.raises(InvalidInput, match="missing"):
            time_normalize(sig, [0, 40])


class TestTimesToIndices:

    def test_first_normalized_time_at_or_after(self):
        idx = times_to_indices(0.0, 1.0, [0.251, 0.749])
        np.testing.assert_array_equal(idx, [26, 75])

    def test_custom_length(self):
        idx = times_to_indices(1.0, 2.0, [1.15, 1.85], 10)
        np.testing.assert_array_equal(idx, [2, 9])

    def test_endpoints(self):
        idx = times_to_indices(0.0, 1.0, [0.0, 1.0])
        np.testing.assert_array_equal(idx, [0, 100])

    def test_t1_not_less_than_t2(self):
        with pytest.raises(InvalidInput, match="t1"):
            times_to_indices(1.0, 1.0, [1.0])

    def test_time_outside_cycle(self):
        with pytest.raises(InvalidInput, match="between"):
            times_to_indices(0.0, 1.0, [1.5])


class TestCycleTimesToIndices:

    def test_offsets_per_cycle(self):
        idx = cycle_times_to_indices([0.0, 1.0, 2.0], [0.505, 1.505])
        np.testing.assert_array_equal(idx, [51, 151])

    def test_shared_boundary_maps_to_next_cycle_start(self):
        idx = cycle_times_to_indices([0.0, 1.0, 2.0], [1.0])
        np.testing.assert_array_equal(idx, [100])

    def test_outside_raises(self):
        with pytest.raises(InvalidInput):
            cycle_times_to_indices([0.0, 1.0, 2.0], [2.5])
