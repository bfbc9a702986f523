"""
test_balance.py
===============
Tests for the randomized group size redistribution (core/balance.py).
"""

import numpy as np
import pytest

from bskyline import EventSource, Skyline, SkylineError
from bskyline.core.balance import (
    balance_groups,
    check_group_widths,
    get_group_widths,
    redistribute_groups,
    weighted_random_sample,
)
from conftest import get_levels


CTIMES = np.array([0.1, 0.2, 1.5, 2.0, 5.0])


def get_times(sizes):
    return CTIMES[np.cumsum(sizes) - 1]


class TestWidths:

    def test_first_width_from_zero(self):
        np.testing.assert_allclose(get_group_widths(np.array([1.5, 5.0])), [1.5, 3.5])

    def test_check(self):
        assert check_group_widths(np.array([1.5, 5.0]), 1.5)
        assert not check_group_widths(np.array([1.5, 5.0]), 1.6)
        assert check_group_widths(np.array([0.0, 5.0]), 0.0)


class TestWeightedRandomSample:

    def test_single_nonzero_weight(self):
        rng = np.random.default_rng(123)
        draws = {weighted_random_sample(np.array([0., 2., 0.]), rng) for _ in range(50)}
        assert draws == {1}

    def test_first_index(self):
        rng = np.random.default_rng(123)
        draws = {weighted_random_sample(np.array([3., 0., 0.]), rng) for _ in range(50)}
        assert draws == {0}

    def test_all_zero(self):
        rng = np.random.default_rng(123)
        assert weighted_random_sample(np.zeros(3), rng) is None

    def test_proportional(self):
        rng = np.random.default_rng(123)
        draws = [weighted_random_sample(np.array([1., 3.]), rng) for _ in range(4000)]
        assert np.mean(draws) == pytest.approx(0.75, abs=0.03)


class TestRedistribute:

    def test_moves_one_event_into_narrowest(self):
        rng = np.random.default_rng(1)
        sizes = np.array([3, 2])
        while True:
            new = redistribute_groups(sizes, get_times(sizes), rng)
            if not np.array_equal(new, sizes):
                break
        assert new.tolist() == [4, 1]
        assert sizes.tolist() == [3, 2]

    def test_donor_at_lower_bound_is_never_drawn(self):
        rng = np.random.default_rng(1)
        sizes = np.array([4, 1])
        for _ in range(50):
            new = redistribute_groups(sizes, np.array([0.5, 5.0]), rng)
            assert new.tolist() == [4, 1]

    def test_sizes_stay_within_total(self):
        rng = np.random.default_rng(7)
        times = np.sort(rng.uniform(0, 10, 20))
        sizes = np.array([5, 5, 5, 5])
        for _ in range(500):
            sizes = redistribute_groups(sizes, times[np.cumsum(sizes) - 1], rng)
            assert sizes.sum() == 20
            assert np.all(sizes > 0)
            assert np.all(sizes < 20)

    def test_upper_bound_respected(self):
        rng = np.random.default_rng(1)
        sizes = np.array([3, 2])
        for _ in range(50):
            new = redistribute_groups(sizes, get_times(sizes), rng, upper=3)
            assert new.tolist() == [3, 2]


class TestBalanceGroups:

    def test_already_valid(self, log_records):
        rng = np.random.default_rng(1)
        sizes = balance_groups(np.array([3, 2]), get_times, 1.0, rng)
        assert sizes.tolist() == [3, 2]
        assert "WARNING" not in get_levels(log_records)

    def test_converges(self, log_records):
        rng = np.random.default_rng(1)
        sizes = balance_groups(np.array([3, 2]), get_times, 1.6, rng)
        assert sizes.tolist() == [4, 1]
        assert check_group_widths(get_times(sizes), 1.6)
        assert "WARNING" in get_levels(log_records)

    @pytest.mark.parametrize("min_width", [0.5, 1.0, 1.3, 1.6, 3.0])
    @pytest.mark.parametrize("start", [
        [1, 4], [2, 3], [3, 2], [4, 1],
        [1, 1, 3], [1, 2, 2], [2, 2, 1], [3, 1, 1], [1, 3, 1],
    ], ids=str)
    def test_success_meets_min_width(self, start, min_width):
        for seed in range(5):
            rng = np.random.default_rng(seed)
            try:
                sizes = balance_groups(
                    np.array(start), get_times, min_width, rng, max_attempts=200)
            except SkylineError:
                continue
            assert sizes.sum() == sum(start)
            assert sizes.size == len(start)
            assert sizes.min() >= 1
            assert np.all(get_group_widths(get_times(sizes)) >= min_width)

    def test_gives_up(self):
        rng = np.random.default_rng(1)
        with pytest.raises(SkylineError, match="Last boundary times"):
            balance_groups(np.array([3, 2]), get_times, 10.0, rng, max_attempts=100)


class TestSkylineMinWidth:

    @pytest.fixture
    def events(self):
        return EventSource.from_times([0] * 6, CTIMES)

    def test_init_adjusts_sizes(self, events):
        sky = Skyline(events, popsizes=[1., 1.], min_width=1.6, seed=123)
        assert sky.popsize_group_sizes.tolist() == [4, 1]
        assert np.isfinite(sky.log_likelihood())

    def test_violation_after_change_is_rejected(self, events):
        sky = Skyline(events, popsizes=[1., 1.], min_width=1.6, seed=123)
        sky.set_popsize_group_sizes([3, 2])
        assert sky.log_likelihood() == -np.inf
        sky.set_popsize_group_sizes([4, 1])
        assert np.isfinite(sky.log_likelihood())

    def test_unsatisfiable_raises(self, events):
        with pytest.raises(SkylineError, match="Last boundary times"):
            Skyline(events, popsizes=[1., 1.], min_width=10., max_attempts=50, seed=123)
