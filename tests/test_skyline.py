"""
test_skyline.py
===============
Tests for Skyline construction, validation, setters, and reporting
(likelihood/skyline.py).
"""

import numpy as np
import pytest

from bskyline import Countable, EventSource, Skyline, SkylineError
from conftest import get_levels


@pytest.fixture
def sky(dengue5):
    return Skyline(
        dengue5,
        popsizes=[1, 2],
        popsize_group_sizes=[6, 3],
        sampling_intensity=[2],
        countable="all",
    )


class TestConfiguration:

    def test_defaults(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1, 2])
        assert sky.config.countable == Countable.COALESCENT
        assert sky.config.min_width == 0
        assert sky.config.max_attempts == 10_000
        assert not sky.preferential
        assert not sky.log_space
        assert sky.dimension == 2
        assert sky.sampling_dimension == 0
        assert sky.popsize_group_sizes.tolist() == [2, 2]

    def test_countable_flag(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1, 2], countable=Countable.ALL)
        assert sky.popsize_group_sizes.tolist() == [5, 4]

    def test_bad_countable(self, dengue5):
        with pytest.raises(SkylineError, match="countable"):
            Skyline(dengue5, popsizes=[1], countable="samples")

    def test_popsizes_exclusive(self, dengue5):
        with pytest.raises(SkylineError, match="Exactly one"):
            Skyline(dengue5, popsizes=[1], log_popsizes=[0])
        with pytest.raises(SkylineError, match="Exactly one"):
            Skyline(dengue5)

    def test_group_sizes_dimension(self, dengue5):
        with pytest.raises(SkylineError, match="length"):
            Skyline(dengue5, popsizes=[1, 2], popsize_group_sizes=[1, 1, 2])

    def test_more_groups_than_events(self, dengue5):
        with pytest.raises(SkylineError, match="more groups"):
            Skyline(dengue5, popsizes=[1, 2, 3, 4, 5])

    def test_sum_mismatch_falls_back(self, dengue5, log_records):
        sky = Skyline(
            dengue5, popsizes=[1, 2], popsize_group_sizes=[5, 5], countable="all")
        assert sky.popsize_group_sizes.tolist() == [5, 4]
        assert "WARNING" in get_levels(log_records)

    def test_sizes_and_epochs_exclusive(self, dengue5):
        with pytest.raises(SkylineError, match="cannot be used together"):
            Skyline(
                dengue5, popsizes=[1, 2],
                popsize_group_sizes=[2, 2], popsize_epoch_times=[16.5])

    def test_epoch_times_dimension(self, dengue5):
        with pytest.raises(SkylineError, match="change times"):
            Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[10, 16.5])

    def test_epoch_times_outside_tree(self, dengue5):
        with pytest.raises(SkylineError, match="within"):
            Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[30])

    def test_empty_epoch(self, dengue5):
        with pytest.raises(SkylineError, match="no events"):
            Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[5])

    def test_sampling_args_require_intensity(self, dengue5):
        with pytest.raises(SkylineError, match="sampling_intensity"):
            Skyline(dengue5, popsizes=[1], sampling_group_sizes=[5])
        with pytest.raises(SkylineError, match="sampling_intensity"):
            Skyline(dengue5, popsizes=[1], sampling_epoch_times=[5])

    def test_sampling_epochs(self, dengue5):
        sky = Skyline(
            dengue5, popsizes=[1], sampling_intensity=[1, 2],
            sampling_epoch_times=[9.0])
        assert sky.sampling_group_sizes.tolist() == [2, 3]

    def test_unknown_kwargs_warn(self, dengue5, log_records):
        Skyline(dengue5, popsizes=[1], Ne=1000)
        assert "WARNING" in get_levels(log_records)

    def test_bad_bounds(self, dengue5):
        with pytest.raises(SkylineError, match="upper"):
            Skyline(dengue5, popsizes=[1], popsize_bounds=(3, 2))


class TestEvaluationRejection:

    def test_invalid_popsize(self, sky):
        sky.set_popsizes([-1, 2])
        assert sky.log_likelihood() == -np.inf

    def test_invalid_intensity(self, sky):
        sky.set_sampling_intensity([-0.5])
        assert sky.log_likelihood() == -np.inf

    def test_group_size_bounds(self, dengue5):
        sky = Skyline(
            dengue5, popsizes=[1, 2], popsize_group_sizes=[6, 3],
            countable="all", popsize_bounds=(2, 7))
        assert np.isfinite(sky.log_likelihood())
        sky.set_popsize_group_sizes([8, 1])
        assert sky.log_likelihood() == -np.inf

    @pytest.mark.parametrize("sizes", [[5, -1], [4, 0], [-2, 6]])
    def test_nonpositive_popsize_group_size(self, dengue5, sizes):
        sky = Skyline(dengue5, popsizes=[1, 2], popsize_group_sizes=[2, 2])
        sky.set_popsize_group_sizes(sizes)
        assert sky.popsize_groups is None
        assert sky.log_likelihood() == -np.inf

    @pytest.mark.parametrize("sizes", [[6, -1], [5, 0]])
    def test_nonpositive_sampling_group_size(self, dengue5, sizes):
        sky = Skyline(
            dengue5, popsizes=[1, 2], sampling_intensity=[1, 2],
            sampling_group_sizes=[3, 2])
        sky.set_sampling_group_sizes(sizes)
        assert sky.log_likelihood() == -np.inf
        sky.set_sampling_group_sizes([3, 2])
        assert np.isfinite(sky.log_likelihood())

    def test_epoch_empty_after_tree_change(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[16.5])
        assert np.isfinite(sky.log_likelihood())
        # all coalescences now older than 16.5
        sky.set_tree(EventSource.from_times([0] * 5, [17, 18, 19, 20]))
        assert sky.log_likelihood() == -np.inf

    def test_epoch_beyond_new_tree_height(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[20])
        sky.set_tree("((((a:1,b:3):1,c:2):1,d:2):1,e:5);")
        assert sky.log_likelihood() == -np.inf


class TestSetters:

    def test_wrong_dimensions(self, sky):
        with pytest.raises(SkylineError):
            sky.set_popsizes([1, 2, 3])
        with pytest.raises(SkylineError):
            sky.set_sampling_intensity([1, 2])
        with pytest.raises(SkylineError):
            sky.set_popsize_group_sizes([6, 2])

    def test_log_setters(self, sky):
        sky.set_log_popsizes(np.log([1, 2]))
        assert sky.log_likelihood() == pytest.approx(-56.2274112777602, abs=1e-10)

    def test_linear_setter_in_log_space(self, dengue5):
        sky = Skyline(
            dengue5, log_popsizes=[0, 0], popsize_group_sizes=[6, 3],
            sampling_intensity=[2], countable="all")
        sky.set_popsizes([1, 2])
        assert sky.log_likelihood() == pytest.approx(-56.2274112777602, abs=1e-10)
        np.testing.assert_allclose(sky.popsizes, [1, 2])

    def test_epoch_time_setter(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1, 2], popsize_epoch_times=[16.5])
        sky.set_popsize_epoch_times([15.5])
        assert sky.popsize_group_sizes.tolist() == [1, 3]
        with pytest.raises(SkylineError, match="derived"):
            sky.set_popsize_group_sizes([2, 2])

    def test_sampling_setters_require_intensity(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1])
        with pytest.raises(SkylineError):
            sky.set_sampling_intensity([1])
        with pytest.raises(SkylineError):
            sky.set_sampling_group_sizes([5])


class TestReporting:

    def test_change_times(self, sky):
        assert sky.get_change_time(0) == 16
        assert sky.get_change_time(1) == 22
        assert sky.get_sampling_change_time(0) == 17

    def test_popsize_lookup(self, sky):
        assert sky.get_popsize(0) == 1
        assert sky.get_popsize(16) == 1
        assert sky.get_popsize(16.5) == 2
        assert sky.get_popsize(100) == 2

    def test_popsize_lookup_log_space(self, dengue5):
        sky = Skyline(dengue5, log_popsizes=np.log([1, 2]))
        assert sky.get_popsize(20) == pytest.approx(2)

    def test_sampling_intensity_lookup(self, dengue5):
        sky = Skyline(
            dengue5, popsizes=[1], sampling_intensity=[3, 4],
            sampling_group_sizes=[3, 2])
        assert sky.get_sampling_intensity(0) == 3
        assert sky.get_sampling_intensity(10) == 3
        assert sky.get_sampling_intensity(12) == 4
        assert sky.get_sampling_intensity(17) == 4
        assert sky.get_sampling_intensity(17.5) == 0

    def test_no_sampling(self, dengue5):
        sky = Skyline(dengue5, popsizes=[1])
        assert sky.get_sampling_intensity(0) == 0

    def test_segment_table(self, sky):
        table = sky.get_segment_table()
        assert len(table) == 9
        assert table.group.tolist() == [0] * 6 + [1] * 3
        assert table.intensity.tolist() == [2.0] * 8 + [0.0]
        assert table.loglik.sum() == pytest.approx(sky.log_likelihood())

    def test_group_tables(self, sky):
        table = sky.get_group_table()
        assert table["size"].tolist() == [6, 3]
        assert table.value.tolist() == [1, 2]
        assert sky.get_sampling_group_table()["size"].tolist() == [5]

    def test_str(self, sky):
        text = str(sky)
        assert "popsize groups" in text
        assert "sampling epochs" in text
        assert "Skyline(dimension=2" in repr(sky)
