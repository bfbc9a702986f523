"""
test_sim.py
===========
Tests for simulating genealogies with msprime (core/sim_genealogy.py)
and for the Skyline likelihood of simulated genealogies.
"""

import numpy as np
import pytest
import toytree

from bskyline import EventSource, Skyline, SkylineError, sim_genealogy
from bskyline.core.sim_genealogy import get_demography
from bskyline.msc.kingman import get_piecewise_constant_loglik

pytestmark = pytest.mark.slow

SAMPLE_TIMES = np.linspace(0, 0.9, 10)


class TestSimGenealogy:

    def test_returns_toytree(self):
        tree = sim_genealogy([1.0], nsamples=8, seed=123)
        assert isinstance(tree, toytree.ToyTree)
        assert tree.ntips == 8

    def test_seeded(self):
        tree1 = sim_genealogy([1.0, 4.0], [1.0], nsamples=8, seed=123)
        tree2 = sim_genealogy([1.0, 4.0], [1.0], nsamples=8, seed=123)
        assert tree1.write() == tree2.write()

    def test_sample_times(self):
        tree = sim_genealogy([1.0], sample_times=SAMPLE_TIMES, seed=123)
        events = EventSource.from_tree(tree)
        np.testing.assert_allclose(events.sample_times, SAMPLE_TIMES, atol=1e-8)

    def test_bad_change_times(self):
        with pytest.raises(SkylineError):
            get_demography([1.0, 2.0])
        with pytest.raises(SkylineError):
            get_demography([1.0, 2.0, 3.0], [2.0, 1.0])

    def test_too_few_samples(self):
        with pytest.raises(SkylineError):
            sim_genealogy([1.0], nsamples=1)


@pytest.fixture(scope="module")
def tree():
    return sim_genealogy([1.0, 4.0], [1.0], sample_times=SAMPLE_TIMES, seed=321)


class TestSimulatedLikelihood:

    def test_matches_reference(self, tree):
        sky = Skyline(tree, popsizes=[1.0, 4.0, 2.0], countable="all")
        changes = [sky.get_change_time(i) for i in range(2)]
        events = sky.events
        expected = get_piecewise_constant_loglik(
            events.sample_times, events.coalescent_times, [1.0, 4.0, 2.0], changes)
        assert sky.log_likelihood() == pytest.approx(expected)

    def test_preferential_matches_reference(self, tree):
        sky = Skyline(
            tree,
            popsizes=[1.0, 4.0],
            sampling_intensity=[2.0, 5.0],
            countable="all",
        )
        events = sky.events
        expected = get_piecewise_constant_loglik(
            events.sample_times,
            events.coalescent_times,
            [1.0, 4.0],
            [sky.get_change_time(0)],
            intensities=[2.0, 5.0],
            sampling_change_times=[sky.get_sampling_change_time(0)],
        )
        assert sky.log_likelihood() == pytest.approx(expected)

    def test_true_sizes_fit_better(self, tree):
        sky = Skyline(tree, popsizes=[1.0, 4.0])
        true = sky.log_likelihood()
        sky.set_popsizes([50.0, 50.0])
        assert true > sky.log_likelihood()
