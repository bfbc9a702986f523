#!/usr/bin/env python

"""Simulate a serially sampled genealogy under a skyline demography.

Genealogies are simulated in msprime in a single haploid population
whose size is piecewise-constant backwards in time, so the pairwise
coalescence rate in each interval is 1 / N, as in the Skyline
likelihood.
"""

from typing import Optional, Sequence, Union
import numpy as np
import msprime as ms
import toytree
from loguru import logger
from bskyline.utils.utils import SkylineError, get_rng

logger = logger.bind(name="bskyline")


def get_demography(
    popsizes: Sequence[float],
    change_times: Optional[Sequence[float]]=None,
    ) -> ms.Demography:
    """Return a single-population msprime Demography.

    Parameters
    ----------
    popsizes: Sequence[float]
        Population size in each interval, starting from the present.
    change_times: Sequence[float] or None
        len(popsizes) - 1 increasing times at which the size changes.
    """
    popsizes = np.array(popsizes, dtype=float, ndmin=1)
    change_times = np.array(
        change_times if change_times is not None else [], dtype=float)
    if change_times.size != popsizes.size - 1:
        raise SkylineError(
            f"{popsizes.size} popsizes require {popsizes.size - 1} change "
            f"times, got {change_times.size}.")
    if np.any(np.diff(change_times) <= 0) or np.any(change_times <= 0):
        raise SkylineError("change_times must be positive and increasing.")

    demography = ms.Demography()
    demography.add_population(name="pop0", initial_size=popsizes[0])
    for time, size in zip(change_times, popsizes[1:]):
        demography.add_population_parameters_change(
            time=time, initial_size=size, population="pop0")
    return demography


def sim_genealogy(
    popsizes: Sequence[float],
    change_times: Optional[Sequence[float]]=None,
    sample_times: Optional[Sequence[float]]=None,
    nsamples: int=10,
    seed: Union[int, np.random.Generator, None]=None,
    precision: int=14,
    ) -> toytree.ToyTree:
    """Return a ToyTree simulated under a piecewise-constant size.

    Parameters
    ----------
    popsizes: Sequence[float]
        Population size in each interval, starting from the present.
    change_times: Sequence[float] or None
        len(popsizes) - 1 times at which the population size changes.
    sample_times: Sequence[float] or None
        Time of each sample. If None, nsamples samples at time 0.
    nsamples: int
        Number of samples when sample_times is None.
    seed: int or np.random.Generator
        Seed for the msprime simulation.
    precision: int
        Decimal precision of branch lengths in the newick.

    Example
    -------
    >>> tree = sim_genealogy([1e4, 5e4], [2e4], sample_times=[0] * 8 + [1e3] * 4)
    >>> sky = bskyline.Skyline(tree, popsizes=[1e4, 5e4])
    """
    if sample_times is None:
        sample_times = np.zeros(nsamples)
    sample_times = np.array(sample_times, dtype=float, ndmin=1)
    if sample_times.size < 2:
        raise SkylineError("at least two samples are required.")
    if np.any(sample_times < 0):
        raise SkylineError("sample_times must be >= 0.")

    times, counts = np.unique(sample_times, return_counts=True)
    samples = [
        ms.SampleSet(
            num_samples=int(count), population="pop0",
            time=float(time), ploidy=1,
        ) for time, count in zip(times, counts)
    ]
    rseed = int(get_rng(seed).integers(1, 2**31))
    tree_seq = ms.sim_ancestry(
        samples=samples,
        demography=get_demography(popsizes, change_times),
        ploidy=1,
        random_seed=rseed,
    )
    mstree = tree_seq.first()
    names = {i: f"r{i}" for i in range(tree_seq.num_samples)}
    nwk = mstree.as_newick(node_labels=names, precision=precision)
    logger.debug(f"simulated genealogy with tmrca={mstree.time(mstree.root):.3f}")
    return toytree.tree(nwk)


if __name__ == "__main__":

    TREE = sim_genealogy([1.0, 5.0], [1.0], sample_times=[0] * 6 + [0.5] * 4, seed=123)
    print(TREE.write())
