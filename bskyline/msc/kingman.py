#!/usr/bin/env python

"""Kingman n-coalescent probability functions.

Direct calculations of the coalescent density of a genealogy in a
single haploid population, computed by integrating over a time grid
rather than over skyline segments. These are slower than the Skyline
class but simple enough to check by hand, and are used to verify it.

References
----------
- Drummond et al. (2005) Bayesian coalescent inference of past
  population dynamics from molecular sequences.
- Volz and Frost (2014) Sampling through time and phylodynamic
  inference with coalescent and birth-death models.
"""

from typing import Optional, Sequence
import numpy as np
from scipy import special, stats


def _get_piecewise_value(
    values: np.ndarray,
    change_times: np.ndarray,
    time: float,
    ) -> float:
    """Return the value in effect at time (left-continuous)."""
    idx = np.searchsorted(change_times, time, side="left")
    return values[min(idx, values.size - 1)]


def get_gene_tree_log_prob_single_pop(neff: float, coal_times: np.ndarray) -> float:
    r"""Return log prob density of a gene tree in a single population.

    All samples are at time 0 and the pairwise coalescence rate is
    1 / neff. The topology term is not included, so this is the
    density of the ordered coalescent times:

    $ \sum_k -\ln(N) - {k \choose 2} t_k / N $

    Parameters
    ----------
    neff: float
        Effective population size
    coal_times: np.ndarray
        Coalescent times of all internal nodes of the tree.

    Example
    -------
    >>> gtree = bskyline.sim_genealogy(popsizes=[1000], nsamples=10, seed=1)
    >>> coals = np.array(sorted(gtree.get_node_data("height")[gtree.ntips:]))
    >>> get_gene_tree_log_prob_single_pop(1000, coals)
    """
    coal_times = np.sort(coal_times)
    nlineages = np.arange(coal_times.size + 1, 1, -1)
    npairs = special.comb(nlineages, 2)
    waits = np.diff(coal_times, prepend=0.)
    return float(np.sum(-np.log(neff) - npairs * waits / neff))


def get_piecewise_constant_loglik(
    sample_times: Sequence[float],
    coal_times: Sequence[float],
    popsizes: Sequence[float],
    change_times: Sequence[float]=(),
    intensities: Optional[Sequence[float]]=None,
    sampling_change_times: Sequence[float]=(),
    ) -> float:
    """Return the log density of a serially sampled genealogy.

    Population size (and, if intensities is entered, the sampling
    intensity) is piecewise-constant with changes at the entered
    times. A time exactly on a change time takes the earlier value.
    Sampling is a Poisson process with rate intensity * N up to the
    oldest sample, and zero afterwards.

    Parameters
    ----------
    sample_times: Sequence[float]
        Tip times, measured backwards from the youngest (0).
    coal_times: Sequence[float]
        Internal node times.
    popsizes: Sequence[float]
        Population size of each interval between change_times.
    change_times: Sequence[float]
        len(popsizes) - 1 increasing times.
    intensities: Sequence[float] or None
        Sampling intensity of each interval between sampling_change_times.
    sampling_change_times: Sequence[float]
        len(intensities) - 1 increasing times.
    """
    stimes = np.sort(np.array(sample_times, dtype=float))
    ctimes = np.sort(np.array(coal_times, dtype=float))
    popsizes = np.array(popsizes, dtype=float)
    change_times = np.array(change_times, dtype=float)
    sampling_change_times = np.array(sampling_change_times, dtype=float)
    if intensities is not None:
        intensities = np.array(intensities, dtype=float)
    tmrca = ctimes[-1]

    def get_intensity(time: float) -> float:
        if intensities is None or time > stimes[-1]:
            return 0.
        return _get_piecewise_value(intensities, sampling_change_times, time)

    # time grid of every event and change
    grid = np.concatenate([[0.], stimes, ctimes, change_times, sampling_change_times])
    grid = np.unique(grid[grid <= tmrca])

    loglik = 0.
    for start, end in zip(grid[:-1], grid[1:]):
        mid = (start + end) / 2.
        neff = _get_piecewise_value(popsizes, change_times, mid)
        nlineages = np.sum(stimes <= start) - np.sum(ctimes <= start)
        npairs = special.comb(nlineages, 2)
        if npairs:
            loglik += stats.expon.logsf(end - start, scale=neff / npairs)
        rate = get_intensity(mid) * neff
        if rate > 0:
            loglik += stats.expon.logsf(end - start, scale=1 / rate)

    for time in ctimes:
        loglik -= np.log(_get_piecewise_value(popsizes, change_times, time))
    if intensities is not None:
        for time in stimes:
            neff = _get_piecewise_value(popsizes, change_times, time)
            loglik += np.log(get_intensity(time) * neff)
    return float(loglik)


if __name__ == "__main__":

    CTIMES = np.array([1., 3.])
    print(get_gene_tree_log_prob_single_pop(2., CTIMES))
    print(get_piecewise_constant_loglik([0, 0, 0], CTIMES, [2.]))
    print(get_piecewise_constant_loglik([0, 0, 2], CTIMES, [1., 2.], [1.5], [0.5]))
