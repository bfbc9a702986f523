#!/usr/bin/env python

"""Jit-compiled log-likelihood of segments.

The log-likelihood of a segment of width w with k lineages, population
size N and sampling intensity beta is:

    -w * (C(k,2) / N + beta * N)
    - ln(N)           if the segment ends in a coalescence
    + ln(beta * N)    if the segment ends in a sample

Without preferential sampling all beta terms are dropped. With the
population size in log space, 1 / N is computed as exp(-logN).
Invalid values return -inf rather than raising or returning nan.
"""

import numpy as np
from numba import njit
from bskyline.core.events import EventKind

COALESCENT = int(EventKind.COALESCENT)
SAMPLE = int(EventKind.SAMPLE)


@njit
def get_segment_loglik(
    width: float,
    nlineages: int,
    kind: int,
    popsize: float,
    intensity: float,
    log_space: bool,
    preferential: bool,
    ) -> float:
    """Return the log-likelihood of a single segment.

    Parameters
    ----------
    width: float
        Duration of the segment.
    nlineages: int
        Number of lineages during the segment.
    kind: int
        EventKind code of the event ending the segment.
    popsize: float
        Population size N, or log(N) if log_space.
    intensity: float
        Sampling intensity beta (ignored unless preferential).
    log_space: bool
        Whether popsize is log(N).
    preferential: bool
        Whether to include the sampling intensity terms.
    """
    if not np.isfinite(popsize):
        return -np.inf
    if preferential and not np.isfinite(intensity):
        return -np.inf
    if log_space:
        logn = popsize
        inverse = np.exp(-popsize)
        size = np.exp(popsize)
    else:
        if popsize <= 0:
            return -np.inf
        logn = np.log(popsize)
        inverse = 1. / popsize
        size = popsize

    if kind == COALESCENT and nlineages < 2:
        return -np.inf

    npairs = nlineages * (nlineages - 1) / 2.
    loglik = -width * npairs * inverse
    if kind == COALESCENT:
        loglik -= logn

    if preferential:
        if intensity < 0:
            return -np.inf
        loglik -= width * intensity * size
        if kind == SAMPLE:
            if intensity * size <= 0:
                return -np.inf
            loglik += np.log(intensity) + logn
    return loglik


@njit
def get_segments_loglik(
    widths: np.ndarray,
    lineages: np.ndarray,
    kinds: np.ndarray,
    popsizes: np.ndarray,
    intensities: np.ndarray,
    log_space: bool,
    preferential: bool,
    ) -> float:
    """Return the summed log-likelihood of a sequence of segments.

    popsizes and intensities hold the parameter value in effect for
    each segment. Returns -inf as soon as any segment is -inf.
    """
    loglik = 0.
    for idx in range(widths.size):
        value = get_segment_loglik(
            widths[idx], lineages[idx], kinds[idx],
            popsizes[idx], intensities[idx],
            log_space, preferential,
        )
        if value == -np.inf:
            return -np.inf
        loglik += value
    return loglik


if __name__ == "__main__":

    print(get_segment_loglik(1.0, 3, COALESCENT, 2.0, 0.0, False, False))
    print(get_segment_loglik(1.0, 1, COALESCENT, 2.0, 0.0, False, False))
