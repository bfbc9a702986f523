#!/usr/bin/env python

"""Redistribute group sizes until every group spans a minimum time.

This is a randomized heuristic. Each round moves one event into the
narrowest group from a group drawn with probability proportional to
its width (groups already at their lower size bound are never drawn).
There is no guarantee of convergence, so the number of rounds is
capped and failure raises a SkylineError.
"""

from typing import Callable, Optional
import numpy as np
from loguru import logger
from bskyline.utils.utils import SkylineError

logger = logger.bind(name="bskyline")


def get_group_widths(boundary_times: np.ndarray) -> np.ndarray:
    """Return the duration of each group, the first relative to 0."""
    return np.diff(boundary_times, prepend=0.)


def check_group_widths(boundary_times: np.ndarray, min_width: float) -> bool:
    """Return True if every group spans at least min_width."""
    return bool(np.all(get_group_widths(boundary_times) >= min_width))


def weighted_random_sample(
    weights: np.ndarray,
    rng: np.random.Generator,
    ) -> Optional[int]:
    """Return an index drawn with probability proportional to weights.

    A uniform draw is located by binary search in the normalized
    cumulative weights. Returns None if all weights are zero.
    """
    cumulative = np.cumsum(weights, dtype=float)
    if cumulative[-1] <= 0:
        return None
    cumulative /= cumulative[-1]
    idx = np.searchsorted(cumulative, rng.random(), side="right")
    return int(min(idx, cumulative.size - 1))


def redistribute_groups(
    sizes: np.ndarray,
    boundary_times: np.ndarray,
    rng: np.random.Generator,
    lower: int=1,
    upper: Optional[int]=None,
    ) -> np.ndarray:
    """Return new sizes after one round of redistribution.

    One event moves from a randomly drawn donor group into the
    narrowest group. The move is skipped if it would leave either
    group with a size outside (0, total), or push the receiving group
    above upper.
    """
    sizes = np.array(sizes, dtype=np.int64)
    widths = get_group_widths(boundary_times)
    total = sizes.sum()

    dim1 = int(np.argmin(widths))
    weights = np.where(sizes > lower, widths, 0.)
    dim2 = weighted_random_sample(weights, rng)
    if dim2 is None or dim1 == dim2:
        return sizes

    new1 = sizes[dim1] + 1
    new2 = sizes[dim2] - 1
    if not (0 < new1 < total and 0 < new2 < total):
        return sizes
    if upper is not None and new1 > upper:
        return sizes
    sizes[dim1] = new1
    sizes[dim2] = new2
    return sizes


def balance_groups(
    sizes: np.ndarray,
    get_times: Callable[[np.ndarray], np.ndarray],
    min_width: float,
    rng: np.random.Generator,
    max_attempts: int=10_000,
    lower: int=1,
    upper: Optional[int]=None,
    ) -> np.ndarray:
    """Return group sizes whose groups all span at least min_width.

    Parameters
    ----------
    sizes: np.ndarray
        Starting group sizes.
    get_times: Callable
        Function returning the group boundary times for some sizes.
    min_width: float
        Minimum duration of every group.
    rng: np.random.Generator
        Source of randomness for the donor draws.
    max_attempts: int
        Number of redistribution rounds before giving up.

    Raises
    ------
    SkylineError
        If the widths are still too narrow after max_attempts rounds.
    """
    sizes = np.array(sizes, dtype=np.int64)
    times = get_times(sizes)
    if check_group_widths(times, min_width):
        return sizes

    logger.warning(
        f"group boundary times {times.tolist()} leave a group narrower "
        f"than min_width={min_width}. Adjusting group sizes {sizes.tolist()}."
    )
    for _ in range(max_attempts):
        sizes = redistribute_groups(sizes, times, rng, lower, upper)
        times = get_times(sizes)
        if check_group_widths(times, min_width):
            logger.info(f"adjusted group sizes to {sizes.tolist()}")
            return sizes
    raise SkylineError(
        f"could not find group sizes with all widths >= {min_width} in "
        f"{max_attempts} attempts. Last boundary times: {times.tolist()}. "
        "Try a smaller min_width, fewer groups, or more attempts."
    )


if __name__ == "__main__":

    CTIMES = np.array([0.1, 0.2, 0.3, 0.4, 2.0, 5.0])
    SIZES = balance_groups(
        np.array([1, 1, 4]),
        lambda x: CTIMES[np.cumsum(x) - 1],
        min_width=0.3,
        rng=np.random.default_rng(123),
    )
    print(SIZES, CTIMES[np.cumsum(SIZES) - 1])
