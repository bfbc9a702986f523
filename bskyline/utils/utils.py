#!/usr/bin/env python

"""
Miscellaneous functions
"""

from typing import Optional, Sequence, Tuple, Union
import numpy as np


class SkylineError(Exception):
    """Raised for invalid skyline configurations or inputs."""
    def __init__(self, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)


def get_rng(
    seed: Union[int, np.random.Generator, None]=None,
    ) -> np.random.Generator:
    """Return a numpy Generator from a seed or an existing Generator."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def get_bounds(
    bounds: Optional[Sequence[Optional[int]]],
    ) -> Tuple[int, Optional[int]]:
    """Return (lower, upper) group size bounds with lower >= 1.

    Parameters
    ----------
    bounds: Sequence or None
        A (lower, upper) pair where either entry can be None. Upper
        None means unbounded.
    """
    if bounds is None:
        return 1, None
    if len(bounds) != 2:
        raise SkylineError(
            f"group size bounds must be a (lower, upper) pair, got {bounds}")
    lower, upper = bounds
    lower = 1 if lower is None else max(1, int(lower))
    upper = None if upper is None else int(upper)
    if upper is not None and upper < lower:
        raise SkylineError(
            f"upper group size bound ({upper}) is below lower ({lower}).")
    return lower, upper


def as_float_array(values: Sequence[float], name: str) -> np.ndarray:
    """Return a 1-d float copy of values, or raise SkylineError."""
    arr = np.array(values, dtype=float, ndmin=1)
    if arr.ndim != 1:
        raise SkylineError(f"{name} must be one-dimensional.")
    return arr


if __name__ == "__main__":
    print(get_bounds((0, 10)))
    print(get_rng(123).random())
