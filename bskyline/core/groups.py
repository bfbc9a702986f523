#!/usr/bin/env python

"""Partition segments into contiguous groups of countable events.

A group (or epoch) spans a run of consecutive countable events and is
governed by one parameter value. The group sizes are either given
explicitly, derived from epoch change times, or set to an equal-size
("robust") design.

Every segment is assigned to the group of the next countable event at
or after it: a countable segment belongs to the group containing its
own event, and a non-countable segment (e.g., a sample when only
coalescences are counted) belongs to the group of the next countable
event. Segments after the last countable event are clamped to the last
group and flagged as not covered. Groups defined by epoch change times
instead assign each segment by its end time.
"""

from typing import Optional, Sequence, Tuple
from dataclasses import dataclass
import numpy as np
import pandas as pd
from loguru import logger
from bskyline.core.segments import Segments
from bskyline.utils.utils import SkylineError

logger = logger.bind(name="bskyline")


@dataclass(frozen=True)
class Groups:
    """Group sizes and the segment-to-group assignment they imply."""
    sizes: np.ndarray
    """: Number of countable events in each group."""
    cumulative: np.ndarray
    """: Cumulative group sizes, strictly increasing, ending at total."""
    boundary_times: np.ndarray
    """: Time of the last countable event of each group."""
    segment_groups: np.ndarray
    """: Group index of each segment."""
    covered: np.ndarray
    """: False for segments after the last countable event."""

    @property
    def ngroups(self) -> int:
        return self.sizes.size

    @property
    def total(self) -> int:
        """Number of countable events."""
        return int(self.cumulative[-1])

    @property
    def widths(self) -> np.ndarray:
        """Duration of each group, the first measured from time 0."""
        return np.diff(self.boundary_times, prepend=0.)

    def get_group(self, time: float) -> int:
        """Return the index of the group containing time.

        A time exactly on a boundary belongs to the earlier group, and
        times beyond the last boundary are clamped to the last group.
        """
        idx = np.searchsorted(self.boundary_times, time, side="left")
        return int(min(idx, self.ngroups - 1))

    def get_table(self, values: Optional[np.ndarray]=None) -> pd.DataFrame:
        """Return a DataFrame with one row per group."""
        starts = np.concatenate([[0.], self.boundary_times[:-1]])
        data = pd.DataFrame({
            "size": self.sizes,
            "start": starts,
            "end": self.boundary_times,
            "width": self.widths,
        })
        if values is not None:
            data["value"] = values
        return data


def get_robust_group_sizes(
    nevents: int,
    ngroups: int,
    lower: int=1,
    upper: Optional[int]=None,
    ) -> np.ndarray:
    """Return group sizes that split nevents as equally as possible.

    Each group gets nevents // ngroups events and the first
    nevents % ngroups groups get one more.

    Example
    -------
    >>> get_robust_group_sizes(11, 3)
    >>> # array([4, 4, 3])
    """
    if ngroups > nevents:
        raise SkylineError(
            f"cannot split {nevents} events into {ngroups} groups.")
    sizes = np.repeat(nevents // ngroups, ngroups)
    sizes[:nevents % ngroups] += 1
    if sizes.min() < lower or (upper is not None and sizes.max() > upper):
        logger.warning(
            f"equal-size groups {sizes.tolist()} fall outside the group "
            f"size bounds ({lower}, {upper})."
        )
    return sizes


def check_group_sizes(
    sizes: Optional[Sequence[int]],
    ngroups: int,
    nevents: int,
    lower: int=1,
    upper: Optional[int]=None,
    ) -> np.ndarray:
    """Return validated group sizes, or a robust design.

    If sizes is None, or does not sum to nevents, the robust design is
    returned (the latter with a logged warning).

    Raises
    ------
    SkylineError
        If the number of sizes does not match ngroups, if there are
        more groups than countable events, or if any size is < 1.
    """
    if ngroups > nevents:
        raise SkylineError(
            f"there are more groups ({ngroups}) than countable "
            f"events ({nevents}).")
    if sizes is None:
        return get_robust_group_sizes(nevents, ngroups, lower, upper)

    sizes = np.array(sizes, ndmin=1)
    if not np.all(sizes == np.round(sizes)):
        raise SkylineError(f"group sizes must be integers, got {sizes}.")
    sizes = sizes.astype(np.int64)
    if sizes.size != ngroups:
        raise SkylineError(
            f"group sizes have length {sizes.size}, but there are "
            f"{ngroups} parameter values.")
    if sizes.min() < 1:
        raise SkylineError(f"group sizes must be >= 1, got {sizes.tolist()}.")
    if sizes.sum() != nevents:
        logger.warning(
            f"group sizes {sizes.tolist()} sum to {sizes.sum()} but there "
            f"are {nevents} countable events. Using equal-size groups."
        )
        return get_robust_group_sizes(nevents, ngroups, lower, upper)
    return sizes


def epochs_to_group_sizes(
    event_times: np.ndarray,
    epoch_times: Sequence[float],
    lower: int=1,
    upper: Optional[int]=None,
    ) -> Tuple[np.ndarray, Tuple[int, Optional[int]]]:
    """Return group sizes implied by epoch change times.

    G - 1 increasing change times define G epochs. Each sorted event
    time advances the epoch pointer past every change time it exceeds,
    so an event exactly on a change time stays in the earlier epoch.

    Parameters
    ----------
    event_times: np.ndarray
        Times of the countable events.
    epoch_times: Sequence[float]
        Increasing change times between epochs.
    lower, upper: int
        Bounds on group sizes. They are widened (and the change logged)
        when the derived sizes fall outside them.

    Returns
    -------
    Tuple of (sizes, (lower, upper)).

    Raises
    ------
    SkylineError
        If an epoch contains no countable events.
    """
    etimes = np.array(epoch_times, dtype=float, ndmin=1)
    if np.any(np.diff(etimes) <= 0):
        raise SkylineError(f"epoch times must increase, got {etimes}.")

    sizes = np.zeros(etimes.size + 1, dtype=np.int64)
    pointer = 0
    for time in np.sort(event_times):
        while pointer < etimes.size and time > etimes[pointer]:
            pointer += 1
        sizes[pointer] += 1

    if sizes.min() == 0:
        empty = np.where(sizes == 0)[0].tolist()
        raise SkylineError(
            f"epochs {empty} contain no events (change times {etimes}); "
            "their parameters would be unidentifiable.")

    if sizes.min() < lower:
        logger.info(f"lowering group size lower bound {lower} -> {sizes.min()}")
        lower = int(sizes.min())
    if upper is not None and sizes.max() > upper:
        logger.info(f"raising group size upper bound {upper} -> {sizes.max()}")
        upper = int(sizes.max())
    return sizes, (lower, upper)


def get_boundary_times(countable_times: np.ndarray, sizes: np.ndarray) -> np.ndarray:
    """Return the time of the last countable event of each group."""
    return countable_times[np.cumsum(sizes) - 1]


def assign_groups(
    segments: Segments,
    sizes: np.ndarray,
    countable: np.ndarray,
    epoch_times: Optional[np.ndarray]=None,
    ) -> Groups:
    """Return Groups mapping every segment to a group.

    With epoch_times, segments are assigned by time instead: a segment
    belongs to the epoch containing its end time, where a time exactly
    on a change time belongs to the earlier epoch, and the change
    times are the group boundaries.

    Parameters
    ----------
    segments: Segments
        Time-ordered segments.
    sizes: np.ndarray
        Number of countable events per group.
    countable: np.ndarray
        Bool mask over segments of the countable events.
    epoch_times: np.ndarray or None
        Change times between groups, if groups are defined by time.
    """
    sizes = np.array(sizes, dtype=np.int64)
    cumulative = np.cumsum(sizes)
    if cumulative[-1] != countable.sum():
        raise SkylineError(
            f"group sizes sum to {cumulative[-1]} but there are "
            f"{countable.sum()} countable events.")

    # ordinal of the next countable event at or after each segment
    ordinal = np.cumsum(countable) - countable + 1
    idxs = np.searchsorted(cumulative, ordinal, side="left")
    segment_groups = np.minimum(idxs, sizes.size - 1)
    covered = ordinal <= cumulative[-1]
    boundary_times = get_boundary_times(segments.ends[countable], sizes)

    if epoch_times is not None:
        epoch_times = np.array(epoch_times, dtype=float, ndmin=1)
        segment_groups = np.searchsorted(epoch_times, segments.ends, side="left")
        boundary_times = np.append(epoch_times, boundary_times[-1])
    for arr in (sizes, cumulative, boundary_times, segment_groups, covered):
        arr.flags.writeable = False
    return Groups(sizes, cumulative, boundary_times, segment_groups, covered)


if __name__ == "__main__":

    from bskyline.core.events import EventKind, EventSource
    from bskyline.core.segments import build_segments

    EVENTS = EventSource.from_times([0, 0, 2], [1, 3])
    SEGS = build_segments(EVENTS)
    GROUPS = assign_groups(SEGS, [1, 1], SEGS.get_mask(EventKind.COALESCENT))
    print(GROUPS.get_table(values=[1.0, 2.0]))
