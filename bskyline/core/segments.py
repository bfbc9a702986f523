#!/usr/bin/env python

"""Merge events into a time-ordered sequence of segments.

Each event closes one segment, the interval since the previous event,
during which the number of lineages is constant. The first sample
closes a zero-width segment starting at time 0 with zero lineages.

Example
-------
>>> events = EventSource.from_tree("((a:1,b:3):1,c:4);")
>>> segs = build_segments(events, epoch_times=[1.5])
>>> segs.table
"""

from typing import Optional, Sequence
from dataclasses import dataclass
import numpy as np
import pandas as pd
from loguru import logger
from bskyline.core.events import EventKind, EventSource
from bskyline.utils.utils import SkylineError

logger = logger.bind(name="bskyline")


@dataclass(frozen=True)
class Segments:
    """Parallel arrays describing the segments of a genealogy."""
    starts: np.ndarray
    """: Start time of each segment."""
    ends: np.ndarray
    """: End time of each segment, i.e., the time of its event."""
    lineages: np.ndarray
    """: Number of lineages during each segment."""
    kinds: np.ndarray
    """: EventKind code of the event ending each segment."""
    tree_height: float
    """: Time of the most recent common ancestor."""

    def __len__(self) -> int:
        return self.ends.size

    @property
    def widths(self) -> np.ndarray:
        """Duration of each segment."""
        return self.ends - self.starts

    def get_mask(self, *kinds: EventKind) -> np.ndarray:
        """Return bool array True for segments ending in these kinds."""
        return np.isin(self.kinds, [int(i) for i in kinds])

    @property
    def table(self) -> pd.DataFrame:
        """Segments as a DataFrame."""
        return pd.DataFrame({
            "start": self.starts,
            "end": self.ends,
            "width": self.widths,
            "lineages": self.lineages,
            "kind": [EventKind(i).name for i in self.kinds],
        })


def build_segments(
    events: EventSource,
    epoch_times: Optional[Sequence[float]]=None,
    ) -> Segments:
    """Return Segments from tree events and optional epoch boundaries.

    Events are sorted by time, and events at the same time are ordered
    COALESCENT, then SAMPLE, then EPOCH_BOUNDARY. The lineage count of
    a segment is the count after all earlier events: it increases by
    one after a sample and decreases by one after a coalescence.

    Parameters
    ----------
    events: EventSource
        Sample and coalescent events of a genealogy.
    epoch_times: Sequence[float] or None
        Times at which an EPOCH_BOUNDARY segment boundary is inserted.

    Raises
    ------
    SkylineError
        If the first segment does not start at time 0, or the last
        segment does not end at the tree height.
    """
    times = events.times
    kinds = events.kinds
    if epoch_times is not None and len(epoch_times):
        etimes = np.array(epoch_times, dtype=float, ndmin=1)
        if not np.all(np.isfinite(etimes)) or np.any(etimes < 0):
            raise SkylineError(
                f"epoch times must be finite and >= 0, got {etimes}.")
        times = np.concatenate([times, etimes])
        kinds = np.concatenate([
            kinds, np.repeat(EventKind.EPOCH_BOUNDARY, etimes.size)
        ]).astype(np.int8)

    # sort by time, then by kind
    order = np.lexsort((kinds, times))
    ends = times[order]
    kinds = kinds[order]
    starts = np.concatenate([[0.], ends[:-1]])

    # lineages during each segment: changes apply after the segment.
    change = np.zeros(ends.size, dtype=np.int64)
    change[kinds == EventKind.SAMPLE] = 1
    change[kinds == EventKind.COALESCENT] = -1
    lineages = np.concatenate([[0], np.cumsum(change)[:-1]])

    if ends[0] != 0:
        raise SkylineError(
            f"first segment does not start at 0 (first event at {ends[0]}).")
    if ends[-1] != events.tree_height:
        raise SkylineError(
            f"last segment ends at {ends[-1]}, which is not the "
            f"tree height (tMRCA={events.tree_height}).")

    for arr in (starts, ends, lineages, kinds):
        arr.flags.writeable = False
    segs = Segments(starts, ends, lineages, kinds, events.tree_height)
    logger.debug(f"built {len(segs)} segments")
    return segs


if __name__ == "__main__":

    EVENTS = EventSource.from_times([0, 0, 2], [1, 3])
    print(build_segments(EVENTS, [0.5, 2.5]).table)
