#!/usr/bin/env python

"""Timed events of a genealogy.

A genealogy with serially sampled tips is reduced to a set of events,
each with a time (measured backwards from the youngest sample) and a
kind: a sample is added (tip), two lineages coalesce (internal node),
or a user-defined epoch boundary is crossed.

Example
-------
>>> events = EventSource.from_tree("((a:1,b:3):1,c:4);")
>>> events.times
>>> # array([2., 0., 1., 3., 4.])
"""

from typing import Optional, Sequence, Union
from enum import IntEnum
import numpy as np
import pandas as pd
import toytree
from bskyline.utils.utils import SkylineError


class EventKind(IntEnum):
    """Kinds of events. The int order is the tie-break at equal times."""
    COALESCENT = 0
    SAMPLE = 1
    EPOCH_BOUNDARY = 2


class EventSource:
    """Times and kinds of the sample and coalescent events of a tree.

    Instances are treated as immutable. A changed genealogy is passed
    to the Skyline as a new EventSource (see `Skyline.set_tree`).

    Parameters
    ----------
    times: Sequence[float]
        Event times, measured backwards from the youngest sample.
    kinds: Sequence[int]
        EventKind code of each event, COALESCENT or SAMPLE.
    tree_height: float or None
        Time of the root (tMRCA). Default is the oldest coalescence.
    """
    def __init__(
        self,
        times: Sequence[float],
        kinds: Sequence[int],
        tree_height: Optional[float]=None,
        ):
        self.times = np.array(times, dtype=float, ndmin=1)
        """: Event times (unsorted)."""
        self.kinds = np.array(kinds, dtype=np.int8, ndmin=1)
        """: EventKind int codes of each event."""
        self.tree_height: float = None
        """: Time of the most recent common ancestor."""

        if self.times.shape != self.kinds.shape:
            raise SkylineError("times and kinds must have the same length.")
        if not np.all(np.isfinite(self.times)) or np.any(self.times < 0):
            raise SkylineError("event times must be finite and >= 0.")
        allowed = (EventKind.COALESCENT, EventKind.SAMPLE)
        if not np.all(np.isin(self.kinds, allowed)):
            raise SkylineError(
                "tree events must be of kind COALESCENT or SAMPLE.")
        if not self.ncoalescents:
            raise SkylineError("a genealogy requires >= 1 coalescent event.")
        if self.nsamples != self.ncoalescents + 1:
            raise SkylineError(
                f"{self.nsamples} samples cannot be joined by "
                f"{self.ncoalescents} coalescent events.")

        if tree_height is None:
            tree_height = self.coalescent_times.max()
        self.tree_height = float(tree_height)

        # make immutable
        self.times.flags.writeable = False
        self.kinds.flags.writeable = False

    def __repr__(self):
        return (
            f"EventSource(nsamples={self.nsamples}, "
            f"ncoalescents={self.ncoalescents}, "
            f"tree_height={self.tree_height})"
        )

    @classmethod
    def from_tree(cls, tree: Union[toytree.ToyTree, str]) -> "EventSource":
        """Return an EventSource from a ToyTree or a newick str/path.

        Heights are relative to the youngest tip. An internal node with
        c children is recorded as c - 1 coalescent events at its height.
        """
        if not isinstance(tree, toytree.ToyTree):
            tree = toytree.tree(tree)

        heights = []
        kinds = []
        for node in tree.traverse():
            if node.is_leaf():
                heights.append(node.height)
                kinds.append(EventKind.SAMPLE)
            else:
                nmerge = len(node.children) - 1
                heights.extend([node.height] * nmerge)
                kinds.extend([EventKind.COALESCENT] * nmerge)
        heights = np.array(heights, dtype=float)
        kinds = np.array(kinds, dtype=np.int8)

        # shift so the youngest tip is at time 0
        offset = heights[kinds == EventKind.SAMPLE].min()
        heights = heights - offset
        root = tree.treenode.height - offset
        return cls(heights, kinds, tree_height=root)

    @classmethod
    def from_times(
        cls,
        sample_times: Sequence[float],
        coalescent_times: Sequence[float],
        tree_height: Optional[float]=None,
        ) -> "EventSource":
        """Return an EventSource from arrays of sample and coalescence times."""
        stimes = np.array(sample_times, dtype=float, ndmin=1)
        ctimes = np.array(coalescent_times, dtype=float, ndmin=1)
        times = np.concatenate([stimes, ctimes])
        kinds = np.concatenate([
            np.repeat(EventKind.SAMPLE, stimes.size),
            np.repeat(EventKind.COALESCENT, ctimes.size),
        ]).astype(np.int8)
        return cls(times, kinds, tree_height=tree_height)

    @property
    def nevents(self) -> int:
        """Number of sample and coalescent events."""
        return self.times.size

    @property
    def nsamples(self) -> int:
        return int(np.sum(self.kinds == EventKind.SAMPLE))

    @property
    def ncoalescents(self) -> int:
        return int(np.sum(self.kinds == EventKind.COALESCENT))

    @property
    def sample_times(self) -> np.ndarray:
        """Sorted sample times."""
        return np.sort(self.times[self.kinds == EventKind.SAMPLE])

    @property
    def coalescent_times(self) -> np.ndarray:
        """Sorted coalescence times."""
        return np.sort(self.times[self.kinds == EventKind.COALESCENT])

    @property
    def oldest_sample(self) -> float:
        """Time of the oldest sample."""
        return float(self.sample_times[-1])

    @property
    def table(self) -> pd.DataFrame:
        """Events as a DataFrame in time order."""
        order = np.lexsort((self.kinds, self.times))
        return pd.DataFrame({
            "time": self.times[order],
            "kind": [EventKind(i).name for i in self.kinds[order]],
        })


if __name__ == "__main__":

    EVENTS = EventSource.from_tree(
        "((((D4Mexico84:5.0,D4ElSal94:15.0):1.0,D4PRico86:8.0):1.0,"
        "D4Tahiti79:2.0):5.0,D4Indon77:5.0);"
    )
    print(EVENTS)
    print(EVENTS.table)
