#!/usr/bin/env python

"""Versioned cache of values derived from named inputs.

Every input has a generation number drawn from a single increasing
counter, so a generation is never reused. A derived value is stored
together with the generations of the inputs it was computed from, and
is recomputed only when one of those generations has changed.

Example
-------
>>> cache = RecomputeCache(["tree", "sizes"])
>>> cache.register("segments", ["tree"])
>>> cache.get("segments", lambda: build_segments(events))
>>> cache.touch("sizes")
>>> cache.is_stale("segments")
>>> # False
"""

from typing import Any, Callable, Dict, Iterable, Optional, Tuple
import itertools
from loguru import logger
from bskyline.utils.utils import SkylineError

logger = logger.bind(name="bskyline")


class RecomputeCache:
    """Cache derived values and recompute them only when inputs change.

    Parameters
    ----------
    inputs: Iterable[str]
        Names of the inputs whose changes are tracked.
    """
    def __init__(self, inputs: Iterable[str]):
        self._counter = itertools.count(1)
        self._generations: Dict[str, int] = {
            name: next(self._counter) for name in inputs
        }
        """: Current generation of each input."""
        self._depends: Dict[str, Tuple[str, ...]] = {}
        """: Names of the inputs each derived value depends on."""
        self._entries: Dict[str, Tuple[Tuple[int, ...], Any]] = {}
        """: Derived values with the generations they were computed at."""
        self._stored: Optional[Tuple[Dict, Dict]] = None
        """: Snapshot of generations and entries saved by store()."""

    def __repr__(self):
        return f"RecomputeCache(state={self.state}, entries={sorted(self._depends)})"

    def register(self, key: str, depends: Iterable[str]) -> None:
        """Declare a derived value and the inputs it depends on."""
        depends = tuple(depends)
        unknown = set(depends) - set(self._generations)
        if unknown:
            raise SkylineError(f"unknown cache inputs: {sorted(unknown)}")
        self._depends[key] = depends

    def touch(self, *inputs: str) -> None:
        """Mark inputs as changed. With no args all inputs are marked."""
        inputs = inputs if inputs else tuple(self._generations)
        for name in inputs:
            if name not in self._generations:
                raise SkylineError(f"unknown cache input: {name}")
            self._generations[name] = next(self._counter)

    def generation(self, name: str) -> int:
        """Return the current generation of an input."""
        return self._generations[name]

    def _stamp(self, key: str) -> Tuple[int, ...]:
        return tuple(self._generations[i] for i in self._depends[key])

    def is_stale(self, key: str) -> bool:
        """Return True if key was never computed or an input changed."""
        entry = self._entries.get(key)
        return entry is None or entry[0] != self._stamp(key)

    @property
    def state(self) -> str:
        """'STALE' if any derived value is out of date, else 'FRESH'."""
        if any(self.is_stale(key) for key in self._depends):
            return "STALE"
        return "FRESH"

    def get(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value of key, recomputing it if stale."""
        if self.is_stale(key):
            stamp = self._stamp(key)
            logger.debug(f"recomputing {key}")
            self._entries[key] = (stamp, compute())
        return self._entries[key][1]

    def store(self) -> None:
        """Save a snapshot of the current generations and values."""
        self._stored = (dict(self._generations), dict(self._entries))

    def restore(self) -> None:
        """Return to the snapshot saved by the last store()."""
        if self._stored is None:
            raise SkylineError("restore() called before store().")
        generations, entries = self._stored
        self._generations = dict(generations)
        self._entries = dict(entries)


if __name__ == "__main__":

    CACHE = RecomputeCache(["tree"])
    CACHE.register("height", ["tree"])
    print(CACHE.get("height", lambda: 1.0), CACHE.state)
    CACHE.store()
    CACHE.touch("tree")
    print(CACHE.state)
    CACHE.restore()
    print(CACHE.state)
