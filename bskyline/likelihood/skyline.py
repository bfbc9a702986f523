#!/usr/bin/env python

"""Skyline coalescent likelihood of a serially sampled genealogy.

The Skyline class combines the events of a genealogy with piecewise-
constant population sizes (and optionally piecewise-constant sampling
intensities) and returns the log-likelihood of the genealogy. The
same class covers the classic Bayesian skyline (groups of coalescent
events), the epoch-sampling skyline (groups of all tree events) and
the preferential-sampling skyline (an additional sampling intensity
per sampling epoch), with population sizes in linear or log space.

Example
-------
>>> sky = Skyline(
>>>     tree="((((a:5,b:15):1,c:8):1,d:2):5,e:5);",
>>>     popsizes=[1, 2],
>>>     popsize_group_sizes=[6, 3],
>>>     sampling_intensity=[2],
>>>     countable="all",
>>> )
>>> sky.log_likelihood()
>>> # -56.2274112777602
"""

from typing import Dict, Optional, Sequence, Tuple, Union
from dataclasses import dataclass
from enum import Enum
import numpy as np
import pandas as pd
import toytree
from loguru import logger

from bskyline.core.events import EventKind, EventSource
from bskyline.core.segments import Segments, build_segments
from bskyline.core.groups import (
    Groups,
    assign_groups,
    check_group_sizes,
    epochs_to_group_sizes,
    get_boundary_times,
)
from bskyline.core.balance import balance_groups, check_group_widths
from bskyline.likelihood.cache import RecomputeCache
from bskyline.likelihood.jitted import get_segment_loglik, get_segments_loglik
from bskyline.utils.utils import SkylineError, as_float_array, get_bounds, get_rng

logger = logger.bind(name="bskyline")

Tree = Union[EventSource, toytree.ToyTree, str]


class Countable(Enum):
    """Events counted by the population size groups."""
    COALESCENT = "coalescent"
    ALL = "all"


@dataclass
class SkylineConfig:
    """Settings of a Skyline that are not parameter values."""
    countable: Countable = Countable.COALESCENT
    """: Count coalescences only, or all sample and coalescent events."""
    min_width: float = 0.
    """: Minimum duration of every group."""
    max_attempts: int = 10_000
    """: Redistribution rounds tried before failing to meet min_width."""
    popsize_bounds: Tuple[int, Optional[int]] = (1, None)
    """: Lower and upper bounds on population size group sizes."""
    sampling_bounds: Tuple[int, Optional[int]] = (1, None)
    """: Lower and upper bounds on sampling epoch sizes."""

    def __post_init__(self):
        try:
            self.countable = Countable(self.countable)
        except ValueError as inst:
            raise SkylineError(
                f"countable must be 'coalescent' or 'all', not {self.countable}"
            ) from inst
        self.popsize_bounds = get_bounds(self.popsize_bounds)
        self.sampling_bounds = get_bounds(self.sampling_bounds)
        if not self.min_width >= 0:
            raise SkylineError(f"min_width must be >= 0, got {self.min_width}.")
        if self.max_attempts < 0:
            raise SkylineError(
                f"max_attempts must be >= 0, got {self.max_attempts}.")

    @property
    def popsize_kinds(self) -> Tuple[EventKind, ...]:
        """Event kinds counted by population size groups."""
        if self.countable == Countable.ALL:
            return (EventKind.COALESCENT, EventKind.SAMPLE)
        return (EventKind.COALESCENT,)


class Skyline:
    """Piecewise-constant coalescent likelihood of a genealogy.

    Parameters
    ----------
    tree: EventSource, ToyTree, or str
        The genealogy, as events, a ToyTree, or a newick str or path.
    popsizes: Sequence[float]
        One population size per group. Exclusive with log_popsizes.
    log_popsizes: Sequence[float]
        One log population size per group. Exclusive with popsizes.
    popsize_group_sizes: Sequence[int]
        Number of countable events in each population size group.
        Default is groups of equal size. Exclusive with
        popsize_epoch_times.
    popsize_epoch_times: Sequence[float]
        len(popsizes) - 1 increasing times separating the groups.
    sampling_intensity: Sequence[float]
        One sampling intensity per sampling epoch. If None the
        likelihood does not include sampling terms.
    sampling_group_sizes: Sequence[int]
        Number of samples in each sampling epoch. Default is epochs
        of equal size. Exclusive with sampling_epoch_times.
    sampling_epoch_times: Sequence[float]
        len(sampling_intensity) - 1 increasing times separating epochs.
    countable: str or Countable
        "coalescent" to group coalescent events only, or "all" to
        group sample and coalescent events.
    min_width: float
        Minimum duration of each group. Group sizes are adjusted at
        init to meet this, and the likelihood is -inf when a later
        change violates it.
    max_attempts: int
        Number of adjustment rounds tried before raising an error.
    popsize_bounds: Tuple[int, int]
        Lower and upper (or None) bounds on population group sizes.
    sampling_bounds: Tuple[int, int]
        Lower and upper (or None) bounds on sampling epoch sizes.
    seed: int or np.random.Generator
        Seed of the generator used when adjusting group sizes.

    Example
    -------
    >>> sky = Skyline("((a:1,b:1):1,c:2);", popsizes=[1.0])
    >>> sky.log_likelihood()
    """
    def __init__(
        self,
        tree: Tree,
        popsizes: Optional[Sequence[float]]=None,
        log_popsizes: Optional[Sequence[float]]=None,
        popsize_group_sizes: Optional[Sequence[int]]=None,
        popsize_epoch_times: Optional[Sequence[float]]=None,
        sampling_intensity: Optional[Sequence[float]]=None,
        sampling_group_sizes: Optional[Sequence[int]]=None,
        sampling_epoch_times: Optional[Sequence[float]]=None,
        countable: Union[str, Countable]=Countable.COALESCENT,
        min_width: float=0.,
        max_attempts: int=10_000,
        popsize_bounds: Tuple[int, Optional[int]]=(1, None),
        sampling_bounds: Tuple[int, Optional[int]]=(1, None),
        seed: Union[int, np.random.Generator, None]=None,
        **kwargs,
        ):

        self._warn_bad_kwargs(kwargs)

        self.config = SkylineConfig(
            countable=countable,
            min_width=min_width,
            max_attempts=max_attempts,
            popsize_bounds=popsize_bounds,
            sampling_bounds=sampling_bounds,
        )
        """: Settings that are not parameter values."""
        self.rng: np.random.Generator = get_rng(seed)
        """: Generator used by the group size adjustment."""
        self.events: EventSource = None
        """: Sample and coalescent events of the genealogy."""
        self.log_space: bool = log_popsizes is not None
        """: Whether population sizes are stored as logs."""
        self.preferential: bool = sampling_intensity is not None
        """: Whether the likelihood includes sampling intensity terms."""

        # parameter arrays are replaced, never modified in place.
        self._popsizes: np.ndarray = None
        self._sampling: Optional[np.ndarray] = None
        self._popsize_group_sizes: Optional[np.ndarray] = None
        self._popsize_epoch_times: Optional[np.ndarray] = None
        self._sampling_group_sizes: Optional[np.ndarray] = None
        self._sampling_epoch_times: Optional[np.ndarray] = None
        self._stored: Optional[Dict[str, object]] = None

        self._cache = RecomputeCache(
            ["tree", "epochs", "popsize_groups", "sampling_groups"])
        self._cache.register("segments", ["tree", "epochs"])
        self._cache.register(
            "popsize_groups", ["tree", "epochs", "popsize_groups"])
        if self.preferential:
            self._cache.register(
                "sampling_groups", ["tree", "epochs", "sampling_groups"])

        # check input args and set values
        self._set_events(tree)
        self._set_parameters(popsizes, log_popsizes, sampling_intensity)
        self._set_epoch_times(popsize_epoch_times, sampling_epoch_times)
        self._set_group_sizes(popsize_group_sizes, sampling_group_sizes)
        if self.config.min_width > 0:
            self.rebalance()
        logger.debug(f"initialized skyline\n{self}")

    @staticmethod
    def _warn_bad_kwargs(kwargs):
        """Warn user that args are being skipped."""
        if kwargs:
            logger.warning(
                f"Parameters {list(kwargs)} are not supported. See "
                "documentation, argument names may have changed."
            )

    ###############################################################
    # init checks
    ###############################################################

    def _set_events(self, tree: Tree) -> None:
        """Set .events from an EventSource, ToyTree, or newick."""
        if isinstance(tree, EventSource):
            self.events = tree
        else:
            self.events = EventSource.from_tree(tree)

    def _set_parameters(self, popsizes, log_popsizes, sampling_intensity) -> None:
        """Set population sizes (linear or log) and sampling intensities."""
        if (popsizes is None) == (log_popsizes is None):
            raise SkylineError(
                "Exactly one of popsizes or log_popsizes must be entered.")
        values = popsizes if popsizes is not None else log_popsizes
        self._popsizes = self._freeze(as_float_array(values, "popsizes"))
        if not self._popsizes.size:
            raise SkylineError("popsizes must contain at least one value.")
        if sampling_intensity is not None:
            self._sampling = self._freeze(
                as_float_array(sampling_intensity, "sampling_intensity"))
            if not self._sampling.size:
                raise SkylineError(
                    "sampling_intensity must contain at least one value.")

    def _set_epoch_times(self, popsize_epoch_times, sampling_epoch_times) -> None:
        """Check and set epoch change times."""
        if popsize_epoch_times is not None:
            self._popsize_epoch_times = self._check_epoch_times(
                popsize_epoch_times, self.dimension, "popsize_epoch_times")
        if sampling_epoch_times is not None:
            if not self.preferential:
                raise SkylineError(
                    "sampling_epoch_times requires sampling_intensity.")
            self._sampling_epoch_times = self._check_epoch_times(
                sampling_epoch_times, self.sampling_dimension,
                "sampling_epoch_times")

    def _check_epoch_times(self, times, ngroups: int, name: str) -> np.ndarray:
        times = as_float_array(times, name)
        if times.size != ngroups - 1:
            raise SkylineError(
                f"{name} has {times.size} values but {ngroups} groups "
                f"require {ngroups - 1} change times.")
        if np.any(times < 0) or np.any(times > self.events.tree_height):
            raise SkylineError(
                f"{name} must be within [0, {self.events.tree_height}], "
                f"got {times.tolist()}.")
        if np.any(np.diff(times) <= 0):
            raise SkylineError(f"{name} must increase, got {times.tolist()}.")
        return self._freeze(times)

    def _set_group_sizes(self, popsize_group_sizes, sampling_group_sizes) -> None:
        """Check and set the group sizes, or derive them from epochs."""
        if self._popsize_epoch_times is not None:
            if popsize_group_sizes is not None:
                raise SkylineError(
                    "popsize_group_sizes and popsize_epoch_times cannot "
                    "be used together.")
            sizes, bounds = epochs_to_group_sizes(
                self._countable_times(),
                self._popsize_epoch_times,
                *self.config.popsize_bounds,
            )
            self.config.popsize_bounds = bounds
        else:
            sizes = check_group_sizes(
                popsize_group_sizes,
                self.dimension,
                self._count_countable(),
                *self.config.popsize_bounds,
            )
        self._popsize_group_sizes = self._freeze(sizes)

        if not self.preferential:
            if sampling_group_sizes is not None:
                raise SkylineError(
                    "sampling_group_sizes requires sampling_intensity.")
            return
        if self._sampling_epoch_times is not None:
            if sampling_group_sizes is not None:
                raise SkylineError(
                    "sampling_group_sizes and sampling_epoch_times cannot "
                    "be used together.")
            sizes, bounds = epochs_to_group_sizes(
                self.events.sample_times,
                self._sampling_epoch_times,
                *self.config.sampling_bounds,
            )
            self.config.sampling_bounds = bounds
        else:
            sizes = check_group_sizes(
                sampling_group_sizes,
                self.sampling_dimension,
                self.events.nsamples,
                *self.config.sampling_bounds,
            )
        self._sampling_group_sizes = self._freeze(sizes)

    @staticmethod
    def _freeze(arr: np.ndarray) -> np.ndarray:
        arr = np.array(arr)
        arr.flags.writeable = False
        return arr

    def _count_countable(self) -> int:
        """Number of events counted by the population size groups."""
        if self.config.countable == Countable.ALL:
            return self.events.nevents
        return self.events.ncoalescents

    def _countable_times(self) -> np.ndarray:
        """Sorted times of the events counted by population size groups."""
        if self.config.countable == Countable.ALL:
            return np.sort(self.events.times)
        return self.events.coalescent_times

    ###############################################################
    # properties
    ###############################################################

    @property
    def dimension(self) -> int:
        """Number of population size groups."""
        return self._popsizes.size

    @property
    def sampling_dimension(self) -> int:
        """Number of sampling epochs (0 if not preferential)."""
        return 0 if self._sampling is None else self._sampling.size

    @property
    def popsizes(self) -> np.ndarray:
        """Population size of each group (exponentiated if log_space)."""
        if self.log_space:
            return np.exp(self._popsizes)
        return self._popsizes

    @property
    def sampling_intensity(self) -> Optional[np.ndarray]:
        """Sampling intensity of each epoch, or None."""
        return self._sampling

    @property
    def popsize_group_sizes(self) -> np.ndarray:
        """Current number of countable events per population size group."""
        groups = self.popsize_groups
        if groups is None:
            return self._popsize_group_sizes
        return groups.sizes

    @property
    def sampling_group_sizes(self) -> Optional[np.ndarray]:
        """Current number of samples per sampling epoch, or None."""
        groups = self.sampling_groups
        if groups is None:
            return self._sampling_group_sizes
        return groups.sizes

    @property
    def state(self) -> str:
        """'STALE' if derived values must be recomputed, else 'FRESH'."""
        return self._cache.state

    @property
    def segments(self) -> Segments:
        """Time-ordered segments of the genealogy (cached)."""
        return self._cache.get("segments", self._compute_segments)

    @property
    def popsize_groups(self) -> Optional[Groups]:
        """Population size groups (cached), None if an epoch is empty."""
        return self._cache.get("popsize_groups", self._compute_popsize_groups)

    @property
    def sampling_groups(self) -> Optional[Groups]:
        """Sampling epochs (cached), None if absent or an epoch is empty."""
        if not self.preferential:
            return None
        return self._cache.get("sampling_groups", self._compute_sampling_groups)

    ###############################################################
    # derived values
    ###############################################################

    def _get_all_epoch_times(self) -> np.ndarray:
        times = [
            i for i in (self._popsize_epoch_times, self._sampling_epoch_times)
            if i is not None
        ]
        return np.concatenate(times) if times else np.array([])

    def _compute_segments(self) -> Segments:
        return build_segments(self.events, self._get_all_epoch_times())

    def _compute_groups(self, kinds, sizes, epoch_times, bounds) -> Optional[Groups]:
        segs = self.segments
        mask = segs.get_mask(*kinds)
        if epoch_times is not None:
            try:
                sizes, _ = epochs_to_group_sizes(segs.ends[mask], epoch_times, *bounds)
            except SkylineError as err:
                logger.debug(f"invalid epochs for current tree: {err}")
                return None
        if sizes.min() < 1:
            logger.debug(f"group sizes {sizes.tolist()} contain an empty group")
            return None
        return assign_groups(segs, sizes, mask, epoch_times)

    def _compute_popsize_groups(self) -> Optional[Groups]:
        return self._compute_groups(
            self.config.popsize_kinds,
            self._popsize_group_sizes,
            self._popsize_epoch_times,
            self.config.popsize_bounds,
        )

    def _compute_sampling_groups(self) -> Optional[Groups]:
        return self._compute_groups(
            (EventKind.SAMPLE,),
            self._sampling_group_sizes,
            self._sampling_epoch_times,
            self.config.sampling_bounds,
        )

    def _check_groups(self, groups: Groups, bounds, epoch_mode: bool) -> bool:
        """Return False if groups violate the size bounds or min_width."""
        if not epoch_mode:
            lower, upper = bounds
            if groups.sizes.min() < lower:
                return False
            if upper is not None and groups.sizes.max() > upper:
                return False
            if not check_group_widths(groups.boundary_times, self.config.min_width):
                return False
        return True

    def _epochs_within_tree(self) -> bool:
        times = self._get_all_epoch_times()
        return not times.size or times.max() <= self.events.tree_height

    def _get_segment_values(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return the popsize and sampling intensity of each segment."""
        pgroups = self.popsize_groups
        popsizes = self._popsizes[pgroups.segment_groups]
        if not self.preferential:
            return popsizes, np.zeros(popsizes.size)
        sgroups = self.sampling_groups
        intensities = np.where(
            sgroups.covered, self._sampling[sgroups.segment_groups], 0.)
        return popsizes, intensities

    ###############################################################
    # likelihood
    ###############################################################

    def log_likelihood(self) -> float:
        """Return the log-likelihood of the genealogy.

        Returns -inf (and never raises) when the current group sizes
        are outside their bounds or narrower than min_width, when an
        epoch contains no events for the current tree, or when a
        parameter value is invalid (e.g., a population size <= 0).
        """
        if not self._epochs_within_tree():
            return -np.inf
        pgroups = self.popsize_groups
        if pgroups is None:
            return -np.inf
        epoch_mode = self._popsize_epoch_times is not None
        if not self._check_groups(pgroups, self.config.popsize_bounds, epoch_mode):
            return -np.inf
        if self.preferential:
            sgroups = self.sampling_groups
            if sgroups is None:
                return -np.inf
            epoch_mode = self._sampling_epoch_times is not None
            if not self._check_groups(sgroups, self.config.sampling_bounds, epoch_mode):
                return -np.inf

        segs = self.segments
        popsizes, intensities = self._get_segment_values()
        loglik = get_segments_loglik(
            segs.widths,
            segs.lineages,
            segs.kinds,
            popsizes,
            intensities,
            self.log_space,
            self.preferential,
        )
        return float(loglik)

    ###############################################################
    # setters
    ###############################################################

    def notify(self, *inputs: str) -> None:
        """Mark inputs as changed: 'tree', 'epochs', 'popsize_groups',
        or 'sampling_groups'. With no args everything is marked.
        """
        self._cache.touch(*inputs)

    def set_tree(self, tree: Tree) -> None:
        """Replace the genealogy. It must have the same number of tips."""
        old = self.events
        self._set_events(tree)
        if self.events.nsamples != old.nsamples:
            new = self.events
            self.events = old
            raise SkylineError(
                f"new tree has {new.nsamples} samples, expected {old.nsamples}.")
        self.notify("tree")

    def set_popsizes(self, values: Sequence[float]) -> None:
        """Set population sizes (stored as logs if log_space)."""
        values = self._check_dimension(values, self.dimension, "popsizes")
        if self.log_space:
            with np.errstate(divide="ignore", invalid="ignore"):
                values = np.log(values)
        self._popsizes = self._freeze(values)

    def set_log_popsizes(self, values: Sequence[float]) -> None:
        """Set log population sizes (exponentiated if not log_space)."""
        values = self._check_dimension(values, self.dimension, "log_popsizes")
        if not self.log_space:
            values = np.exp(values)
        self._popsizes = self._freeze(values)

    def set_sampling_intensity(self, values: Sequence[float]) -> None:
        """Set sampling intensities."""
        if not self.preferential:
            raise SkylineError("Skyline was not initialized with sampling_intensity.")
        values = self._check_dimension(
            values, self.sampling_dimension, "sampling_intensity")
        self._sampling = self._freeze(values)

    def set_popsize_group_sizes(self, sizes: Sequence[int]) -> None:
        """Set the number of countable events per population size group."""
        if self._popsize_epoch_times is not None:
            raise SkylineError(
                "group sizes are derived from popsize_epoch_times.")
        sizes = self._check_sizes(sizes, self.dimension, self._count_countable())
        self._popsize_group_sizes = self._freeze(sizes)
        self.notify("popsize_groups")

    def set_sampling_group_sizes(self, sizes: Sequence[int]) -> None:
        """Set the number of samples per sampling epoch."""
        if not self.preferential:
            raise SkylineError("Skyline was not initialized with sampling_intensity.")
        if self._sampling_epoch_times is not None:
            raise SkylineError(
                "group sizes are derived from sampling_epoch_times.")
        sizes = self._check_sizes(
            sizes, self.sampling_dimension, self.events.nsamples)
        self._sampling_group_sizes = self._freeze(sizes)
        self.notify("sampling_groups")

    def set_popsize_epoch_times(self, times: Sequence[float]) -> None:
        """Set the change times between population size groups."""
        if self._popsize_epoch_times is None:
            raise SkylineError("Skyline was not initialized with epoch times.")
        times = self._check_dimension(times, self.dimension - 1, "popsize_epoch_times")
        self._popsize_epoch_times = self._freeze(times)
        self.notify("epochs", "popsize_groups")

    def set_sampling_epoch_times(self, times: Sequence[float]) -> None:
        """Set the change times between sampling epochs."""
        if self._sampling_epoch_times is None:
            raise SkylineError("Skyline was not initialized with epoch times.")
        times = self._check_dimension(
            times, self.sampling_dimension - 1, "sampling_epoch_times")
        self._sampling_epoch_times = self._freeze(times)
        self.notify("epochs", "sampling_groups")

    @staticmethod
    def _check_dimension(values, size: int, name: str) -> np.ndarray:
        values = as_float_array(values, name)
        if values.size != size:
            raise SkylineError(
                f"{name} has {values.size} values, expected {size}.")
        return values

    @staticmethod
    def _check_sizes(sizes, ngroups: int, nevents: int) -> np.ndarray:
        sizes = np.array(sizes, dtype=np.int64, ndmin=1)
        if sizes.size != ngroups:
            raise SkylineError(
                f"group sizes have {sizes.size} values, expected {ngroups}.")
        if sizes.sum() != nevents:
            raise SkylineError(
                f"group sizes sum to {sizes.sum()}, expected {nevents}.")
        return sizes

    def rebalance(self) -> None:
        """Adjust group sizes until every group spans min_width.

        Only groups defined by sizes (not epoch times) are adjusted.

        Raises
        ------
        SkylineError
            If no valid sizes are found in config.max_attempts rounds.
        """
        segs = self.segments
        if self._popsize_epoch_times is None:
            ctimes = segs.ends[segs.get_mask(*self.config.popsize_kinds)]
            sizes = balance_groups(
                self._popsize_group_sizes,
                lambda x: get_boundary_times(ctimes, x),
                self.config.min_width,
                self.rng,
                self.config.max_attempts,
                *self.config.popsize_bounds,
            )
            if not np.array_equal(sizes, self._popsize_group_sizes):
                self._popsize_group_sizes = self._freeze(sizes)
                self.notify("popsize_groups")

        if self.preferential and self._sampling_epoch_times is None:
            stimes = segs.ends[segs.get_mask(EventKind.SAMPLE)]
            sizes = balance_groups(
                self._sampling_group_sizes,
                lambda x: get_boundary_times(stimes, x),
                self.config.min_width,
                self.rng,
                self.config.max_attempts,
                *self.config.sampling_bounds,
            )
            if not np.array_equal(sizes, self._sampling_group_sizes):
                self._sampling_group_sizes = self._freeze(sizes)
                self.notify("sampling_groups")

    ###############################################################
    # store / restore
    ###############################################################

    def store(self) -> None:
        """Save the current inputs and derived values."""
        self._stored = {
            "events": self.events,
            "_popsizes": self._popsizes,
            "_sampling": self._sampling,
            "_popsize_group_sizes": self._popsize_group_sizes,
            "_popsize_epoch_times": self._popsize_epoch_times,
            "_sampling_group_sizes": self._sampling_group_sizes,
            "_sampling_epoch_times": self._sampling_epoch_times,
        }
        self._cache.store()

    def restore(self) -> None:
        """Return to the inputs and derived values saved by store()."""
        if self._stored is None:
            raise SkylineError("restore() called before store().")
        for key, value in self._stored.items():
            setattr(self, key, value)
        self._cache.restore()

    ###############################################################
    # reporting
    ###############################################################

    def _require(self, groups: Optional[Groups], name: str) -> Groups:
        if groups is None:
            raise SkylineError(f"{name} are not defined for the current tree.")
        return groups

    def get_change_time(self, idx: int) -> float:
        """Return the end time of population size group idx."""
        groups = self._require(self.popsize_groups, "popsize groups")
        return float(groups.boundary_times[idx])

    def get_sampling_change_time(self, idx: int) -> float:
        """Return the end time of sampling epoch idx."""
        groups = self._require(self.sampling_groups, "sampling epochs")
        return float(groups.boundary_times[idx])

    def get_popsize(self, time: float) -> float:
        """Return the population size in effect at a time.

        A time exactly on a change time belongs to the earlier group,
        and times beyond the last change time use the last group.
        """
        groups = self._require(self.popsize_groups, "popsize groups")
        return float(self.popsizes[groups.get_group(time)])

    def get_sampling_intensity(self, time: float) -> float:
        """Return the sampling intensity in effect at a time.

        This is 0 after the oldest sample, or if there is no sampling.
        """
        if not self.preferential or time > self.events.oldest_sample:
            return 0.
        groups = self._require(self.sampling_groups, "sampling epochs")
        return float(self._sampling[groups.get_group(time)])

    def get_segment_table(self) -> pd.DataFrame:
        """Return a DataFrame of segments, their groups, and logliks."""
        segs = self.segments
        data = segs.table
        pgroups = self._require(self.popsize_groups, "popsize groups")
        popsizes, intensities = self._get_segment_values()
        data["group"] = pgroups.segment_groups
        data["popsize"] = np.exp(popsizes) if self.log_space else popsizes
        if self.preferential:
            data["epoch"] = self.sampling_groups.segment_groups
            data["intensity"] = intensities
        data["loglik"] = [
            get_segment_loglik(
                segs.widths[idx], segs.lineages[idx], segs.kinds[idx],
                popsizes[idx], intensities[idx],
                self.log_space, self.preferential,
            ) for idx in range(len(segs))
        ]
        return data

    def get_group_table(self) -> pd.DataFrame:
        """Return a DataFrame with size, times, and value of each group."""
        groups = self._require(self.popsize_groups, "popsize groups")
        return groups.get_table(values=self.popsizes)

    def get_sampling_group_table(self) -> pd.DataFrame:
        """Return a DataFrame with size, times, and value of each epoch."""
        groups = self._require(self.sampling_groups, "sampling epochs")
        return groups.get_table(values=self._sampling)

    def __repr__(self):
        return (
            f"Skyline(dimension={self.dimension}, "
            f"sampling_dimension={self.sampling_dimension}, "
            f"countable={self.config.countable.value}, "
            f"log_space={self.log_space})"
        )

    def __str__(self):
        lines = [repr(self)]
        if self.popsize_groups is None:
            lines.append("popsize groups: undefined for current tree")
        else:
            lines.append("popsize groups:")
            lines.append(self.get_group_table().to_string())
        if self.preferential:
            if self.sampling_groups is None:
                lines.append("sampling epochs: undefined for current tree")
            else:
                lines.append("sampling epochs:")
                lines.append(self.get_sampling_group_table().to_string())
        return "\n".join(lines)


if __name__ == "__main__":

    import bskyline
    bskyline.set_log_level("DEBUG")

    NWK = (
        "((((D4Mexico84:5.0,D4ElSal94:15.0):1.0,D4PRico86:8.0):1.0,"
        "D4Tahiti79:2.0):5.0,D4Indon77:5.0);"
    )
    SKY = Skyline(
        NWK,
        popsizes=[1, 2],
        popsize_group_sizes=[6, 3],
        sampling_intensity=[2],
        countable="all",
    )
    print(SKY)
    print(SKY.get_segment_table())
    print(SKY.log_likelihood())
