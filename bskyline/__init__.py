#!/usr/bin/env python

"""The bskyline library: skyline coalescent likelihoods.

Summary
-------
The primary interface for `bskyline` is the `bskyline.Skyline` class
which segments the events of a genealogy, groups them into
piecewise-constant population size (and optional sampling intensity)
epochs, and returns the log-likelihood of the genealogy.

Example
-------
>>> import bskyline
>>> sky = bskyline.Skyline(
>>>     tree="((a:1,b:1):1,c:2);",
>>>     popsizes=[1.0, 2.0],
>>>     popsize_group_sizes=[1, 1],
>>> )
>>> sky.log_likelihood()
>>> print(sky)
"""

__version__ = "0.1.dev0"
__author__ = "bskyline developers"

from bskyline.core.events import EventKind, EventSource
from bskyline.core.segments import Segments, build_segments
from bskyline.core.groups import Groups
from bskyline.likelihood.skyline import Skyline, SkylineConfig, Countable
from bskyline.core.sim_genealogy import sim_genealogy
from bskyline.io.writer import ChangeTimeWriter
from bskyline.draw.draw_skyline import draw_skyline

# start the logger at log_level WARNING
from bskyline.utils.logger_setup import set_log_level
from bskyline.utils.utils import SkylineError
set_log_level("WARNING")
