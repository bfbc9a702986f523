#!/usr/bin/env python

"""Core functions to segment and group the events of a genealogy.

"""

from .events import EventKind, EventSource
from .segments import Segments, build_segments
from .groups import Groups, assign_groups
from .sim_genealogy import sim_genealogy
