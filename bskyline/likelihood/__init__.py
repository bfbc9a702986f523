#!/usr/bin/env python


"""Subpackage for skyline likelihood calculation."""

from .skyline import Skyline, SkylineConfig, Countable
from .cache import RecomputeCache
from .jitted import get_segment_loglik, get_segments_loglik
