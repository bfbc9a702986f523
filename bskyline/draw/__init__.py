#!/usr/bin/env python

"""Draw methods for Skyline objects.

"""

from .draw_skyline import draw_skyline
