#!/usr/bin/env python

"""Draw the piecewise-constant population size of a Skyline.

"""

from typing import TypeVar, Optional
import numpy as np
import toyplot
from loguru import logger

logger = logger.bind(name="bskyline")
Skyline = TypeVar("bskyline.Skyline")


def get_skyline_steps(skyline: Skyline, sampling: bool=False):
    """Return x and y arrays tracing the skyline as a step function.

    The population size is drawn from 0 to the tree height. The
    sampling intensity is drawn from 0 to the oldest sample.
    """
    if sampling:
        table = skyline.get_sampling_group_table()
    else:
        table = skyline.get_group_table()
    starts = np.array(table.start, dtype=float)
    ends = np.array(table.end, dtype=float)
    if not sampling:
        ends[-1] = skyline.events.tree_height
    xs = np.column_stack([starts, ends]).ravel()
    ys = np.repeat(table.value.to_numpy(), 2)
    return xs, ys


def draw_skyline(
    skyline: Skyline,
    sampling: bool=False,
    width: int=400,
    height: int=300,
    axes: Optional["toyplot.coordinates.Cartesian"]=None,
    **kwargs,
    ):
    """Return a toyplot drawing of the population size through time.

    Parameters
    ----------
    skyline: Skyline
        A Skyline object.
    sampling: bool
        Draw the sampling intensity instead of the population size.
    width, height: int
        Size of the canvas when axes is None.
    axes: toyplot.coordinates.Cartesian or None
        Existing axes to draw on.
    **kwargs
        Passed to axes.plot (e.g., stroke_width, color).
    """
    if sampling and not skyline.preferential:
        logger.warning("Skyline has no sampling intensity to draw.")
        return None, None, None

    xs, ys = get_skyline_steps(skyline, sampling)
    canvas = None
    if axes is None:
        canvas = toyplot.Canvas(width=width, height=height)
        axes = canvas.cartesian(
            xlabel="time (before present)",
            ylabel="sampling intensity" if sampling else "population size",
        )
    mark = axes.plot(xs, ys, **kwargs)
    return canvas, axes, mark


if __name__ == "__main__":

    import bskyline

    SKY = bskyline.Skyline(
        bskyline.sim_genealogy([1., 4.], [1.], nsamples=20, seed=123),
        popsizes=[1., 4.],
        popsize_group_sizes=[10, 9],
    )
    CANVAS, AXES, MARK = draw_skyline(SKY)
    toyplot.browser.show(CANVAS)
