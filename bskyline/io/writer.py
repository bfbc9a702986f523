#!/usr/bin/env python

"""Writer of skyline change times as tab-delimited traces.

Each row holds the end time of every population size group (or
sampling epoch) for one sample of an analysis, e.g., one step of an
MCMC chain, with a header of column labels.

Example
-------
>>> writer = ChangeTimeWriter(sky, name="changeTime")
>>> with open("change-times.log", "w", encoding="utf-8") as out:
>>>     writer.write_header(out)
>>>     for step in range(100):
>>>         ...
>>>         writer.write(step, out)
"""

from typing import List, Optional, TextIO, TypeVar
import pandas as pd
from bskyline.utils.utils import SkylineError

Skyline = TypeVar("bskyline.Skyline")


class ChangeTimeWriter:
    """Record the change times of a Skyline.

    Parameters
    ----------
    skyline: Skyline
        The skyline whose current change times are recorded.
    kind: str
        "popsize" for population size groups or "sampling" for
        sampling epochs.
    name: str or None
        Column label prefix. Default is "{kind}ChangeTime".
    """
    def __init__(self, skyline: Skyline, kind: str="popsize", name: Optional[str]=None):
        if kind not in ("popsize", "sampling"):
            raise SkylineError(f"kind must be 'popsize' or 'sampling', not {kind}")
        if kind == "sampling" and not skyline.preferential:
            raise SkylineError("Skyline has no sampling epochs.")
        self.skyline = skyline
        self.kind = kind
        self.name = name if name else f"{kind}ChangeTime"
        self.rows: List[List[float]] = []
        """: Rows saved by record(), each starting with the sample."""

    @property
    def ngroups(self) -> int:
        if self.kind == "popsize":
            return self.skyline.dimension
        return self.skyline.sampling_dimension

    def header(self) -> List[str]:
        """Return column labels, numbered when there is > 1 group."""
        if self.ngroups == 1:
            return [self.name]
        return [f"{self.name}{idx + 1}" for idx in range(self.ngroups)]

    def row(self) -> List[float]:
        """Return the current change times."""
        if self.kind == "popsize":
            getter = self.skyline.get_change_time
        else:
            getter = self.skyline.get_sampling_change_time
        return [getter(idx) for idx in range(self.ngroups)]

    def write_header(self, out: TextIO) -> None:
        """Write the tab-delimited header line."""
        out.write("\t".join(["sample"] + self.header()) + "\n")

    def write(self, sample: int, out: TextIO) -> None:
        """Write a tab-delimited line of the current change times."""
        values = [str(sample)] + [repr(i) for i in self.row()]
        out.write("\t".join(values) + "\n")

    def record(self, sample: int) -> None:
        """Save the current change times in .rows."""
        self.rows.append([sample] + self.row())

    def to_dataframe(self) -> pd.DataFrame:
        """Return the recorded rows as a DataFrame indexed by sample."""
        data = pd.DataFrame(self.rows, columns=["sample"] + self.header())
        return data.set_index("sample")


if __name__ == "__main__":

    import sys
    import bskyline

    SKY = bskyline.Skyline("((a:1,b:1):1,c:2);", popsizes=[1., 2.])
    WRITER = ChangeTimeWriter(SKY)
    WRITER.write_header(sys.stdout)
    WRITER.write(0, sys.stdout)
