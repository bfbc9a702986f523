#!/usr/bin/env python

"""Command line tool to compute the skyline log-likelihood of a tree.

Example
-------
$ bskyline --tree "((a:1,b:3):1,c:4);" --popsizes 1 2 --countable all
$ bskyline --tree genealogy.nwk --popsizes 1 2 3 --popsize-epoch-times 1 2 \
      --sampling-intensity 0.5 --tables
"""

from typing import Optional, Sequence
import argparse
import sys
from loguru import logger
import bskyline
from bskyline.likelihood.skyline import Skyline

logger = logger.bind(name="bskyline")


def main(
    tree: str,
    popsizes: Optional[Sequence[float]],
    log_popsizes: Optional[Sequence[float]],
    popsize_group_sizes: Optional[Sequence[int]],
    popsize_epoch_times: Optional[Sequence[float]],
    sampling_intensity: Optional[Sequence[float]],
    sampling_group_sizes: Optional[Sequence[int]],
    sampling_epoch_times: Optional[Sequence[float]],
    countable: str,
    min_width: float,
    max_attempts: int,
    seed: Optional[int],
    tables: bool,
    log_level: str,
    log_file: Optional[str],
    ) -> float:
    """Build a Skyline from the arguments and print its log-likelihood.

    The tree is parsed by toytree and can be a newick string or a
    path to a newick file.
    """
    bskyline.set_log_level(log_level=log_level, log_file=log_file)
    logger.info(f"CMD: {sys.argv[0].rsplit('/')[-1]} {' '.join(sys.argv[1:])}")

    sky = Skyline(
        tree=tree,
        popsizes=popsizes,
        log_popsizes=log_popsizes,
        popsize_group_sizes=popsize_group_sizes,
        popsize_epoch_times=popsize_epoch_times,
        sampling_intensity=sampling_intensity,
        sampling_group_sizes=sampling_group_sizes,
        sampling_epoch_times=sampling_epoch_times,
        countable=countable,
        min_width=min_width,
        max_attempts=max_attempts,
        seed=seed,
    )
    loglik = sky.log_likelihood()
    if tables:
        print(sky)
        print(sky.get_segment_table().to_string())
    print(f"loglik\t{loglik!r}")
    return loglik


def get_parser() -> argparse.ArgumentParser:
    """Return the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Skyline coalescent log-likelihood of a genealogy.")
    parser.add_argument(
        '--tree', type=str, required=True, help='Newick string or file.')
    parser.add_argument(
        '--popsizes', type=float, nargs="+", help='Population size of each group.')
    parser.add_argument(
        '--log-popsizes', type=float, nargs="+", help='Log population size of each group.')
    parser.add_argument(
        '--popsize-group-sizes', type=int, nargs="+", help='Countable events per group.')
    parser.add_argument(
        '--popsize-epoch-times', type=float, nargs="+", help='Change times between groups.')
    parser.add_argument(
        '--sampling-intensity', type=float, nargs="+", help='Sampling intensity of each epoch.')
    parser.add_argument(
        '--sampling-group-sizes', type=int, nargs="+", help='Samples per sampling epoch.')
    parser.add_argument(
        '--sampling-epoch-times', type=float, nargs="+", help='Change times between sampling epochs.')
    parser.add_argument(
        '--countable', type=str, default="coalescent", choices=["coalescent", "all"],
        help='Events counted by population size groups.')
    parser.add_argument(
        '--min-width', type=float, default=0., help='Minimum duration of a group.')
    parser.add_argument(
        '--max-attempts', type=int, default=10_000, help='Max group size adjustment rounds.')
    parser.add_argument(
        '--seed', type=int, default=None, help='Random number generator seed')
    parser.add_argument(
        '--tables', action='store_true', help='Print group and segment tables.')
    parser.add_argument(
        '--log-level', type=str, default="WARNING", help='logger level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument(
        '--log-file', type=str, default=None, help='Also log to this file.')
    return parser


def cli(args: Optional[Sequence[str]]=None) -> None:
    """Parse command line arguments and run main()."""
    cli_args = get_parser().parse_args(args)
    main(**vars(cli_args))


if __name__ == "__main__":
    cli()
