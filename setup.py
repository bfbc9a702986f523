#!/usr/bin/env python

"""
Run `pip install -e .` to install local git version.
"""

import os
import re
from setuptools import setup, find_packages

# parse version from init.py
with open("bskyline/__init__.py", encoding="utf-8") as init:
    CUR_VERSION = re.search(
        r"^__version__ = ['\"]([^'\"]*)['\"]",
        init.read(),
        re.M,
    ).group(1)


# nasty workaround for RTD low memory limits
on_rtd = os.environ.get('READTHEDOCS') == 'True'
if on_rtd:
    install_requires = []
else:
    install_requires = [
        "numpy",
        "pandas",
        "toytree",
        "toyplot",
        "msprime",
        "numba",
        "scipy",
        "loguru"
    ]


# setup installation
setup(
    name="bskyline",
    packages=find_packages(exclude=["tests", "tests.*"]),
    version=CUR_VERSION,
    author="bskyline developers",
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    entry_points={'console_scripts': ['bskyline = bskyline.cli:cli']},
    license='GPL',
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
