"""
conftest.py
===========
Shared fixtures for the bskyline test suite.

The newick strings are dengue virus genealogies with tips sampled
through time, used for fixed-value likelihood checks.
"""

import pytest
from loguru import logger


# heterochronous tips at 0, 8, 10, 15, 17; coalescences at 15, 16, 17, 22
DENGUE_5 = (
    "((((D4Mexico84:5.0,D4ElSal94:15.0):1.0,D4PRico86:8.0):1.0,"
    "D4Tahiti79:2.0):5.0,D4Indon77:5.0);"
)

# heterochronous tips at 0, 0, 6, 6, 20, 28; coalescences at 11, 23, 25, 30, 40
DENGUE_6A = (
    "((D4Philip56:2.0,(D4Philip64:3.0,D4Philip84:23.0):7.0):10.0,"
    "(D4SLanka78:19.0,(D4Thai78:5.0,D4Thai84:11.0):14.0):15.0);"
)

DENGUE_6B = (
    "((D4Philip56:2.0,(D4Philip64:3.0,D4Philip84:23.0):7.0):10.0,"
    "(D4SLanka78:17.0,(D4Thai78:5.0,D4Thai84:11.0):12.0):17.0);"
)

DENGUE_6C = (
    "((D4Philip56:2.0,(D4Philip64:3.0,D4Philip84:23.0):7.0):10.0,"
    "(D4SLanka78:26.0,(D4Thai78:5.0,D4Thai84:11.0):21.0):8.0);"
)

# homochronous, coalescences at 11, 23, 25, 30, 40
DENGUE_ULTRAMETRIC = (
    "((D4Philip56:30,(D4Philip64:23,D4Philip84:23):7):10,"
    "(D4SLanka78:25,(D4Thai78:11,D4Thai84:11):14):15);"
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: simulation tests that run msprime")


@pytest.fixture
def dengue5():
    return DENGUE_5


@pytest.fixture
def dengue6a():
    return DENGUE_6A


@pytest.fixture
def ultrametric():
    return DENGUE_ULTRAMETRIC


@pytest.fixture
def log_records():
    """Collect loguru records emitted by bskyline modules."""
    records = []
    idx = logger.add(
        lambda message: records.append(message.record),
        level="DEBUG",
        filter=lambda record: record["extra"].get("name") == "bskyline",
    )
    yield records
    logger.remove(idx)


def get_levels(records):
    """Return the level names of collected records."""
    return [record["level"].name for record in records]
