"""
Shared fixtures: a two-cell keyboard small enough to check by hand, and the
keyboards defined in the repository configuration.

The two-cell keyboard has one row, two columns and five sub-positions per
cell (tap at 4, four diagonal swipes). Column 0 is typed by the left thumb,
column 1 by the right.

    cell (0, 0): c d e f a     cell (0, 1): g h i j b
    positions:   0 1 2 3 4                  5 6 7 8 9
"""

from pathlib import Path

import numpy as np
import pytest

from keyswipe.config_loader import ConfigLoader
from keyswipe.geometry import Geometry
from keyswipe.layout import Layout
from keyswipe.penalty import PenaltyModel, PenaltyParams

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

TINY_CELLS = [['cdefa', 'ghijb']]


@pytest.fixture
def tiny_geometry():
    return Geometry(
        name='tiny',
        rows=1,
        cols=2,
        subpositions=5,
        tap_subposition=4,
        phase_offset=0.125,
        left_columns=1,
    )


@pytest.fixture
def tiny_space_geometry():
    return Geometry(
        name='tiny_space',
        rows=1,
        cols=2,
        subpositions=5,
        tap_subposition=4,
        phase_offset=0.125,
        space_coordinates=(0.5, 1.0),
        left_columns=1,
    )


@pytest.fixture
def tiny_layout(tiny_geometry):
    return Layout.from_cells(tiny_geometry, TINY_CELLS)


@pytest.fixture
def tiny_space_layout(tiny_space_geometry):
    return Layout.from_cells(tiny_space_geometry, TINY_CELLS)


@pytest.fixture
def flat_params():
    """Zero base costs, default weights for everything else."""
    return PenaltyParams(base_costs=np.zeros((1, 2)))


@pytest.fixture
def tiny_model(tiny_geometry, flat_params):
    return PenaltyModel(tiny_geometry, flat_params)


@pytest.fixture
def tiny_space_model(tiny_space_geometry, flat_params):
    return PenaltyModel(tiny_space_geometry, flat_params)


@pytest.fixture
def config_path():
    return CONFIG_PATH


@pytest.fixture
def config_loader():
    return ConfigLoader(CONFIG_PATH)
