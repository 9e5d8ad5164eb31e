# -*- coding: utf-8 -*-
"""
Shared test fixtures - Synthetic rasters for the blockstat test suite.

All random fixtures are seeded so results are reproducible.

Author
------
blockstat contributors

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def gray8(rng):
    """Random 8-bit image, 10 rows x 13 cols."""
    return rng.integers(0, 256, size=(10, 13), dtype=np.uint8)


@pytest.fixture
def gray16(rng):
    """Random 16-bit image, 11 rows x 9 cols."""
    return rng.integers(0, 65536, size=(11, 9), dtype=np.uint16)


@pytest.fixture
def gray32(rng):
    """Random float32 image, 12 rows x 14 cols."""
    return (rng.random((12, 14)) * 100.0 - 20.0).astype(np.float32)


@pytest.fixture
def rgb(rng):
    """Random RGB image, 9 rows x 11 cols x 3 channels."""
    return rng.integers(0, 256, size=(9, 11, 3), dtype=np.uint8)


@pytest.fixture
def checkerboard():
    """8x8 0/255 checkerboard."""
    yy, xx = np.mgrid[0:8, 0:8]
    return np.where((xx + yy) % 2 == 0, 0, 255).astype(np.uint8)


@pytest.fixture
def flat100():
    """4x4 image with every pixel 100."""
    return np.full((4, 4), 100.0)
