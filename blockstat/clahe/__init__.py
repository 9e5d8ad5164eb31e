# -*- coding: utf-8 -*-
"""
CLAHE - Contrast limited adaptive histogram equalization engines.

``equalize_exact`` equalizes every pixel with the clipped histogram of its
own window, maintained incrementally by ``SlidingWindowHistogram``.
``equalize_blocks`` interpolates between transfer functions computed on a
coarse grid. ``apply_equalization`` blends either result back into the
source representation and ``CLAHE`` wraps the whole chain as a processor.

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

from blockstat.clahe.histogram import (
    quantize,
    build_histogram,
    clip_limit,
    clip_histogram,
    create_transfer,
    transfer_value,
)
from blockstat.clahe.sliding_window import SlidingWindowHistogram
from blockstat.clahe.flat import equalize_exact
from blockstat.clahe.fast_flat import equalize_blocks, grid_centers
from blockstat.clahe.apply import apply_equalization, resolve_mask
from blockstat.clahe.clahe import CLAHE

__all__ = [
    'quantize',
    'build_histogram',
    'clip_limit',
    'clip_histogram',
    'create_transfer',
    'transfer_value',
    'SlidingWindowHistogram',
    'equalize_exact',
    'equalize_blocks',
    'grid_centers',
    'apply_equalization',
    'resolve_mask',
    'CLAHE',
]
