# -*- coding: utf-8 -*-
"""
blockstat - Windowed image statistics and CLAHE in constant time per pixel.

Summed-area tables (integral images) with explicit accumulator precision,
windowed mean / variance / correlation built on them, and contrast limited
adaptive histogram equalization in an exact and a block-interpolated
variant, over 8-bit, 16-bit, float and RGB numpy rasters.

Dependencies
------------
numpy

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

__version__ = "0.1.0"

from blockstat.exceptions import (
    BlockstatError,
    ValidationError,
    ProcessorError,
)
from blockstat.vocabulary import PixelType, ProcessorCategory
from blockstat.integral import (
    IntegralImage,
    IntIntegralImage,
    LongIntegralImage,
    DoubleIntegralImage,
    LongRGBIntegralImage,
    create_integral_image,
    BlockStatistics,
    BlockPMCC,
)
from blockstat.clahe import CLAHE

__all__ = [
    'BlockstatError',
    'ValidationError',
    'ProcessorError',
    'PixelType',
    'ProcessorCategory',
    'IntegralImage',
    'IntIntegralImage',
    'LongIntegralImage',
    'DoubleIntegralImage',
    'LongRGBIntegralImage',
    'create_integral_image',
    'BlockStatistics',
    'BlockPMCC',
    'CLAHE',
]
