# -*- coding: utf-8 -*-
"""
Integral Images - Summed-area tables and the statistics built on them.

Tables
    ``IntIntegralImage`` - int32 accumulator (small 8/16-bit sources)
    ``LongIntegralImage`` - int64 accumulator (integer sources)
    ``DoubleIntegralImage`` - float64 accumulator (real sources)
    ``LongRGBIntegralImage`` - three int64 accumulators (RGB sources)

Statistics
    ``BlockStatistics`` - windowed mean, variance and std
    ``BlockPMCC`` - windowed Pearson correlation of two images

Processors
    ``LocalStatisticsFilter``, ``BlockMean``, ``DifferenceOfMean``,
    ``NormalizeLocalContrast``, ``RemoveOutliers``, ``BoxDownsample``

Helpers
    ``inpaint_missing`` - fill NaN pixels from their neighbours

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

from blockstat.integral.tables import (
    IntegralImage,
    IntIntegralImage,
    LongIntegralImage,
    DoubleIntegralImage,
    LongRGBIntegralImage,
    create_integral_image,
)
from blockstat.integral.block_statistics import BlockStatistics
from blockstat.integral.block_pmcc import BlockPMCC, Overlap
from blockstat.integral.filters import (
    LocalStatisticsFilter,
    BlockMean,
    DifferenceOfMean,
    NormalizeLocalContrast,
    RemoveOutliers,
    BoxDownsample,
    inpaint_missing,
)

__all__ = [
    'IntegralImage',
    'IntIntegralImage',
    'LongIntegralImage',
    'DoubleIntegralImage',
    'LongRGBIntegralImage',
    'create_integral_image',
    'BlockStatistics',
    'BlockPMCC',
    'Overlap',
    'LocalStatisticsFilter',
    'BlockMean',
    'DifferenceOfMean',
    'NormalizeLocalContrast',
    'RemoveOutliers',
    'BoxDownsample',
    'inpaint_missing',
]
