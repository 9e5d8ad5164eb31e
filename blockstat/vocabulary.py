# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for blockstat.

Defines the controlled vocabularies used across the package: the pixel
representations understood by the summed-area tables and the CLAHE apply
step, and the processor categories used in ``@processor_tags``.

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

from enum import Enum


class PixelType(Enum):
    """Supported pixel representations.

    Each member selects a summed-area table precision variant and a pixel
    codec for writing equalized values back into the source representation.
    """

    GRAY8 = "gray8"
    GRAY16 = "gray16"
    GRAY32 = "gray32"
    RGB = "rgb"


class ProcessorCategory(Enum):
    """Processing categories for processor tagging."""

    FILTERS = "filters"
    ENHANCE = "enhance"
    STATISTICS = "statistics"
    NOISE = "noise"
    GEOMETRY = "geometry"
