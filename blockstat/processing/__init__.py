# -*- coding: utf-8 -*-
"""
Processing Framework - Processor base classes, tunable parameters, versioning.

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

from blockstat.processing.base import (
    ImageProcessor,
    ImageTransform,
    BandwiseTransformMixin,
)
from blockstat.processing.params import Range, Options, Desc, ParamSpec
from blockstat.processing.versioning import processor_version, processor_tags

__all__ = [
    'ImageProcessor',
    'ImageTransform',
    'BandwiseTransformMixin',
    'Range',
    'Options',
    'Desc',
    'ParamSpec',
    'processor_version',
    'processor_tags',
]
