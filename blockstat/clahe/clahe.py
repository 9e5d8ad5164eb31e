# -*- coding: utf-8 -*-
"""
CLAHE - Contrast Limited Adaptive Histogram Equalization processor.

Converts the source to an 8-bit working copy, equalizes it with either the
exact sliding-window engine or the block-interpolated engine, and blends
the result back into the source representation (GRAY8, GRAY16, GRAY32 or
RGB) through an optional mask, restricted to an optional region of
interest.

References
----------
Zuiderveld, K. "Contrast Limited Adaptive Histogram Equalization."
Graphics Gems IV, Academic Press, 1994, pp. 474-485.

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

# Standard library
import logging
from typing import Annotated, Any

# Third-party
import numpy as np

# blockstat internal
from blockstat.clahe.apply import apply_equalization
from blockstat.clahe.fast_flat import equalize_blocks
from blockstat.clahe.flat import equalize_exact
from blockstat.pixels import pixel_type_of, to_byte
from blockstat.processing.base import ImageTransform
from blockstat.processing.params import Desc, Options, Range
from blockstat.processing.versioning import processor_tags, processor_version
from blockstat.vocabulary import PixelType, ProcessorCategory

logger = logging.getLogger(__name__)


@processor_version('1.0.0')
@processor_tags(
    category=ProcessorCategory.ENHANCE,
    pixel_types=(PixelType.GRAY8, PixelType.GRAY16,
                 PixelType.GRAY32, PixelType.RGB),
    description='Contrast limited adaptive histogram equalization',
)
class CLAHE(ImageTransform):
    """Contrast limited adaptive histogram equalization.

    Parameters
    ----------
    block_radius : int
        Radius of the equalization window; windows (or grid blocks) are
        ``2 * block_radius + 1`` pixels wide. Default 63.
    n_bins : int
        Number of histogram bins. Default 256.
    slope : float
        Maximum slope of the transfer function; larger values allow more
        contrast gain. Default 3.0.
    method : str
        ``'fast'`` (block-interpolated) or ``'exact'`` (per-pixel
        sliding window). Default ``'fast'``.
    workers : int
        Threads used by the exact method. Default 1.

    Notes
    -----
    ``apply`` also accepts ``mask`` (blend weights shaped like the ROI,
    float in ``[0, 1]`` or ``uint8``), ``roi`` (``(x, y, width, height)``)
    and ``progress_callback`` keywords. With ``method='exact'`` the mask
    also scales the clip slope per pixel toward 1.

    Examples
    --------
    >>> clahe = CLAHE(block_radius=31, slope=2.5)
    >>> enhanced = clahe.apply(image)
    >>> exact = clahe.apply(image, method='exact', workers=4)
    """

    block_radius: Annotated[int, Range(min=0), Desc('Window radius')] = 63
    n_bins: Annotated[int, Range(min=2), Desc('Histogram bins')] = 256
    slope: Annotated[float, Range(min=1.0), Desc('Maximum transfer slope')] = 3.0
    method: Annotated[str, Options('fast', 'exact'),
                      Desc('Equalization strategy')] = 'fast'
    workers: Annotated[int, Range(min=1), Desc('Threads for the exact method')] = 1

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        """Equalize *source*, returning a new array of the same type."""
        params = self._resolve_params(kwargs)
        pixel_type = pixel_type_of(source)
        roi = kwargs.get('roi')
        src = to_byte(source)
        logger.debug(
            "CLAHE %s on %s %s, radius %d, %d bins, slope %g",
            params['method'], pixel_type.value, source.shape,
            params['block_radius'], params['n_bins'], params['slope'],
        )

        if params['method'] == 'exact':
            dst = equalize_exact(
                src, params['block_radius'], params['n_bins'], params['slope'],
                roi=roi, workers=params['workers'],
                progress=lambda f: self._report_progress(kwargs, 0.9 * f),
                mask=kwargs.get('mask'),
            )
        else:
            dst = equalize_blocks(
                src, params['block_radius'], params['n_bins'], params['slope'],
                roi=roi,
            )
            self._report_progress(kwargs, 0.9)

        result = apply_equalization(source, src, dst, kwargs.get('mask'), roi)
        self._report_progress(kwargs, 1.0)
        return result
