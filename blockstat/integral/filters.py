# -*- coding: utf-8 -*-
"""
Integral Image Filters - Box filters and local normalization processors.

``ImageTransform`` front-ends over the summed-area tables and
``BlockStatistics``:

- ``LocalStatisticsFilter``: windowed mean / variance / std maps, bandwise
  over ``(bands, rows, cols)`` stacks.
- ``BlockMean``: type-preserving box mean for GRAY8, GRAY16, GRAY32 and RGB.
- ``DifferenceOfMean``: difference of two box means (band-pass).
- ``NormalizeLocalContrast``: local mean centering and std stretching.
- ``RemoveOutliers``: in-paints pixels far from their local mean from the
  surrounding inliers (``inpaint_missing``).
- ``BoxDownsample``: area-averaging downsampling.

Every filter runs in time independent of the block radius.

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
from blockstat.exceptions import ValidationError
from blockstat.integral._windows import block_areas, block_bounds
from blockstat.integral.block_statistics import BlockStatistics
from blockstat.integral.tables import (
    IntegralImage,
    LongRGBIntegralImage,
    create_integral_image,
)
from blockstat.pixels import CODECS, pixel_type_of
from blockstat.processing.base import BandwiseTransformMixin, ImageTransform
from blockstat.processing.params import Desc, Options, Range
from blockstat.processing.versioning import processor_tags, processor_version
from blockstat.processing._validation import validate_image_2d
from blockstat.vocabulary import PixelType, ProcessorCategory

logger = logging.getLogger(__name__)

_ALL_TYPES = (PixelType.GRAY8, PixelType.GRAY16, PixelType.GRAY32, PixelType.RGB)
_GRAY_TYPES = (PixelType.GRAY8, PixelType.GRAY16, PixelType.GRAY32)

# Offset re-centering a signed difference into the unsigned range.
_DIFFERENCE_OFFSET = {
    PixelType.GRAY8: 127,
    PixelType.GRAY16: 32767,
    PixelType.RGB: 127,
}


def _scaled_means(
    table: IntegralImage,
    lo_x: np.ndarray,
    hi_x: np.ndarray,
    lo_y: np.ndarray,
    hi_y: np.ndarray,
) -> np.ndarray:
    """Block means over a grid of bounds in the table's representation.

    Integer tables return rounded int64 means, float tables float64 means
    and RGB tables ``(rows, cols, 3)`` uint8 means.
    """
    scale = 1.0 / block_areas(lo_x, hi_x, lo_y, hi_y)
    args = (lo_x[np.newaxis, :], lo_y[:, np.newaxis],
            hi_x[np.newaxis, :], hi_y[:, np.newaxis])
    if isinstance(table, LongRGBIntegralImage):
        return table.get_channel_means(*args, scale)
    return np.asarray(table.get_scaled_sum(*args, scale))


def _block_mean(
    table: IntegralImage, radius_x: int, radius_y: int
) -> np.ndarray:
    lo_x, hi_x = block_bounds(table.width, radius_x)
    lo_y, hi_y = block_bounds(table.height, radius_y)
    return _scaled_means(table, lo_x, hi_x, lo_y, hi_y)


def _gray_float(source: np.ndarray) -> np.ndarray:
    validate_image_2d(source, 'source')
    if not (np.issubdtype(source.dtype, np.integer)
            or np.issubdtype(source.dtype, np.floating)):
        raise ValidationError(
            f"Expected a real-valued image, got {source.dtype}"
        )
    return source.astype(np.float64)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.STATISTICS,
                pixel_types=_GRAY_TYPES,
                description='Windowed mean, variance or std map')
class LocalStatisticsFilter(BandwiseTransformMixin, ImageTransform):
    """Windowed statistics map over the block around every pixel.

    Parameters
    ----------
    statistic : str
        ``'mean'``, ``'variance'`` (population), ``'sample_variance'`` or
        ``'std'`` (sample). Default ``'std'``.
    radius_x, radius_y : int
        Block radii; the window is ``(2 * radius_x + 1)`` by
        ``(2 * radius_y + 1)`` pixels, clamped at the border. Default 3.

    Examples
    --------
    >>> f = LocalStatisticsFilter(statistic='std', radius_x=5, radius_y=5)
    >>> texture = f.apply(image)
    """

    statistic: Annotated[str, Options('mean', 'variance', 'sample_variance', 'std'),
                         Desc('Windowed statistic')] = 'std'
    radius_x: Annotated[int, Range(min=0), Desc('Block radius along columns')] = 3
    radius_y: Annotated[int, Range(min=0), Desc('Block radius along rows')] = 3

    def _apply_2d(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        params = self._resolve_params(kwargs)
        stats = BlockStatistics(source)
        method = getattr(stats, params['statistic'])
        result = method(params['radius_x'], params['radius_y'])
        self._report_progress(kwargs, 1.0)
        return result


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS, pixel_types=_ALL_TYPES,
                description='Box mean preserving the pixel type')
class BlockMean(ImageTransform):
    """Box mean filter that preserves the source representation.

    Integer sources are rounded half up, RGB is filtered per channel.

    Parameters
    ----------
    radius_x, radius_y : int
        Block radii. Default 3.
    """

    radius_x: Annotated[int, Range(min=0), Desc('Block radius along columns')] = 3
    radius_y: Annotated[int, Range(min=0), Desc('Block radius along rows')] = 3

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        """Return the box mean of *source* with the same shape and dtype."""
        params = self._resolve_params(kwargs)
        pixel_type_of(source)
        table = create_integral_image(source)
        mean = _block_mean(table, params['radius_x'], params['radius_y'])
        self._report_progress(kwargs, 1.0)
        return mean.astype(source.dtype)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS, pixel_types=_ALL_TYPES,
                description='Difference of two box means')
class DifferenceOfMean(ImageTransform):
    """Band-pass filter ``mean(radius_1) - mean(radius_2)``.

    GRAY32 results are the plain float difference. Integer results are
    re-centered (``+127`` for GRAY8 and per RGB channel, ``+32767`` for
    GRAY16) and clamped into the source range.

    Parameters
    ----------
    radius_1, radius_2 : int
        Square block radii of the two means. Default 2 and 8.
    """

    radius_1: Annotated[int, Range(min=0), Desc('Radius of the first mean')] = 2
    radius_2: Annotated[int, Range(min=0), Desc('Radius of the second mean')] = 8

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        params = self._resolve_params(kwargs)
        pixel_type = pixel_type_of(source)
        table = create_integral_image(source)
        r1, r2 = params['radius_1'], params['radius_2']

        if pixel_type is PixelType.GRAY32:
            difference = _block_mean(table, r1, r1) - _block_mean(table, r2, r2)
            self._report_progress(kwargs, 1.0)
            return difference.astype(source.dtype)

        first = _block_mean(table, r1, r1).astype(np.int64)
        self._report_progress(kwargs, 0.5)
        second = _block_mean(table, r2, r2).astype(np.int64)
        difference = first - second + _DIFFERENCE_OFFSET[pixel_type]
        self._report_progress(kwargs, 1.0)
        return CODECS[pixel_type].encode(difference, source.dtype)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.ENHANCE, pixel_types=_GRAY_TYPES,
                description='Local mean centering and std stretching')
class NormalizeLocalContrast(ImageTransform):
    """Normalize local contrast by the windowed mean and standard deviation.

    With ``lo, hi`` the image range and ``mid = (lo + hi) / 2``:

    - ``center`` only: ``v - mean + mid``
    - ``stretch`` only: ``(v - mid) / (2 d) * (hi - lo) + mid``
    - both: ``(v - (mean - d)) / (2 d) * (hi - lo) + lo``

    where ``d = n_std * std`` of the window. Pixels whose window has zero
    std map to ``mid`` when stretching. Output is float64 (float32 sources
    stay float32).

    Parameters
    ----------
    radius_x, radius_y : int
        Block radii. Default 40.
    n_std : float
        Number of standard deviations mapped onto half the range.
        Default 3.0.
    center : bool
        Subtract the local mean. Default True.
    stretch : bool
        Divide by the local std. Default True.
    """

    radius_x: Annotated[int, Range(min=0), Desc('Block radius along columns')] = 40
    radius_y: Annotated[int, Range(min=0), Desc('Block radius along rows')] = 40
    n_std: Annotated[float, Range(min=0.0), Desc('Standard deviations per half range')] = 3.0
    center: Annotated[bool, Desc('Subtract the local mean')] = True
    stretch: Annotated[bool, Desc('Divide by the local std')] = True

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        params = self._resolve_params(kwargs)
        values = _gray_float(source)
        out_dtype = source.dtype if source.dtype == np.float32 else np.float64
        center, stretch = params['center'], params['stretch']
        if not (center or stretch):
            return values.astype(out_dtype)

        finite = values[np.isfinite(values)]
        lo = float(finite.min()) if finite.size else 0.0
        hi = float(finite.max()) if finite.size else 0.0
        length = hi - lo
        mid = length / 2.0 + lo

        mean, std = BlockStatistics(values).mean_std(
            params['radius_x'], params['radius_y']
        )
        self._report_progress(kwargs, 0.5)

        if center and not stretch:
            result = values - mean + mid
        else:
            d = params['n_std'] * std
            result = np.full_like(values, mid)
            ok = d > 0
            if center:
                result[ok] = ((values[ok] - (mean[ok] - d[ok]))
                              / 2.0 / d[ok] * length + lo)
            else:
                result[ok] = (values[ok] - mid) / 2.0 / d[ok] * length + mid
        logger.debug(
            "Normalized local contrast (center=%s, stretch=%s), range [%g, %g]",
            center, stretch, lo, hi,
        )
        self._report_progress(kwargs, 1.0)
        return result.astype(out_dtype)


# Offsets and weights of the in-painting stencil: edge neighbours count
# fully, corner neighbours half.
_INPAINT_STENCIL = (
    (-1, -1, 0.5), (-1, 0, 1.0), (-1, 1, 0.5),
    (0, -1, 1.0), (0, 1, 1.0),
    (1, -1, 0.5), (1, 0, 1.0), (1, 1, 0.5),
)


def inpaint_missing(values: np.ndarray) -> np.ndarray:
    """Fill NaN pixels from their weighted non-NaN 8-neighbours.

    Every pass replaces each NaN pixel that has at least one known
    neighbour by the weighted mean of its known neighbours (weight 1 for
    edge neighbours, 0.5 for corners). All updates of a pass read the
    state before the pass, so a gap closes from its rim inwards. Passes
    repeat until one fills nothing.

    Parameters
    ----------
    values : np.ndarray
        2D real-valued array, not modified.

    Returns
    -------
    np.ndarray
        float64 copy of *values*. Pixels in a region without any known
        pixel stay NaN.
    """
    filled = np.array(values, dtype=np.float64)
    validate_image_2d(filled, 'values')
    rows, cols = filled.shape
    missing = np.isnan(filled)
    passes = 0
    while missing.any():
        known = np.pad((~missing).astype(np.float64), 1)
        padded = np.pad(np.where(missing, 0.0, filled), 1)
        total = np.zeros_like(filled)
        weight = np.zeros_like(filled)
        for dy, dx, w in _INPAINT_STENCIL:
            window = (slice(1 + dy, 1 + dy + rows), slice(1 + dx, 1 + dx + cols))
            total += w * padded[window]
            weight += w * known[window]
        update = missing & (weight > 0)
        if not update.any():
            break
        filled[update] = total[update] / weight[update]
        missing &= ~update
        passes += 1
    logger.debug("In-painted in %d passes, %d pixels left",
                 passes, int(missing.sum()))
    return filled


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.NOISE, pixel_types=_GRAY_TYPES,
                description='In-paint local outliers from their neighbours')
class RemoveOutliers(ImageTransform):
    """In-paint pixels further than ``n_std`` local std from the local mean.

    Outliers are marked missing and filled with ``inpaint_missing`` from
    the surrounding inliers, so a cluster of outliers takes the value of
    the pixels around it rather than a window mean pulled up by the
    cluster itself. NaN pixels of float sources are filled the same way.
    A pixel that cannot be filled keeps its source value. Integer results
    are rounded half up; the source dtype is kept.

    Parameters
    ----------
    radius_x, radius_y : int
        Block radii. Default 40.
    n_std : float
        Tolerance in standard deviations. Default 3.0.
    """

    radius_x: Annotated[int, Range(min=0), Desc('Block radius along columns')] = 40
    radius_y: Annotated[int, Range(min=0), Desc('Block radius along rows')] = 40
    n_std: Annotated[float, Range(min=0.0), Desc('Tolerance in standard deviations')] = 3.0

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        params = self._resolve_params(kwargs)
        values = _gray_float(source)
        mean, std = BlockStatistics(values).mean_std(
            params['radius_x'], params['radius_y']
        )
        outliers = np.abs(values - mean) > params['n_std'] * std
        marked = values.copy()
        marked[outliers] = np.nan
        logger.debug("Marked %d outliers", int(outliers.sum()))
        self._report_progress(kwargs, 0.5)

        result = inpaint_missing(marked)
        unfilled = np.isnan(result)
        result[unfilled] = values[unfilled]
        self._report_progress(kwargs, 1.0)
        if np.issubdtype(source.dtype, np.integer):
            info = np.iinfo(source.dtype)
            return np.clip(
                np.floor(result + 0.5), info.min, info.max
            ).astype(source.dtype)
        return result.astype(source.dtype)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.GEOMETRY, pixel_types=_ALL_TYPES,
                description='Area-averaging downsampling')
class BoxDownsample(ImageTransform):
    """Downsample by averaging the source block under each output pixel.

    The output has ``max(1, int(dim / factor))`` pixels per axis; each
    output pixel is the scaled sum of the source rectangle it covers, so
    no aliasing is introduced regardless of the factor.

    Parameters
    ----------
    factor : float
        Downsampling factor, ``>= 1``. Default 2.0.
    """

    factor: Annotated[float, Range(min=1.0), Desc('Downsampling factor')] = 2.0

    @staticmethod
    def _bounds(length: int, out_length: int):
        pixel = length / out_length
        start = np.arange(out_length) * pixel
        lo = np.clip(np.floor(start + 0.5).astype(np.int64) - 1, -1, length - 1)
        hi = np.clip(np.floor(start + pixel - 0.5).astype(np.int64), -1, length - 1)
        return lo, hi

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        params = self._resolve_params(kwargs)
        pixel_type_of(source)
        rows, cols = source.shape[:2]
        out_rows = max(1, int(rows / params['factor']))
        out_cols = max(1, int(cols / params['factor']))
        lo_x, hi_x = self._bounds(cols, out_cols)
        lo_y, hi_y = self._bounds(rows, out_rows)
        result = _scaled_means(
            create_integral_image(source), lo_x, hi_x, lo_y, hi_y
        )
        logger.debug(
            "Downsampled %dx%d to %dx%d", cols, rows, out_cols, out_rows
        )
        self._report_progress(kwargs, 1.0)
        return result.astype(source.dtype)
