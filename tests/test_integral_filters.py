# -*- coding: utf-8 -*-
"""
Integral Filter Tests - Tests for the summed-area table processors.

Tests BlockMean, DifferenceOfMean, NormalizeLocalContrast, RemoveOutliers,
BoxDownsample and LocalStatisticsFilter: type preservation, constant-image
fixed points, agreement with BlockStatistics, parameter validation and
per-call overrides.

Dependencies
------------
pytest

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

from blockstat.exceptions import ValidationError
from blockstat.integral import (
    BlockMean,
    BlockStatistics,
    BoxDownsample,
    DifferenceOfMean,
    LocalStatisticsFilter,
    NormalizeLocalContrast,
    RemoveOutliers,
    inpaint_missing,
)


# ---------------------------------------------------------------------------
# LocalStatisticsFilter
# ---------------------------------------------------------------------------

class TestLocalStatisticsFilter:
    """Transform front-end over BlockStatistics."""

    def test_matches_block_statistics(self, gray32):
        f = LocalStatisticsFilter(statistic='std', radius_x=2, radius_y=1)
        np.testing.assert_array_equal(
            f.apply(gray32), BlockStatistics(gray32).std(2, 1)
        )

    def test_runtime_override(self, gray32):
        f = LocalStatisticsFilter()
        result = f.apply(gray32, statistic='mean', radius_x=1, radius_y=1)
        np.testing.assert_array_equal(result, BlockStatistics(gray32).mean(1))
        assert f.statistic == 'std'

    def test_bandwise_3d(self, rng):
        stack = rng.random((2, 8, 9))
        result = LocalStatisticsFilter(statistic='variance').apply(stack)
        assert result.shape == (2, 8, 9)
        np.testing.assert_array_equal(
            result[1], BlockStatistics(stack[1]).variance(3)
        )

    def test_invalid_statistic_raises(self):
        with pytest.raises(ValidationError, match="not in allowed choices"):
            LocalStatisticsFilter(statistic='median')

    def test_negative_radius_raises(self):
        with pytest.raises(ValidationError, match="below minimum"):
            LocalStatisticsFilter(radius_x=-1)

    def test_progress_callback(self, gray32):
        seen = []
        LocalStatisticsFilter().apply(gray32, progress_callback=seen.append)
        assert seen[-1] == 1.0


# ---------------------------------------------------------------------------
# BlockMean
# ---------------------------------------------------------------------------

class TestBlockMean:
    """Type-preserving box mean."""

    def test_constant_gray8_unchanged(self):
        image = np.full((9, 7), 77, dtype=np.uint8)
        result = BlockMean(radius_x=2, radius_y=3).apply(image)
        assert result.dtype == np.uint8
        np.testing.assert_array_equal(result, image)

    def test_float_matches_block_statistics(self, gray32):
        result = BlockMean(radius_x=2, radius_y=2).apply(gray32)
        assert result.dtype == np.float32
        np.testing.assert_allclose(
            result, BlockStatistics(gray32).mean(2), rtol=1e-5, atol=1e-4
        )

    def test_gray16_rounded(self, gray16):
        result = BlockMean(radius_x=1, radius_y=1).apply(gray16)
        assert result.dtype == np.uint16
        expected = np.floor(BlockStatistics(gray16).mean(1) + 0.5)
        assert np.abs(result.astype(np.float64) - expected).max() <= 1

    def test_rgb_per_channel(self, rgb):
        f = BlockMean(radius_x=2, radius_y=1)
        result = f.apply(rgb)
        assert result.shape == rgb.shape
        assert result.dtype == np.uint8
        for c in range(3):
            np.testing.assert_array_equal(
                result[..., c], f.apply(np.ascontiguousarray(rgb[..., c]))
            )

    def test_unsupported_type_raises(self):
        with pytest.raises(ValidationError, match="Unsupported"):
            BlockMean().apply(np.ones((4, 4), dtype=np.int32))


# ---------------------------------------------------------------------------
# DifferenceOfMean
# ---------------------------------------------------------------------------

class TestDifferenceOfMean:
    """Band-pass by difference of two box means."""

    @pytest.mark.parametrize("dtype, offset", [(np.uint8, 127), (np.uint16, 32767)])
    def test_constant_gray_is_offset(self, dtype, offset):
        image = np.full((10, 10), 50, dtype=dtype)
        result = DifferenceOfMean(radius_1=1, radius_2=4).apply(image)
        assert result.dtype == dtype
        np.testing.assert_array_equal(result, offset)

    def test_constant_float_is_zero(self):
        image = np.full((10, 10), 3.5, dtype=np.float32)
        result = DifferenceOfMean().apply(image)
        np.testing.assert_allclose(result, 0.0, atol=1e-5)

    def test_constant_rgb_is_offset(self):
        image = np.full((6, 6, 3), 200, dtype=np.uint8)
        result = DifferenceOfMean(radius_1=1, radius_2=2).apply(image)
        np.testing.assert_array_equal(result, 127)

    def test_float_difference(self, gray32):
        stats = BlockStatistics(gray32)
        result = DifferenceOfMean(radius_1=1, radius_2=3).apply(gray32)
        np.testing.assert_allclose(
            result, stats.mean(1) - stats.mean(3), rtol=1e-4, atol=1e-4
        )

    def test_gray8_clamped(self):
        image = np.zeros((9, 9), dtype=np.uint8)
        image[4, 4] = 255
        result = DifferenceOfMean(radius_1=0, radius_2=4).apply(image)
        assert result[4, 4] == 255
        assert result.min() >= 0


# ---------------------------------------------------------------------------
# NormalizeLocalContrast
# ---------------------------------------------------------------------------

class TestNormalizeLocalContrast:
    """Local centering and stretching."""

    def test_center_only(self, rng):
        image = rng.random((12, 12)) * 50.0
        f = NormalizeLocalContrast(radius_x=2, radius_y=2, center=True, stretch=False)
        mid = (image.max() + image.min()) / 2.0
        expected = image - BlockStatistics(image).mean(2) + mid
        np.testing.assert_allclose(f.apply(image), expected, rtol=1e-9, atol=1e-9)

    def test_center_and_stretch(self, rng):
        image = rng.random((12, 12)) * 50.0 + 10.0
        f = NormalizeLocalContrast(radius_x=3, radius_y=2, n_std=2.0)
        mean, std = BlockStatistics(image).mean_std(3, 2)
        d = 2.0 * std
        lo, hi = image.min(), image.max()
        expected = (image - (mean - d)) / 2.0 / d * (hi - lo) + lo
        np.testing.assert_allclose(f.apply(image), expected, rtol=1e-9, atol=1e-9)

    def test_stretch_only(self, rng):
        image = rng.random((10, 10))
        f = NormalizeLocalContrast(radius_x=2, radius_y=2, n_std=1.0, center=False)
        std = BlockStatistics(image).std(2)
        lo, hi = image.min(), image.max()
        mid = (hi + lo) / 2.0
        expected = (image - mid) / 2.0 / std * (hi - lo) + mid
        np.testing.assert_allclose(f.apply(image), expected, rtol=1e-9, atol=1e-9)

    def test_flat_window_maps_to_midpoint(self):
        image = np.full((8, 8), 5.0)
        result = NormalizeLocalContrast(radius_x=1, radius_y=1).apply(image)
        np.testing.assert_array_equal(result, 5.0)

    def test_no_op(self, rng):
        image = rng.random((5, 5))
        f = NormalizeLocalContrast(center=False, stretch=False)
        np.testing.assert_array_equal(f.apply(image), image)

    def test_float32_preserved(self, gray32):
        result = NormalizeLocalContrast(radius_x=2, radius_y=2).apply(gray32)
        assert result.dtype == np.float32

    def test_bool_parameter_type_checked(self):
        with pytest.raises(TypeError, match="center"):
            NormalizeLocalContrast(center='yes')


# ---------------------------------------------------------------------------
# RemoveOutliers
# ---------------------------------------------------------------------------

class TestInpaintMissing:
    """Iterative neighbour in-painting of NaN pixels."""

    def test_weights_edges_over_corners(self):
        values = np.array([[0.0, 4.0, 0.0],
                           [4.0, np.nan, 4.0],
                           [0.0, 4.0, 0.0]])
        result = inpaint_missing(values)
        assert result[1, 1] == pytest.approx(16.0 / 6.0)

    def test_known_pixels_untouched(self, rng):
        values = rng.random((6, 7))
        values[2, 3] = np.nan
        result = inpaint_missing(values)
        keep = np.ones(values.shape, dtype=bool)
        keep[2, 3] = False
        np.testing.assert_array_equal(result[keep], values[keep])
        assert np.isfinite(result).all()

    def test_gap_closes_over_passes(self):
        result = inpaint_missing(np.array([[1.0, np.nan, np.nan]]))
        np.testing.assert_array_equal(result, [[1.0, 1.0, 1.0]])

    def test_pass_reads_previous_state(self):
        # Both gap pixels are filled in the same pass from their outer side.
        result = inpaint_missing(np.array([[2.0, np.nan, np.nan, 8.0]]))
        np.testing.assert_array_equal(result, [[2.0, 2.0, 8.0, 8.0]])

    def test_all_missing_stays_missing(self):
        result = inpaint_missing(np.full((3, 3), np.nan))
        assert np.isnan(result).all()

    def test_input_not_modified(self):
        values = np.array([[1.0, np.nan]])
        inpaint_missing(values)
        assert np.isnan(values[0, 1])

    def test_rejects_3d(self):
        with pytest.raises(ValidationError):
            inpaint_missing(np.zeros((2, 2, 2)))


class TestRemoveOutliers:
    """In-painting of local outliers from the surrounding inliers."""

    def test_spike_inpainted(self):
        image = np.full((20, 20), 10, dtype=np.uint8)
        image[10, 10] = 250
        result = RemoveOutliers(radius_x=3, radius_y=3, n_std=2.0).apply(image)
        assert result.dtype == np.uint8
        np.testing.assert_array_equal(result, 10)

    def test_float_spike(self):
        image = np.full((20, 20), 10.0)
        image[10, 10] = 1000.0
        result = RemoveOutliers(radius_x=3, radius_y=3, n_std=2.0).apply(image)
        assert result[10, 10] == 10.0

    def test_two_pixel_cluster_takes_surrounding_value(self):
        image = np.full((20, 20), 10.0)
        image[10, 10] = image[10, 11] = 1000.0
        result = RemoveOutliers(radius_x=3, radius_y=3, n_std=2.0).apply(image)
        # The window mean at the cluster is pulled up to 2470 / 49.
        mean = BlockStatistics(image).mean(3, 3)
        assert mean[10, 10] == pytest.approx(2470.0 / 49.0)
        np.testing.assert_array_equal(result, 10.0)

    def test_float_nan_filled(self):
        image = np.full((8, 8), 5.0)
        image[3, 4] = np.nan
        result = RemoveOutliers(radius_x=2, radius_y=2).apply(image)
        np.testing.assert_array_equal(result, 5.0)

    def test_smooth_image_unchanged(self):
        image = np.tile(np.arange(16, dtype=np.float64), (16, 1))
        result = RemoveOutliers(radius_x=2, radius_y=2, n_std=3.0).apply(image)
        np.testing.assert_array_equal(result, image)

    def test_progress(self):
        seen = []
        image = np.full((6, 6), 3, dtype=np.uint16)
        RemoveOutliers(radius_x=1, radius_y=1).apply(
            image, progress_callback=seen.append,
        )
        assert seen == [0.5, 1.0]


# ---------------------------------------------------------------------------
# BoxDownsample
# ---------------------------------------------------------------------------

class TestBoxDownsample:
    """Area-averaging downsampling."""

    def test_integer_factor_is_block_mean(self, rng):
        image = rng.random((8, 8))
        result = BoxDownsample(factor=2.0).apply(image)
        expected = image.reshape(4, 2, 4, 2).mean(axis=(1, 3))
        np.testing.assert_allclose(result, expected, rtol=1e-12)

    def test_fractional_factor_shape(self):
        image = np.full((10, 10), 9, dtype=np.uint8)
        result = BoxDownsample(factor=2.5).apply(image)
        assert result.shape == (4, 4)
        np.testing.assert_array_equal(result, 9)

    def test_rgb(self, rng):
        image = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
        result = BoxDownsample(factor=2).apply(image)
        assert result.shape == (4, 4, 3)
        assert result.dtype == np.uint8

    def test_factor_one_is_identity(self, gray8):
        np.testing.assert_array_equal(BoxDownsample(factor=1.0).apply(gray8), gray8)

    def test_factor_below_one_raises(self):
        with pytest.raises(ValidationError):
            BoxDownsample(factor=0.5)
