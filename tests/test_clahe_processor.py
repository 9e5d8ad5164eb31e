# -*- coding: utf-8 -*-
"""
CLAHE Processor Tests - End-to-end behavior of the CLAHE transform.

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

from blockstat.clahe import CLAHE, equalize_blocks, equalize_exact
from blockstat.exceptions import ValidationError
from blockstat.pixels import to_byte
from blockstat.processing.base import ImageTransform
from blockstat.vocabulary import PixelType, ProcessorCategory


# ---------------------------------------------------------------------------
# Construction and metadata
# ---------------------------------------------------------------------------

class TestCLAHEConstruction:

    def test_defaults(self):
        c = CLAHE()
        assert c.block_radius == 63
        assert c.n_bins == 256
        assert c.slope == 3.0
        assert c.method == 'fast'
        assert c.workers == 1

    def test_is_image_transform(self):
        assert isinstance(CLAHE(), ImageTransform)

    def test_version_stamped(self):
        assert CLAHE.__processor_version__ == '1.0.0'

    def test_tags(self):
        tags = CLAHE.__processor_tags__
        assert tags['category'] is ProcessorCategory.ENHANCE
        assert set(tags['pixel_types']) == {
            PixelType.GRAY8, PixelType.GRAY16, PixelType.GRAY32, PixelType.RGB,
        }

    def test_param_specs(self):
        names = [s.name for s in CLAHE.__param_specs__]
        assert names == ['block_radius', 'n_bins', 'slope', 'method', 'workers']

    def test_invalid_method(self):
        with pytest.raises(ValidationError, match="allowed choices"):
            CLAHE(method='bilinear')

    def test_slope_below_one(self):
        with pytest.raises(ValidationError, match="below minimum"):
            CLAHE(slope=0.5)

    def test_n_bins_below_two(self):
        with pytest.raises(ValidationError, match="below minimum"):
            CLAHE(n_bins=1)

    def test_negative_radius(self):
        with pytest.raises(ValidationError, match="below minimum"):
            CLAHE(block_radius=-1)

    def test_zero_workers(self):
        with pytest.raises(ValidationError, match="below minimum"):
            CLAHE(workers=0)

    def test_float_radius_rejected(self):
        with pytest.raises(TypeError, match="block_radius"):
            CLAHE(block_radius=2.5)


# ---------------------------------------------------------------------------
# apply
# ---------------------------------------------------------------------------

class TestCLAHEApply:

    @pytest.mark.parametrize('fixture', ['gray8', 'gray16', 'gray32', 'rgb'])
    @pytest.mark.parametrize('method', ['fast', 'exact'])
    def test_preserves_shape_and_dtype(self, request, fixture, method):
        image = request.getfixturevalue(fixture)
        out = CLAHE(block_radius=3, method=method).apply(image)
        assert out.shape == image.shape
        assert out.dtype == image.dtype

    def test_source_not_modified(self, gray16):
        before = gray16.copy()
        CLAHE(block_radius=2).apply(gray16)
        np.testing.assert_array_equal(gray16, before)

    def test_gray8_exact_matches_engine(self, gray8):
        out = CLAHE(block_radius=3, slope=2.0, method='exact').apply(gray8)
        expected = equalize_exact(gray8, 3, 256, 2.0)
        np.testing.assert_array_equal(out, expected)

    def test_gray8_fast_matches_engine(self, gray8):
        out = CLAHE(block_radius=3, slope=2.0).apply(gray8)
        expected = equalize_blocks(gray8, 3, 256, 2.0)
        np.testing.assert_array_equal(out, expected)

    def test_method_override_per_call(self, gray8):
        c = CLAHE(block_radius=3, slope=2.0)
        out = c.apply(gray8, method='exact')
        np.testing.assert_array_equal(out, equalize_exact(gray8, 3, 256, 2.0))
        assert c.method == 'fast'

    def test_invalid_override_per_call(self, gray8):
        with pytest.raises(ValidationError):
            CLAHE().apply(gray8, method='nope')

    def test_workers_match_sequential(self, gray8):
        c = CLAHE(block_radius=2, method='exact')
        sequential = c.apply(gray8)
        threaded = c.apply(gray8, workers=3)
        np.testing.assert_array_equal(sequential, threaded)

    def test_zero_mask_is_identity(self, gray16):
        mask = np.zeros(gray16.shape)
        out = CLAHE(block_radius=2).apply(gray16, mask=mask)
        np.testing.assert_array_equal(out, gray16)

    def test_exact_mask_scales_limit_and_blend(self, gray8):
        mask = np.full(gray8.shape, 0.5)
        out = CLAHE(block_radius=3, n_bins=16, slope=5.0, method='exact').apply(
            gray8, mask=mask,
        )
        # Weight 0.5 clips with slope 3 and then blends halfway.
        equalized = equalize_exact(gray8, 3, 16, 3.0).astype(np.float64)
        expected = np.floor(0.5 * equalized + 0.5 * gray8 + 0.5).astype(np.uint8)
        np.testing.assert_array_equal(out, expected)

    def test_roi_leaves_outside_untouched(self, gray8):
        roi = (2, 1, 5, 4)
        out = CLAHE(block_radius=2, method='exact').apply(gray8, roi=roi)
        inside = np.zeros(gray8.shape, dtype=bool)
        inside[1:5, 2:7] = True
        np.testing.assert_array_equal(out[~inside], gray8[~inside])

    def test_roi_mask_shape_enforced(self, gray8):
        with pytest.raises(ValidationError, match="mask shape"):
            CLAHE(block_radius=2).apply(
                gray8, roi=(0, 0, 4, 4), mask=np.ones(gray8.shape),
            )

    @pytest.mark.parametrize('method', ['fast', 'exact'])
    def test_rgb_constant_scales_channels(self, method):
        image = np.full((6, 7, 3), (40, 80, 120), dtype=np.uint8)
        out = CLAHE(block_radius=2, method=method).apply(image)
        # Working copy is 80 everywhere and equalizes to 255: gain 255 / 80.
        assert np.all(to_byte(image) == 80)
        np.testing.assert_array_equal(
            out, np.broadcast_to(np.array([128, 255, 255], np.uint8), out.shape)
        )

    def test_unsupported_input(self):
        with pytest.raises(ValidationError, match="Unsupported pixel"):
            CLAHE().apply(np.zeros((4, 4), dtype=np.int32))


# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------

class TestCLAHEProgress:

    @pytest.mark.parametrize('method', ['fast', 'exact'])
    def test_progress_ends_at_one(self, gray8, method):
        fractions = []
        CLAHE(block_radius=2, method=method).apply(
            gray8, progress_callback=fractions.append,
        )
        assert fractions
        assert fractions[-1] == 1.0
        assert all(0.0 <= f <= 1.0 for f in fractions)
        assert fractions == sorted(fractions)

    def test_exact_reports_per_row(self, gray8):
        fractions = []
        CLAHE(block_radius=2, method='exact').apply(
            gray8, progress_callback=fractions.append,
        )
        assert len(fractions) == gray8.shape[0] + 1
