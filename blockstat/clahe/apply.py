# -*- coding: utf-8 -*-
"""
CLAHE Apply - Blend an equalized byte image back into the source.

Equalization runs on an 8-bit working copy; this step carries the result
back into the source representation through its ``PixelCodec``. With
``a = dst / src`` the per-pixel gain of the working copy (1 where
``src == 0``) and ``m`` the mask weight:

- GRAY8: ``m * dst + (1 - m) * src``
- GRAY16, GRAY32: ``m * (a * (v - min) + min - v) + v`` with ``min`` the
  image minimum
- RGB: ``v * (1 + m * (a - 1))`` per channel

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
from typing import Optional, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError
from blockstat.pixels import CODECS, pixel_type_of
from blockstat.processing._validation import (
    resolve_roi,
    validate_byte_image,
    validate_same_shape,
)


def resolve_mask(
    mask: Optional[np.ndarray], shape: Tuple[int, int]
) -> np.ndarray:
    """Return *mask* as float64 blend weights in ``[0, 1]``.

    ``uint8`` masks are scaled by ``1 / 255``, ``None`` means weight 1.

    Raises
    ------
    ValidationError
        If the mask shape differs from *shape*.
    """
    if mask is None:
        return np.ones(shape, dtype=np.float64)
    mask = np.asarray(mask)
    if mask.shape != tuple(shape):
        raise ValidationError(
            f"mask shape {mask.shape} does not match region shape {tuple(shape)}"
        )
    if mask.dtype == np.uint8:
        return mask / 255.0
    return np.clip(mask.astype(np.float64), 0.0, 1.0)


def apply_equalization(
    image: np.ndarray,
    src: np.ndarray,
    dst: np.ndarray,
    mask: Optional[np.ndarray] = None,
    roi: Optional[Tuple[int, int, int, int]] = None,
) -> np.ndarray:
    """Blend the equalized working copy *dst* into *image*.

    Parameters
    ----------
    image : np.ndarray
        Source in any supported pixel representation. Not modified.
    src : np.ndarray
        ``uint8`` working copy of *image* (see ``to_byte``).
    dst : np.ndarray
        Equalized ``uint8`` working copy.
    mask : np.ndarray, optional
        Blend weights with the ROI's shape.
    roi : tuple of int, optional
        ``(x, y, width, height)`` region; pixels outside it are untouched.

    Returns
    -------
    np.ndarray
        New array with the dtype and shape of *image*.
    """
    codec = CODECS[pixel_type_of(image)]
    validate_byte_image(src, 'src')
    validate_byte_image(dst, 'dst')
    validate_same_shape(image, src, 'image, src')
    validate_same_shape(src, dst, 'src, dst')
    x_min, y_min, x_max, y_max = resolve_roi(roi, image.shape)
    m = resolve_mask(mask, (y_max - y_min, x_max - x_min))

    region = (slice(y_min, y_max), slice(x_min, x_max))
    s = src[region].astype(np.float64)
    d = dst[region].astype(np.float64)
    values = codec.decode(image[region])

    if codec.blend == 'direct':
        out = m * d + (1.0 - m) * s
    else:
        a = np.ones_like(s)
        np.divide(d, s, out=a, where=s != 0)
        if codec.blend == 'multiplicative':
            out = values * (1.0 + m * (a - 1.0))[..., np.newaxis]
        else:
            finite = codec.decode(image)
            finite = finite[np.isfinite(finite)]
            vmin = float(finite.min()) if finite.size else 0.0
            out = m * (a * (values - vmin) + vmin - values) + values

    result = image.copy()
    result[region] = codec.encode(out, image.dtype)
    return result
