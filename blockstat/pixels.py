# -*- coding: utf-8 -*-
"""
Pixel Representations - Pixel type detection, codecs and byte conversion.

Classifies numpy arrays into the closed set of pixel representations
(:class:`~blockstat.vocabulary.PixelType`) handled by the summed-area table
variants and the CLAHE apply step, and provides for each representation a
``PixelCodec`` that decodes pixels to a common float64 form and encodes
float64 values back with rounding and range clamping.

Also provides packed ``0xRRGGBB`` conversion helpers and ``to_byte``, which
produces the 8-bit working copy CLAHE equalizes.

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
from dataclasses import dataclass
from typing import Dict, Optional

# Third-party
import numpy as np

# blockstat internal
from blockstat.exceptions import ValidationError
from blockstat.vocabulary import PixelType


def pixel_type_of(image: np.ndarray) -> PixelType:
    """Classify *image* into a :class:`PixelType`.

    ``(rows, cols, 3)`` ``uint8`` arrays are RGB; 2D ``uint8``, ``uint16``
    and floating point arrays are GRAY8, GRAY16 and GRAY32.

    Raises
    ------
    ValidationError
        If the array shape or dtype is not one of the supported
        representations.
    """
    if not isinstance(image, np.ndarray):
        raise ValidationError(
            f"image must be a numpy array, got {type(image).__name__}"
        )
    if image.ndim == 3 and image.shape[2] == 3 and image.dtype == np.uint8:
        return PixelType.RGB
    if image.ndim == 2:
        if image.dtype == np.uint8:
            return PixelType.GRAY8
        if image.dtype == np.uint16:
            return PixelType.GRAY16
        if np.issubdtype(image.dtype, np.floating):
            return PixelType.GRAY32
    raise ValidationError(
        f"Unsupported pixel representation: shape {image.shape}, "
        f"dtype {image.dtype}. Expected 2D uint8/uint16/float or "
        f"(rows, cols, 3) uint8 RGB."
    )


@dataclass(frozen=True)
class PixelCodec:
    """Decode/encode capability for one pixel representation.

    Attributes
    ----------
    pixel_type : PixelType
        Representation handled by this codec.
    blend : str
        How equalized values are blended back: ``'direct'`` (blend toward
        the equalized byte), ``'offset'`` (scale about the image minimum)
        or ``'multiplicative'`` (scale each channel).
    lower, upper : float or None
        Clamp range on encode. ``None`` for floating point (no clamping,
        no rounding).
    """

    pixel_type: PixelType
    blend: str
    lower: Optional[float] = None
    upper: Optional[float] = None

    def decode(self, image: np.ndarray) -> np.ndarray:
        return image.astype(np.float64)

    def encode(self, values: np.ndarray, dtype: np.dtype) -> np.ndarray:
        if self.lower is None:
            return values.astype(dtype)
        return np.clip(
            np.floor(values + 0.5), self.lower, self.upper
        ).astype(dtype)


CODECS: Dict[PixelType, PixelCodec] = {
    PixelType.GRAY8: PixelCodec(PixelType.GRAY8, 'direct', 0.0, 255.0),
    PixelType.GRAY16: PixelCodec(PixelType.GRAY16, 'offset', 0.0, 65535.0),
    PixelType.GRAY32: PixelCodec(PixelType.GRAY32, 'offset'),
    PixelType.RGB: PixelCodec(PixelType.RGB, 'multiplicative', 0.0, 255.0),
}


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """Pack a ``(rows, cols, 3)`` ``uint8`` array into ``0xRRGGBB`` int32."""
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValidationError(
            f"Expected (rows, cols, 3) RGB array, got shape {rgb.shape}"
        )
    c = rgb.astype(np.int32)
    return (c[..., 0] << 16) | (c[..., 1] << 8) | c[..., 2]


def unpack_rgb(packed: np.ndarray) -> np.ndarray:
    """Unpack ``0xRRGGBB`` integers into a ``(..., 3)`` ``uint8`` array."""
    packed = np.asarray(packed).astype(np.int64)
    return np.stack(
        [(packed >> 16) & 0xff, (packed >> 8) & 0xff, packed & 0xff],
        axis=-1,
    ).astype(np.uint8)


def to_byte(image: np.ndarray) -> np.ndarray:
    """Convert *image* into an 8-bit working copy.

    GRAY8 is copied. GRAY16 and GRAY32 are linearly scaled from their
    ``[min, max]`` range onto ``0..255`` (all zeros for a constant image,
    NaN maps to 0). RGB uses the unweighted channel mean.

    Returns
    -------
    np.ndarray
        2D ``uint8`` array.
    """
    pixel_type = pixel_type_of(image)
    if pixel_type is PixelType.GRAY8:
        return image.copy()
    if pixel_type is PixelType.RGB:
        return (image.astype(np.uint16).sum(axis=2) // 3).astype(np.uint8)

    values = image.astype(np.float64)
    finite = np.isfinite(values)
    if not finite.any():
        return np.zeros(image.shape, dtype=np.uint8)
    vmin = values[finite].min()
    vmax = values[finite].max()
    if vmax <= vmin:
        return np.zeros(image.shape, dtype=np.uint8)
    scaled = np.floor((values - vmin) / (vmax - vmin) * 255.0 + 0.5)
    scaled[~finite] = 0.0
    return np.clip(scaled, 0, 255).astype(np.uint8)
