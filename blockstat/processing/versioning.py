# -*- coding: utf-8 -*-
"""
Processor Versioning - Version and capability stamps for processors.

``@processor_version`` records the algorithm version of a processor in
``__processor_version__``; ``ImageProcessor`` warns when a concrete class
is instantiated without one. ``@processor_tags`` records the processor
category, the pixel representations it accepts and a short description
in ``__processor_tags__``.

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
import importlib.metadata
from typing import Optional, Sequence, Type, TypeVar

# blockstat internal
from blockstat.vocabulary import PixelType, ProcessorCategory

T = TypeVar('T')


def _package_version() -> str:
    try:
        return importlib.metadata.version('blockstat')
    except importlib.metadata.PackageNotFoundError:
        return 'unknown'


def processor_version(version: Optional[str] = None):
    """Stamp ``__processor_version__`` on the decorated class.

    Parameters
    ----------
    version : str, optional
        Semantic version string. Defaults to the installed ``blockstat``
        version.

    Examples
    --------
    >>> @processor_version('1.0.0')
    ... class BlockMean(ImageTransform):
    ...     def apply(self, source, **kwargs):
    ...         return source
    >>> BlockMean.__processor_version__
    '1.0.0'
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls.__processor_version__ = version or _package_version()
        return cls
    return decorator


def processor_tags(
    category: Optional[ProcessorCategory] = None,
    pixel_types: Optional[Sequence[PixelType]] = None,
    description: Optional[str] = None,
):
    """Stamp ``__processor_tags__`` on the decorated class.

    Parameters
    ----------
    category : ProcessorCategory, optional
        What kind of processing the class performs.
    pixel_types : Sequence[PixelType], optional
        Pixel representations ``apply`` accepts.
    description : str, optional
        One-line summary.

    Raises
    ------
    TypeError
        If *category* or an entry of *pixel_types* is not a member of the
        corresponding vocabulary enum.
    """
    if category is not None and not isinstance(category, ProcessorCategory):
        raise TypeError(
            f"category must be a ProcessorCategory member, got {category!r}"
        )
    pixel_types = tuple(pixel_types or ())
    bad = [p for p in pixel_types if not isinstance(p, PixelType)]
    if bad:
        raise TypeError(f"pixel_types must be PixelType members, got {bad[0]!r}")

    tags = {
        'category': category,
        'pixel_types': pixel_types,
        'description': description,
    }

    def decorator(cls: Type[T]) -> Type[T]:
        cls.__processor_tags__ = dict(tags)
        return cls
    return decorator
