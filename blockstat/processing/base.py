# -*- coding: utf-8 -*-
"""
Processor Base Classes - Common interface of blockstat raster processors.

``ImageProcessor`` is the root of every processor built on the integral
image and CLAHE engines. It wires the ``Annotated`` parameter declarations
of :mod:`blockstat.processing.params` into each subclass, warns once per
class when no ``@processor_version`` was declared, resolves per-call
parameter overrides and forwards progress to an optional callback.

``ImageTransform`` is the abstract pixels-in, pixels-out processor, and
``BandwiseTransformMixin`` lifts a single-band transform to
``(bands, rows, cols)`` stacks.

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
import warnings
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

# Third-party
import numpy as np

# blockstat internal
from blockstat.processing.params import ParamSpec, collect_param_specs, _make_init

logger = logging.getLogger(__name__)


class ImageProcessor(ABC):
    """Root class of all blockstat processors.

    Subclasses list their tunable parameters as ``Annotated`` class
    attributes. At class creation the parameters are gathered into
    ``__param_specs__`` and a validating keyword-only ``__init__`` is
    generated when the subclass does not define one.

    Processor instances are never mutated by ``apply``; per-call overrides
    go through ``_resolve_params`` so one configured processor can serve
    several threads.
    """

    # Classes already checked for a version stamp.
    _version_warned_classes: set = set()

    __param_specs__: Tuple[ParamSpec, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__param_specs__ = collect_param_specs(cls)
        if cls.__param_specs__ and '__init__' not in vars(cls):
            cls.__init__ = _make_init(cls.__param_specs__)

    def __new__(cls, *args: Any, **kwargs: Any) -> 'ImageProcessor':
        # Decorators run after __init_subclass__, so the version check
        # waits for the first instantiation.
        if cls not in ImageProcessor._version_warned_classes:
            ImageProcessor._version_warned_classes.add(cls)
            versioned = getattr(cls, '__processor_version__', None)
            abstract = getattr(cls, '__abstractmethods__', None)
            if not versioned and not abstract:
                warnings.warn(
                    f"{cls.__qualname__} does not declare a processor version. "
                    f"Use @processor_version('x.y.z') to declare one.",
                    UserWarning,
                    stacklevel=2,
                )
        logger.debug("Instantiating %s", cls.__qualname__)
        return super().__new__(cls)

    def _resolve_params(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Return the effective value of every declared parameter.

        A value in *kwargs* wins over the instance attribute. Keys that are
        not declared parameters (``mask``, ``roi``, ``progress_callback``)
        are ignored.

        Raises
        ------
        TypeError
            If an override has the wrong type.
        ValidationError
            If an override is out of range or not an allowed choice.
        """
        resolved = {
            spec.name: kwargs.get(spec.name, getattr(self, spec.name))
            for spec in type(self).__param_specs__
        }
        for spec in type(self).__param_specs__:
            spec.validate(resolved[spec.name])
        return resolved

    def _report_progress(self, kwargs: Dict[str, Any], fraction: float) -> None:
        """Send *fraction* to ``kwargs['progress_callback']`` if one was given."""
        callback = kwargs.get('progress_callback')
        if callback is not None:
            callback(float(fraction))


class ImageTransform(ImageProcessor):
    """Abstract dense raster transform.

    ``apply`` returns a new array and leaves *source* untouched.
    """

    @abstractmethod
    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        """Transform *source*.

        Parameters
        ----------
        source : np.ndarray
            ``(rows, cols)`` gray image, or ``(rows, cols, 3)`` RGB where the
            processor supports it.
        **kwargs
            Per-call parameter overrides and processor-specific options.

        Returns
        -------
        np.ndarray
            Transformed image.
        """
        ...


class BandwiseTransformMixin:
    """Run ``_apply_2d`` on each band of a ``(bands, rows, cols)`` stack.

    Mix in ahead of ``ImageTransform``. 2D input goes to ``_apply_2d``
    directly.
    """

    def apply(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        if source.ndim != 3:
            return self._apply_2d(source, **kwargs)
        bands = [self._apply_2d(band, **kwargs) for band in source]
        return np.stack(bands)

    @abstractmethod
    def _apply_2d(self, source: np.ndarray, **kwargs: Any) -> np.ndarray:
        """Transform a single 2D band."""
        ...
