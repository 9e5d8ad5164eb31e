# -*- coding: utf-8 -*-
"""
Tunable Parameters - Declarative processor configuration via typing.Annotated.

Processors declare their configuration (block radii, histogram bin counts,
clip slopes, equalization strategy) as ``typing.Annotated`` class-body
fields carrying the markers defined here::

    class BlockMean(ImageTransform):
        radius_x: Annotated[int, Range(min=0), Desc('Horizontal radius')] = 3
        method: Annotated[str, Options('fast', 'exact')] = 'fast'

``ImageProcessor.__init_subclass__`` turns the fields into ``ParamSpec``
records with ``collect_param_specs`` and, unless the class writes its own
constructor, installs a keyword-only ``__init__`` built by ``_make_init``.

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
import inspect
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Optional,
    Tuple,
    Union,
    get_origin,
    get_type_hints,
)

# blockstat internal
from blockstat.exceptions import ValidationError

Number = Union[int, float]

_MISSING = object()


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

class ParamMeta:
    """Base class of the markers recognised inside ``Annotated[...]``."""

    __slots__ = ()


class Range(ParamMeta):
    """Inclusive bounds on a numeric parameter; either side may be open."""

    __slots__ = ('min', 'max')

    def __init__(self, min: Optional[Number] = None,
                 max: Optional[Number] = None) -> None:
        self.min = min
        self.max = max

    def __repr__(self) -> str:
        bounds = [f"{k}={v!r}" for k, v in (('min', self.min), ('max', self.max))
                  if v is not None]
        return f"Range({', '.join(bounds)})"


class Options(ParamMeta):
    """Closed set of allowed values."""

    __slots__ = ('choices',)

    def __init__(self, *choices: Any) -> None:
        if not choices:
            raise ValueError("Options requires at least one choice")
        self.choices = choices

    def __repr__(self) -> str:
        return f"Options{self.choices!r}"


class Desc(ParamMeta):
    """One-line description shown to users of the processor."""

    __slots__ = ('text',)

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"Desc({self.text!r})"


# ---------------------------------------------------------------------------
# ParamSpec
# ---------------------------------------------------------------------------

def _type_matches(param_type: type, value: Any) -> bool:
    # bool is an int subclass but never a valid radius, count or slope.
    if isinstance(value, bool) and param_type in (int, float):
        return False
    if param_type is float:
        return isinstance(value, (int, float))
    if param_type is object:
        return True
    return isinstance(value, param_type)


@dataclass(frozen=True, repr=False)
class ParamSpec:
    """Introspection record for one tunable parameter.

    Attributes
    ----------
    name : str
        Keyword under which the parameter is passed.
    param_type : type
        Declared type; ``int`` values are accepted for ``float``.
    default : Any
        Default value, ``None`` for required parameters.
    has_default : bool
        Whether the field was given a default in the class body.
    description : str
        Text from ``Desc``, empty if absent.
    min_value, max_value : int, float or None
        Inclusive bounds from ``Range``.
    choices : tuple or None
        Allowed values from ``Options``.
    """

    name: str
    param_type: type
    default: Any
    has_default: bool
    description: str
    min_value: Optional[Number]
    max_value: Optional[Number]
    choices: Optional[Tuple]

    @property
    def required(self) -> bool:
        return not self.has_default

    def validate(self, value: Any) -> None:
        """Check *value* against the declared type, bounds and choices.

        Raises
        ------
        TypeError
            If *value* has the wrong type.
        ValidationError
            If *value* is out of bounds or not an allowed choice.
        """
        if not _type_matches(self.param_type, value):
            raise TypeError(
                f"Parameter '{self.name}' must be "
                f"{self.param_type.__name__}, got {type(value).__name__}"
            )
        if self.min_value is not None and value < self.min_value:
            problem = f"is below minimum {self.min_value!r}"
        elif self.max_value is not None and value > self.max_value:
            problem = f"is above maximum {self.max_value!r}"
        elif self.choices is not None and value not in self.choices:
            problem = f"is not in allowed choices {self.choices!r}"
        else:
            return
        raise ValidationError(
            f"Parameter '{self.name}' value {value!r} {problem}"
        )

    def __repr__(self) -> str:
        fields = [
            f"name={self.name!r}",
            f"param_type={self.param_type.__name__}",
            f"required={self.required!r}",
        ]
        if self.has_default:
            fields.append(f"default={self.default!r}")
        for label in ('min_value', 'max_value', 'choices'):
            value = getattr(self, label)
            if value is not None:
                fields.append(f"{label}={value!r}")
        return f"ParamSpec({', '.join(fields)})"


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

def _field_names(cls: type) -> list:
    """Annotated names of *cls*, base classes first, each listed once."""
    names: dict = {}
    for klass in reversed(cls.__mro__):
        for name in inspect.get_annotations(klass):
            names.setdefault(name, None)
    return list(names)


def collect_param_specs(cls: type) -> Tuple[ParamSpec, ...]:
    """Build ``ParamSpec`` records from the ``Annotated`` fields of *cls*.

    A field is tunable when its metadata holds at least one ``ParamMeta``.
    A subclass may redeclare a field to change its default or bounds; the
    field keeps the position of its first declaration.

    Raises
    ------
    TypeError
        If a field carries both ``Range`` and ``Options``.
    """
    hints = get_type_hints(cls, include_extras=True)
    specs = []
    for name in _field_names(cls):
        hint = hints.get(name)
        if hint is None or get_origin(hint) is not Annotated:
            continue
        markers = {type(m): m for m in hint.__metadata__
                   if isinstance(m, ParamMeta)}
        if not markers:
            continue
        bounds = markers.get(Range)
        options = markers.get(Options)
        if bounds is not None and options is not None:
            raise TypeError(
                f"Parameter '{name}' on {cls.__qualname__}: "
                f"Range and Options are mutually exclusive."
            )
        desc = markers.get(Desc)
        default = getattr(cls, name, _MISSING)
        specs.append(ParamSpec(
            name=name,
            param_type=hint.__args__[0],
            default=None if default is _MISSING else default,
            has_default=default is not _MISSING,
            description=desc.text if desc is not None else '',
            min_value=bounds.min if bounds is not None else None,
            max_value=bounds.max if bounds is not None else None,
            choices=options.choices if options is not None else None,
        ))
    return tuple(specs)


def _make_init(param_specs: Tuple[ParamSpec, ...]):
    """Return a keyword-only ``__init__`` for *param_specs*.

    Every value is validated and stored as an instance attribute; unknown
    keywords and missing required values raise ``TypeError``. A
    ``__post_init__`` method, if present, runs last.
    """
    known = {spec.name for spec in param_specs}

    def __init__(self, **kwargs):
        unexpected = sorted(set(kwargs) - known)
        if unexpected:
            raise TypeError(
                f"{type(self).__name__}() got unexpected "
                f"keyword arguments: {', '.join(unexpected)}"
            )
        for spec in param_specs:
            if spec.name not in kwargs and spec.required:
                raise TypeError(
                    f"{type(self).__name__}() missing required "
                    f"keyword argument: '{spec.name}'"
                )
            value = kwargs.get(spec.name, spec.default)
            spec.validate(value)
            setattr(self, spec.name, value)
        post_init = getattr(self, '__post_init__', None)
        if post_init is not None:
            post_init()

    kw_only = inspect.Parameter.KEYWORD_ONLY
    __init__.__signature__ = inspect.Signature(
        [inspect.Parameter('self', inspect.Parameter.POSITIONAL_OR_KEYWORD)]
        + [inspect.Parameter(spec.name, kw_only)
           if spec.required else
           inspect.Parameter(spec.name, kw_only, default=spec.default)
           for spec in param_specs]
    )
    __init__.__qualname__ = '__init__'
    return __init__
