# -*- coding: utf-8 -*-
"""
Blockstat Exception Hierarchy - Domain-specific exceptions for blockstat operations.

Provides a small exception hierarchy that lets callers catch blockstat
errors distinctly from Python built-in exceptions. All blockstat exceptions
subclass both ``BlockstatError`` and the appropriate built-in exception for
compatibility with code that catches ``ValueError`` / ``RuntimeError``.

Numeric edge cases (windows clipped at the image border, flat windows,
degenerate histograms) are never reported through exceptions; they are
clamped to defined defaults by the engines. Exceptions are reserved for
contract violations detected when a table or processor is constructed.

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


class BlockstatError(Exception):
    """Base exception for all blockstat errors."""


class ValidationError(BlockstatError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for buffer size mismatches against a declared width/height,
    wrong array dimensionality, unsupported pixel types, negative block
    radii, and accumulator precision that cannot hold the table.
    """


class ProcessorError(BlockstatError, RuntimeError):
    """Algorithm failure during ``apply()``.

    Raised when a processor encounters a non-recoverable error during
    execution (not an input validation issue), e.g. a failing row worker.
    """
