"""Exceptions raised by TypeID parsing, validation and construction."""

from __future__ import annotations


class TypeIDError(ValueError):
    """Base class for every TypeID failure."""


class TypeIDValidationError(TypeIDError):
    """Raised when a prefix, suffix or UUID fails a structural check."""


class TypeIDConstructionError(TypeIDError):
    """Raised when a TypeID cannot be assembled from a UUID.

    The underlying failure is available as ``__cause__``.
    """


__all__ = ["TypeIDConstructionError", "TypeIDError", "TypeIDValidationError"]
