"""Errors raised while turning raw input into catalog writes."""

from __future__ import annotations


class RecordError(ValueError):
    """Base class for problems that exclude one record from the pipeline."""


class ParseError(RecordError):
    """Raised when raw input is malformed or a value cannot be parsed."""


class ValidationError(RecordError):
    """Raised when a parsed record misses required content.

    Typical causes are a missing identifier, zero artists or zero venues.
    """


class PersistenceError(RuntimeError):
    """Raised by storage adapters when a write or commit fails."""
