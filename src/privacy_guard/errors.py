"""Exception hierarchy for the analysis engine.

Only :class:`TaxonomyError` ever reaches callers of the public API, and
only when loading a taxonomy file. The remaining errors are raised by
low-level helpers and recovered inside the analyzer, which maps them to
degraded reports or skips the offending pattern.
"""

from __future__ import annotations


class PrivacyGuardError(Exception):
    """Base class for all engine errors."""


class InsufficientInputError(PrivacyGuardError):
    """Document text is shorter than the minimum analyzable length."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(f"Document has {length} characters; at least {minimum} are required.")
        self.length = length
        self.minimum = minimum


class MissingConfigurationError(PrivacyGuardError):
    """No taxonomy was supplied to the analyzer."""

    def __init__(self, what: str = "taxonomy") -> None:
        super().__init__(f"Analysis unavailable: {what} configuration is missing.")
        self.what = what


class PatternEvaluationError(PrivacyGuardError):
    """A single taxonomy pattern could not be compiled or evaluated."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Pattern '{key}' failed to evaluate: {reason}")
        self.key = key
        self.reason = reason


class TaxonomyError(PrivacyGuardError):
    """A taxonomy document is structurally unusable."""


def ensure_sufficient_input(text: str | None, minimum: int) -> str:
    """Return ``text`` (``""`` for None) or raise if it is too short."""
    text = text or ""
    if len(text) < minimum:
        raise InsufficientInputError(len(text), minimum)
    return text


def ensure_configured(taxonomy: object | None) -> None:
    """Raise :class:`MissingConfigurationError` when ``taxonomy`` is None."""
    if taxonomy is None:
        raise MissingConfigurationError()
