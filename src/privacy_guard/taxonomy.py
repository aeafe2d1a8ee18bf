"""Taxonomy configuration: patterns, red-flag rules and lexicons.

A :class:`Taxonomy` is plain, immutable data. It is built once (from the
built-in table or a JSON file) and passed explicitly to the analyzer;
detectors only ever read it. :class:`TaxonomyStore` adds hot reloading by
building a complete replacement before swapping the reference.

Pattern entries accept a list of matchers, each either a literal keyword
(matched case-insensitively) or ``{"regex": "..."}``::

    {
        "legal_patterns": {
            "forced_arbitration": {
                "matchers": ["binding arbitration", {"regex": "waive.{0,30}class action"}],
                "severity": "critical",
                "description": "Forces arbitration"
            }
        }
    }
"""

from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Protocol, Union, runtime_checkable

from .errors import PatternEvaluationError, TaxonomyError
from .models import Severity

logger = logging.getLogger(__name__)

MatcherSpec = Union[str, Mapping[str, str]]


@runtime_checkable
class Matcher(Protocol):
    """Anything that can list the spans of ``text`` it matches."""

    def matches(self, text: str) -> list[str]: ...


class RegexMatcher:
    """Case-insensitive matcher over one or more compiled patterns.

    Matches from each pattern are returned in pattern order, then in
    document order within a pattern.
    """

    def __init__(self, patterns: Iterable[str], key: str = "<anonymous>") -> None:
        self.key = key
        self.sources: tuple[str, ...] = tuple(patterns)
        if not self.sources:
            raise PatternEvaluationError(key, "no matchers given")
        compiled = []
        for source in self.sources:
            try:
                compiled.append(re.compile(source, re.IGNORECASE))
            except re.error as exc:
                raise PatternEvaluationError(key, f"invalid regex {source!r}: {exc}") from exc
        self._compiled: tuple[re.Pattern, ...] = tuple(compiled)

    @classmethod
    def from_specs(cls, specs: Iterable[MatcherSpec], key: str = "<anonymous>") -> "RegexMatcher":
        """Build a matcher from literal keywords and ``{"regex": ...}`` entries."""
        sources: list[str] = []
        for spec in specs:
            if isinstance(spec, str):
                sources.append(re.escape(spec))
            elif isinstance(spec, Mapping) and isinstance(spec.get("regex"), str):
                sources.append(spec["regex"])
            else:
                raise PatternEvaluationError(key, f"unsupported matcher entry {spec!r}")
        return cls(sources, key=key)

    def matches(self, text: str) -> list[str]:
        found: list[str] = []
        for pattern in self._compiled:
            found.extend(m.group(0) for m in pattern.finditer(text))
        return found

    def __repr__(self) -> str:
        return f"RegexMatcher(key={self.key!r}, patterns={len(self.sources)})"


@dataclass(frozen=True)
class LegalPattern:
    """A named, severity-tagged legal trick."""

    key: str
    matcher: Matcher
    severity: Severity
    description: str


@dataclass(frozen=True)
class ContradictionPair:
    """A privacy claim and the statement type that contradicts it."""

    key: str
    claim: Matcher
    contradiction: Matcher
    description: str


@dataclass(frozen=True)
class RedFlagRule:
    """Ordered keyword attempts for one legacy red flag.

    Keywords are tried in order and the first non-negated hit wins.
    """

    key: str
    keywords: tuple[str, ...]
    severity: Severity = Severity.LOW
    bullet: str = ""


@dataclass(frozen=True)
class Taxonomy:
    """Read-only configuration shared by every detector."""

    red_flags: tuple[RedFlagRule, ...] = ()
    legal_patterns: tuple[LegalPattern, ...] = ()
    contradictions: tuple[ContradictionPair, ...] = ()
    negation_cues: tuple[str, ...] = ()
    high_risk_data: tuple[str, ...] = ()
    medium_risk_data: tuple[str, ...] = ()
    low_risk_data: tuple[str, ...] = ()
    third_parties: tuple[str, ...] = ()
    purposes: tuple[str, ...] = ()
    jurisdictions: tuple[str, ...] = ()
    vague_terms: tuple[tuple[str, tuple[str, ...]], ...] = ()
    legal_jargon: tuple[str, ...] = ()
    privacy_protections: tuple[str, ...] = ()
    source: str = field(default="<memory>", compare=False)

    @property
    def vague_classes(self) -> dict[str, tuple[str, ...]]:
        return dict(self.vague_terms)

    def pattern(self, key: str) -> LegalPattern | None:
        for pattern in self.legal_patterns:
            if pattern.key == key:
                return pattern
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "<memory>") -> "Taxonomy":
        """Build a taxonomy from a JSON-shaped mapping.

        Broken pattern or rule entries are logged and skipped; everything
        else in the document is still loaded.
        """
        if not isinstance(data, Mapping):
            raise TaxonomyError(f"Taxonomy must be a mapping, got {type(data).__name__}")

        lexicons = _section(data.get("lexicons"), "lexicons")
        data_types = _section(lexicons.get("data_types"), "lexicons.data_types")
        vague = _section(lexicons.get("vague"), "lexicons.vague")

        return cls(
            red_flags=_load_entries(data.get("red_flags"), _build_red_flag, "red flag"),
            legal_patterns=_load_entries(
                data.get("legal_patterns"), _build_legal_pattern, "legal pattern"
            ),
            contradictions=_load_entries(
                data.get("contradictions"), _build_contradiction, "contradiction"
            ),
            negation_cues=_terms(lexicons.get("negation"), "negation"),
            high_risk_data=_terms(data_types.get("high_risk"), "data_types.high_risk"),
            medium_risk_data=_terms(data_types.get("medium_risk"), "data_types.medium_risk"),
            low_risk_data=_terms(data_types.get("low_risk"), "data_types.low_risk"),
            third_parties=_terms(lexicons.get("third_parties"), "third_parties"),
            purposes=_terms(lexicons.get("purposes"), "purposes"),
            jurisdictions=_terms(lexicons.get("jurisdictions"), "jurisdictions"),
            vague_terms=tuple(
                (name, _terms(terms, f"vague.{name}")) for name, terms in vague.items()
            ),
            legal_jargon=_terms(lexicons.get("legal_jargon"), "legal_jargon"),
            privacy_protections=_terms(
                lexicons.get("privacy_protections"), "privacy_protections"
            ),
            source=source,
        )


# ---------------------------------------------------------------------------
# Entry builders
# ---------------------------------------------------------------------------


def _section(value: Any, name: str) -> Mapping[str, Any]:
    """Return a mapping-typed taxonomy section, or ``{}`` if it is malformed."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.warning("Ignoring %s: expected a mapping, got %s", name, type(value).__name__)
        return {}
    return value


def _terms(values: Any, name: str = "lexicon") -> tuple[str, ...]:
    """Lower-case and de-duplicate a lexicon, keeping order.

    Only lists and tuples are accepted; anything else is logged and
    treated as an empty lexicon.
    """
    if values is None:
        return ()
    if not isinstance(values, (list, tuple)):
        logger.warning("Ignoring %s: expected a list of terms, got %s", name, type(values).__name__)
        return ()
    seen: dict[str, None] = {}
    for value in values:
        if isinstance(value, str) and value.strip():
            seen.setdefault(value.strip().lower(), None)
    return tuple(seen)


def _severity(key: str, value: Any) -> Severity:
    try:
        return Severity(str(value).lower())
    except ValueError as exc:
        raise PatternEvaluationError(key, f"unknown severity {value!r}") from exc


def _keyed(entries: Any) -> list[tuple[str, Any]]:
    """Return ``(key, entry)`` pairs from a mapping or a list of entries.

    List entries use their ``"key"`` field, or their position when absent.
    """
    if isinstance(entries, Mapping):
        return list(entries.items())
    pairs: list[tuple[str, Any]] = []
    for i, entry in enumerate(entries or ()):
        key = entry.get("key") if isinstance(entry, Mapping) else None
        pairs.append((key or f"entry_{i}", entry))
    return pairs


def _specs(key: str, entry: Mapping[str, Any], name: str) -> list[MatcherSpec]:
    value = entry.get(name)
    if isinstance(value, (str, Mapping)):
        return [value]
    if not value:
        raise PatternEvaluationError(key, f"missing '{name}'")
    return list(value)


def _build_red_flag(key: str, entry: Mapping[str, Any]) -> RedFlagRule:
    keywords = _terms(entry.get("keywords"), f"{key}.keywords")
    if not keywords:
        raise PatternEvaluationError(key, "no keywords")
    return RedFlagRule(
        key=key,
        keywords=keywords,
        severity=_severity(key, entry.get("severity", "low")),
        bullet=str(entry.get("bullet", "")),
    )


def _build_legal_pattern(key: str, entry: Mapping[str, Any]) -> LegalPattern:
    return LegalPattern(
        key=key,
        matcher=RegexMatcher.from_specs(_specs(key, entry, "matchers"), key=key),
        severity=_severity(key, entry.get("severity")),
        description=str(entry.get("description") or key.replace("_", " ")),
    )


def _build_contradiction(key: str, entry: Mapping[str, Any]) -> ContradictionPair:
    return ContradictionPair(
        key=key,
        claim=RegexMatcher.from_specs(_specs(key, entry, "claim"), key=f"{key}.claim"),
        contradiction=RegexMatcher.from_specs(
            _specs(key, entry, "contradiction"), key=f"{key}.contradiction"
        ),
        description=str(entry.get("description") or key.replace("_", " ")),
    )


def _load_entries(
    entries: Any,
    build: Callable[[str, Mapping[str, Any]], Any],
    kind: str,
) -> tuple:
    built: list = []
    seen: set[str] = set()
    for key, entry in _keyed(entries):
        if key in seen:
            logger.warning("Skipping duplicate %s key '%s'", kind, key)
            continue
        if not isinstance(entry, Mapping):
            logger.warning("Skipping %s '%s': entry is not a mapping", kind, key)
            continue
        try:
            built.append(build(key, entry))
        except PatternEvaluationError as exc:
            logger.warning("Skipping %s '%s': %s", kind, key, exc.reason)
            continue
        seen.add(key)
    return tuple(built)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_taxonomy(path: str | Path) -> Taxonomy:
    """Load a taxonomy from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        TaxonomyError: If the file is not valid JSON or not an object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Taxonomy file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TaxonomyError(f"Invalid taxonomy JSON in {path}: {exc}") from exc
    return Taxonomy.from_dict(data, source=str(path))


@lru_cache(maxsize=1)
def default_taxonomy() -> Taxonomy:
    """Return the built-in taxonomy (built once, shared read-only)."""
    from .lexicons import DEFAULT_TAXONOMY

    return Taxonomy.from_dict(DEFAULT_TAXONOMY, source="<builtin>")


class TaxonomyStore:
    """Holds the current taxonomy and swaps it atomically on reload.

    ``reload()`` constructs the replacement fully before publishing it, so
    a reader calling ``get()`` sees either the old or the new taxonomy,
    never a mix.

    Example::

        store = TaxonomyStore(load_taxonomy("taxonomy.json"))
        analyzer = RiskAnalyzer(taxonomy=store)
        store.reload(lambda: load_taxonomy("taxonomy.json"))
    """

    def __init__(self, taxonomy: Taxonomy | None = None) -> None:
        self._lock = threading.Lock()
        self._taxonomy = taxonomy

    def get(self) -> Taxonomy | None:
        with self._lock:
            return self._taxonomy

    def publish(self, taxonomy: Taxonomy) -> None:
        with self._lock:
            self._taxonomy = taxonomy
        logger.info("Published taxonomy from %s", taxonomy.source)

    def reload(self, loader: Callable[[], Taxonomy]) -> Taxonomy:
        """Build a new taxonomy with ``loader`` and publish it.

        If ``loader`` raises, the current taxonomy stays in place and the
        error propagates.
        """
        taxonomy = loader()
        self.publish(taxonomy)
        return taxonomy
