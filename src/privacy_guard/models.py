"""Data models for document risk analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

EXAMPLE_LIMIT = 100


class Severity(str, Enum):
    """Severity tiers for legal patterns and red flags."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class RiskLevel(str, Enum):
    """Overall risk buckets for a report."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def from_score(cls, score: int) -> "RiskLevel":
        if score >= 70:
            return cls.CRITICAL
        elif score >= 40:
            return cls.HIGH
        elif score >= 20:
            return cls.MEDIUM
        return cls.LOW


class ReportStatus(str, Enum):
    """Whether a report came from a full analysis or a degraded path."""

    OK = "ok"
    INSUFFICIENT_INPUT = "insufficient_input"
    UNCONFIGURED = "unconfigured"


def excerpt(text: str, limit: int = EXAMPLE_LIMIT) -> str:
    """Trim ``text`` to at most ``limit`` characters for display."""
    return text.strip()[:limit]


def _frozen_mapping(values: Mapping) -> Mapping:
    """Read-only copy of ``values``; later changes to the source do not leak in."""
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class Sentence:
    """One segment of the source text between terminating punctuation."""

    text: str
    lower: str
    word_count: int
    start_char: int
    end_char: int

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "word_count": self.word_count,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }


@dataclass(frozen=True)
class KeywordMatch:
    """Result of a negation-aware keyword lookup."""

    found: bool
    keyword: str
    context: Optional[str] = None
    negated: bool = False

    def to_dict(self) -> dict:
        return {
            "found": self.found,
            "keyword": self.keyword,
            "context": self.context,
            "negated": self.negated,
        }


@dataclass(frozen=True)
class Finding:
    """A legal pattern that matched one or more times in a document."""

    key: str
    severity: Severity
    description: str
    count: int
    examples: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "severity": self.severity.value,
            "description": self.description,
            "count": self.count,
            "examples": list(self.examples),
        }


@dataclass(frozen=True)
class RedFlag:
    """Binary keyword-based indicator for one clause type."""

    key: str
    matched: bool
    severity: Severity = Severity.LOW
    keyword: Optional[str] = None
    context: Optional[str] = None

    @property
    def detail(self) -> str:
        if self.matched:
            return f'Yes - mentions "{self.keyword}"'
        return "No - not detected"

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "detail": self.detail,
            "context": self.context,
        }


@dataclass(frozen=True)
class EntityBag:
    """Lexicon terms found in a document, grouped by category.

    Each field holds de-duplicated terms in lexicon order.
    """

    high_risk: tuple[str, ...] = ()
    medium_risk: tuple[str, ...] = ()
    low_risk: tuple[str, ...] = ()
    third_parties: tuple[str, ...] = ()
    purposes: tuple[str, ...] = ()
    jurisdictions: tuple[str, ...] = ()

    @property
    def data_types(self) -> dict[str, tuple[str, ...]]:
        return {
            "high_risk": self.high_risk,
            "medium_risk": self.medium_risk,
            "low_risk": self.low_risk,
        }

    def to_dict(self) -> dict:
        return {
            "data_types": {tier: list(terms) for tier, terms in self.data_types.items()},
            "third_parties": list(self.third_parties),
            "purposes": list(self.purposes),
            "jurisdictions": list(self.jurisdictions),
        }


@dataclass(frozen=True)
class ComplexityFinding:
    """A sentence flagged as overly long or jargon-heavy."""

    text: str
    word_count: int
    reason: str

    def to_dict(self) -> dict:
        return {"text": self.text, "word_count": self.word_count, "reason": self.reason}


@dataclass(frozen=True)
class ComplexityResult:
    total_sentences: int = 0
    complex_sentences: int = 0
    findings: tuple[ComplexityFinding, ...] = ()

    @property
    def complexity_ratio(self) -> float:
        """Fraction of sentences with at least one finding (0 when empty)."""
        if self.total_sentences == 0:
            return 0.0
        return self.complex_sentences / self.total_sentences

    @property
    def examples(self) -> tuple[ComplexityFinding, ...]:
        return self.findings[:3]

    def to_dict(self) -> dict:
        return {
            "total_sentences": self.total_sentences,
            "complex_sentences": self.complex_sentences,
            "complexity_ratio": round(self.complexity_ratio, 4),
            "examples": [f.to_dict() for f in self.examples],
        }


@dataclass(frozen=True)
class VagueLanguageResult:
    """Counts of hedging, qualifier and under-specified terms."""

    by_class: Mapping[str, int] = field(default_factory=dict, hash=False)
    severity: Severity = Severity.MEDIUM
    examples: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "by_class", _frozen_mapping(self.by_class))

    @property
    def total(self) -> int:
        return sum(self.by_class.values())

    def to_dict(self) -> dict:
        return {
            "total_vague_terms": self.total,
            "by_type": dict(self.by_class),
            "severity": self.severity.value,
            "examples": list(self.examples),
        }


@dataclass(frozen=True)
class ContradictionRecord:
    """A claim and a statement elsewhere in the document that contradicts it."""

    description: str
    claim_example: str
    contradiction_example: str
    severity: Severity = Severity.CRITICAL

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "claim_example": self.claim_example,
            "contradiction_example": self.contradiction_example,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class RiskReport:
    """Complete risk assessment for one document.

    Created once per :meth:`RiskAnalyzer.analyze` call and never mutated.
    """

    risk_score: int
    risk_level: RiskLevel
    reasons: tuple[str, ...] = ()
    red_flags: Mapping[str, RedFlag] = field(default_factory=dict, hash=False)
    entities: EntityBag = field(default_factory=EntityBag)
    complexity: ComplexityResult = field(default_factory=ComplexityResult)
    vague_language: VagueLanguageResult = field(default_factory=VagueLanguageResult)
    contradictions: tuple[ContradictionRecord, ...] = ()
    legal_patterns: tuple[Finding, ...] = ()
    privacy_score: int = 50
    readability_grade: int = 12
    summary: str = ""
    bullets: tuple[str, ...] = ()
    document_types: tuple[str, ...] = ()
    status: ReportStatus = ReportStatus.OK

    def __post_init__(self) -> None:
        object.__setattr__(self, "red_flags", _frozen_mapping(self.red_flags))

    @property
    def complexity_ratio(self) -> float:
        return self.complexity.complexity_ratio

    @property
    def vague_term_count(self) -> int:
        return self.vague_language.total

    @property
    def is_degraded(self) -> bool:
        return self.status is not ReportStatus.OK

    @property
    def matched_red_flags(self) -> list[RedFlag]:
        return [flag for flag in self.red_flags.values() if flag.matched]

    @property
    def red_flag_density(self) -> float:
        """Fraction of red-flag rules that matched (0-1)."""
        if not self.red_flags:
            return 0.0
        return len(self.matched_red_flags) / len(self.red_flags)

    def should_escalate(self, density_threshold: float = 0.3) -> bool:
        """Whether a caller might want a second opinion on this document.

        True for High/Critical reports or when the share of matched red
        flags reaches ``density_threshold``. Degraded reports never escalate.
        """
        if self.is_degraded:
            return False
        if self.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
            return True
        return self.red_flag_density >= density_threshold

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value,
            "reasons": list(self.reasons),
            "summary": self.summary,
            "bullets": list(self.bullets),
            "red_flags": {key: flag.to_dict() for key, flag in self.red_flags.items()},
            "legal_patterns": {f.key: f.to_dict() for f in self.legal_patterns},
            "entities": self.entities.to_dict(),
            "complexity_ratio": round(self.complexity_ratio, 4),
            "complexity": self.complexity.to_dict(),
            "vague_term_count": self.vague_term_count,
            "vague_language": self.vague_language.to_dict(),
            "contradictions": [c.to_dict() for c in self.contradictions],
            "privacy_score": self.privacy_score,
            "readability_grade": self.readability_grade,
            "document_types": list(self.document_types),
        }
