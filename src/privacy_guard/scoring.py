"""Risk aggregation, privacy scoring and human-readable summaries.

All numeric weights live in :class:`RiskWeights` so they can be tuned
without touching the aggregation logic. The defaults were chosen by
inspection and have not been calibrated against labelled documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .models import (
    ComplexityResult,
    ContradictionRecord,
    EntityBag,
    Finding,
    RedFlag,
    RiskLevel,
    Severity,
    VagueLanguageResult,
)


@dataclass(frozen=True)
class RiskWeights:
    """Weights and thresholds for the aggregate risk score."""

    critical_pattern: int = 20
    high_pattern: int = 10
    high_risk_data: int = 15
    medium_risk_data: int = 5
    third_party: int = 5
    complexity: int = 15
    complexity_threshold: float = 0.3
    vague: int = 10
    vague_threshold: int = 30
    contradiction: int = 25
    red_flag: int = 5
    max_score: int = 100


@dataclass(frozen=True)
class PrivacyWeights:
    """Deductions for the 0-100 privacy score (higher is better)."""

    red_flag: Mapping[Severity, int] = field(
        default_factory=lambda: {
            Severity.CRITICAL: 15,
            Severity.HIGH: 10,
            Severity.MEDIUM: 5,
            Severity.LOW: 3,
        }
    )
    protection_bonus: int = 5
    high_risk_data: int = 8
    critical_pattern: int = 12
    high_pattern: int = 8
    many_third_parties: int = 10
    many_third_parties_threshold: int = 5


@dataclass(frozen=True)
class Assessment:
    """Score, level and ordered reasons produced by :func:`aggregate`."""

    risk_score: int
    risk_level: RiskLevel
    reasons: tuple[str, ...]


def _by_severity(findings: Sequence[Finding], severity: Severity) -> list[Finding]:
    return [f for f in findings if f.severity is severity]


def aggregate(
    legal_patterns: Sequence[Finding],
    entities: EntityBag,
    complexity: ComplexityResult,
    vague: VagueLanguageResult,
    contradictions: Sequence[ContradictionRecord],
    red_flags: Mapping[str, RedFlag],
    weights: RiskWeights | None = None,
) -> Assessment:
    """Combine detector outputs into a bounded score and ranked reasons.

    Reasons are ordered by how actionable they are, independent of their
    numeric contribution: contradictions, critical legal patterns,
    high-risk data, complexity, vague language.
    """
    w = weights or RiskWeights()
    critical = _by_severity(legal_patterns, Severity.CRITICAL)
    high = _by_severity(legal_patterns, Severity.HIGH)
    ratio = complexity.complexity_ratio
    vague_total = vague.total

    score = 0
    score += len(critical) * w.critical_pattern
    score += len(high) * w.high_pattern
    score += len(entities.high_risk) * w.high_risk_data
    score += len(entities.medium_risk) * w.medium_risk_data
    score += len(entities.third_parties) * w.third_party
    if ratio > w.complexity_threshold:
        score += w.complexity
    if vague_total > w.vague_threshold:
        score += w.vague
    score += len(contradictions) * w.contradiction
    score += sum(1 for flag in red_flags.values() if flag.matched) * w.red_flag
    score = max(0, min(w.max_score, score))

    reasons: list[str] = []
    for record in contradictions:
        reasons.append(f"Contradiction detected: {record.description}.")
    for finding in critical:
        reasons.append(f"{finding.description} (found {finding.count}x).")
    if entities.high_risk:
        reasons.append(f"Collects high-risk data: {', '.join(entities.high_risk[:3])}.")
    if ratio > w.complexity_threshold:
        reasons.append(f"{round(ratio * 100)}% of sentences are overly complex.")
    if vague_total > w.vague_threshold:
        reasons.append(f"{vague_total} vague terms used.")

    return Assessment(
        risk_score=score,
        risk_level=RiskLevel.from_score(score),
        reasons=tuple(reasons),
    )


def privacy_score(
    red_flags: Mapping[str, RedFlag],
    legal_patterns: Sequence[Finding],
    entities: EntityBag,
    mentions_protections: bool,
    weights: PrivacyWeights | None = None,
) -> int:
    """Privacy-friendliness score from 0 (worst) to 100 (best)."""
    w = weights or PrivacyWeights()
    score = 100
    for flag in red_flags.values():
        if flag.matched:
            score -= w.red_flag.get(flag.severity, w.red_flag[Severity.LOW])
    if mentions_protections:
        score += w.protection_bonus
    score -= len(entities.high_risk) * w.high_risk_data
    score -= len(_by_severity(legal_patterns, Severity.CRITICAL)) * w.critical_pattern
    score -= len(_by_severity(legal_patterns, Severity.HIGH)) * w.high_pattern
    if len(entities.third_parties) > w.many_third_parties_threshold:
        score -= w.many_third_parties
    return max(0, min(100, score))


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

MAX_BULLETS = 10

# Red-flag bullets listed before the third-party count, then after it.
# Flags in neither list follow in taxonomy order when they carry bullet text.
LEAD_FLAG_BULLETS = (
    "data_selling",
    "biometric_data",
    "arbitration",
    "location_tracking",
    "ai_training",
    "no_deletion",
)
TRAILING_FLAG_BULLETS = (
    "data_sharing",
    "tracking_cookies",
    "targeted_advertising",
    "auto_renewal",
    "no_refunds",
)


def _flag_bullets(
    red_flags: Mapping[str, RedFlag], bullet_text: Mapping[str, str], keys: Sequence[str]
) -> list[str]:
    return [
        bullet_text[key]
        for key in keys
        if key in red_flags and red_flags[key].matched and bullet_text.get(key)
    ]


def build_bullets(
    red_flags: Mapping[str, RedFlag],
    bullet_text: Mapping[str, str],
    legal_patterns: Sequence[Finding],
    entities: EntityBag,
    contradictions: Sequence[ContradictionRecord],
) -> tuple[str, ...]:
    """Build at most ten bullets, most serious first."""
    bullets: list[str] = []

    for record in contradictions:
        bullets.append(f"CONTRADICTION: {record.description}")
    for finding in _by_severity(legal_patterns, Severity.CRITICAL):
        bullets.append(f"{finding.description} (found {finding.count}x)")
    if entities.high_risk:
        more = "..." if len(entities.high_risk) > 3 else ""
        bullets.append(f"Collects sensitive data: {', '.join(entities.high_risk[:3])}{more}")
    for finding in _by_severity(legal_patterns, Severity.HIGH):
        bullets.append(finding.description)

    bullets.extend(_flag_bullets(red_flags, bullet_text, LEAD_FLAG_BULLETS))
    if entities.third_parties:
        bullets.append(f"Shares data with {len(entities.third_parties)} types of third parties")
    bullets.extend(_flag_bullets(red_flags, bullet_text, TRAILING_FLAG_BULLETS))
    listed = set(LEAD_FLAG_BULLETS) | set(TRAILING_FLAG_BULLETS)
    bullets.extend(
        _flag_bullets(red_flags, bullet_text, [key for key in red_flags if key not in listed])
    )
    # tracking_cookies and targeted_advertising share one bullet
    bullets = list(dict.fromkeys(bullets))

    if not bullets:
        bullets = [
            "No major red flags detected in analysis",
            "Standard terms of service",
            "Always read full terms before agreeing",
        ]
    return tuple(bullets[:MAX_BULLETS])


def build_summary(risk_score: int, risk_level: RiskLevel, reasons: Sequence[str],
                  contradiction_count: int) -> str:
    """One-line TL;DR for a report."""
    lead = reasons[0].rstrip(".") if reasons else None
    if contradiction_count > 0:
        return (
            f"CRITICAL: Found {contradiction_count} contradiction(s) in terms. "
            f"{risk_level.value} risk detected ({risk_score}/100). Proceed with extreme caution."
        )
    if risk_level is RiskLevel.CRITICAL:
        return (
            f"CRITICAL RISK: {lead or 'Multiple serious issues detected'}. "
            f"Risk score: {risk_score}/100. Strongly recommend reviewing alternatives."
        )
    if risk_level is RiskLevel.HIGH:
        return (
            f"HIGH RISK: {lead or 'Significant privacy concerns detected'}. "
            f"Risk score: {risk_score}/100. Review carefully before proceeding."
        )
    if risk_level is RiskLevel.MEDIUM:
        return (
            f"MODERATE RISK: {lead or 'Some concerning terms detected'}. "
            f"Risk score: {risk_score}/100. Read terms carefully."
        )
    return (
        f"LOW RISK: No major concerns detected. Risk score: {risk_score}/100. "
        "Standard terms, but always review before agreeing."
    )
