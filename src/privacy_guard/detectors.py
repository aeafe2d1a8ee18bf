"""Heuristic detectors for consumer legal documents.

Each detector is built from a :class:`Taxonomy` and is a pure function of
the text (or its sentences): no detector reads another detector's output,
so they may run in any order or concurrently.

Example::

    sentences = segment_sentences(text)
    patterns = LegalPatternDetector(taxonomy.legal_patterns).detect(text)
    entities = EntityExtractor(taxonomy).extract(text)
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence, Union

from .errors import PatternEvaluationError
from .models import (
    ComplexityFinding,
    ComplexityResult,
    ContradictionRecord,
    EntityBag,
    Finding,
    KeywordMatch,
    RedFlag,
    Sentence,
    Severity,
    VagueLanguageResult,
    excerpt,
)
from .preprocessing import normalize, segment_sentences
from .taxonomy import ContradictionPair, LegalPattern, Matcher, RedFlagRule, Taxonomy

logger = logging.getLogger(__name__)

TextOrSentences = Union[str, Sequence[Sentence]]

# Sentences this short are usually fragments left by abbreviations
MIN_SENTENCE_CHARS = 10
EXAMPLE_SENTENCE_CHARS = 150


def _clip(text: str, limit: int = EXAMPLE_SENTENCE_CHARS) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _term_regex(terms: Iterable[str]) -> re.Pattern | None:
    """Compile a whole-word alternation over ``terms`` (longest first)."""
    ordered = sorted({t for t in terms if t}, key=len, reverse=True)
    if not ordered:
        return None
    alternation = "|".join(re.escape(t) for t in ordered)
    return re.compile(rf"(?<![\w'])(?:{alternation})(?![\w'])", re.IGNORECASE)


def evaluate(key: str, matcher: Matcher, text: str) -> list[str]:
    """Run ``matcher`` over ``text``, wrapping any failure.

    Raises:
        PatternEvaluationError: If the matcher raises for any reason.
    """
    try:
        return list(matcher.matches(text))
    except Exception as exc:
        raise PatternEvaluationError(key, f"{type(exc).__name__}: {exc}") from exc


def _as_sentences(text_or_sentences: TextOrSentences) -> Sequence[Sentence]:
    if isinstance(text_or_sentences, str):
        return segment_sentences(text_or_sentences)
    return text_or_sentences


# ---------------------------------------------------------------------------
# Negation-aware keyword matching
# ---------------------------------------------------------------------------


class NegationAwareMatcher:
    """Find keywords only in sentences without a negation cue.

    The classic false positive this avoids is "we do not share your
    data" being read as a data-sharing clause.

    Example::

        matcher = NegationAwareMatcher(taxonomy.negation_cues)
        matcher.find("We do not sell data. We share data.", "share").found  # True
    """

    def __init__(self, negation_cues: Iterable[str]) -> None:
        self._negation_re = _term_regex(normalize(c) for c in negation_cues)

    def has_negation(self, sentence: str) -> bool:
        if self._negation_re is None:
            return False
        return self._negation_re.search(normalize(sentence)) is not None

    def find(self, text_or_sentences: TextOrSentences, keyword: str) -> KeywordMatch:
        """Return the first non-negated sentence containing ``keyword``.

        Args:
            text_or_sentences: Raw text or already-segmented sentences.
            keyword: Case-insensitive substring to look for.

        Returns:
            ``found=True`` with the sentence as context, or ``found=False``.
            ``negated`` is True when the keyword only occurred in negated
            sentences.
        """
        needle = normalize(keyword)
        if not needle:
            return KeywordMatch(found=False, keyword=keyword)

        negated = False
        for sentence in _as_sentences(text_or_sentences):
            if needle not in sentence.lower:
                continue
            if self.has_negation(sentence.lower):
                negated = True
                continue
            return KeywordMatch(found=True, keyword=keyword, context=sentence.text)
        return KeywordMatch(found=False, keyword=keyword, negated=negated)


class RedFlagClassifier:
    """Legacy keyword classifier producing one binary flag per rule.

    Each rule's keywords are attempted in order; the first one found in a
    non-negated sentence decides the flag and the rest are skipped.
    """

    def __init__(self, rules: Iterable[RedFlagRule], matcher: NegationAwareMatcher) -> None:
        self.rules = tuple(rules)
        self._matcher = matcher

    def classify(self, text_or_sentences: TextOrSentences) -> dict[str, RedFlag]:
        sentences = _as_sentences(text_or_sentences)
        return {rule.key: self._classify_rule(rule, sentences) for rule in self.rules}

    def _classify_rule(self, rule: RedFlagRule, sentences: Sequence[Sentence]) -> RedFlag:
        for keyword in rule.keywords:
            result = self._matcher.find(sentences, keyword)
            if result.found:
                return RedFlag(
                    key=rule.key,
                    matched=True,
                    severity=rule.severity,
                    keyword=keyword,
                    context=excerpt(result.context or ""),
                )
        return RedFlag(key=rule.key, matched=False, severity=rule.severity)


# ---------------------------------------------------------------------------
# Legal pattern detection
# ---------------------------------------------------------------------------


class LegalPatternDetector:
    """Match every taxonomy legal pattern against the whole document.

    A pattern that fails to evaluate is logged and skipped; the remaining
    patterns still run.
    """

    def __init__(self, patterns: Iterable[LegalPattern]) -> None:
        self.patterns = tuple(patterns)

    def detect(self, text: str) -> tuple[Finding, ...]:
        findings: list[Finding] = []
        for pattern in self.patterns:
            try:
                matches = evaluate(pattern.key, pattern.matcher, text)
            except PatternEvaluationError as exc:
                logger.warning("Skipping legal pattern: %s", exc)
                continue
            if not matches:
                continue
            findings.append(
                Finding(
                    key=pattern.key,
                    severity=pattern.severity,
                    description=pattern.description,
                    count=len(matches),
                    examples=tuple(excerpt(m) for m in matches[:2]),
                )
            )
        return tuple(findings)


# ---------------------------------------------------------------------------
# Entity extraction
# ---------------------------------------------------------------------------


class EntityExtractor:
    """Record which lexicon terms occur anywhere in the document.

    Presence only: a substring test per term against the lower-cased
    text, with no counts or positions.
    """

    def __init__(self, taxonomy: Taxonomy) -> None:
        self.taxonomy = taxonomy

    def extract(self, text: str) -> EntityBag:
        lower = normalize(text)

        def present(terms: tuple[str, ...]) -> tuple[str, ...]:
            return tuple(term for term in terms if term in lower)

        return EntityBag(
            high_risk=present(self.taxonomy.high_risk_data),
            medium_risk=present(self.taxonomy.medium_risk_data),
            low_risk=present(self.taxonomy.low_risk_data),
            third_parties=present(self.taxonomy.third_parties),
            purposes=present(self.taxonomy.purposes),
            jurisdictions=present(self.taxonomy.jurisdictions),
        )


# ---------------------------------------------------------------------------
# Sentence complexity & jargon
# ---------------------------------------------------------------------------


class ComplexityAnalyzer:
    """Flag overly long or jargon-dense sentences.

    Args:
        jargon: Legal jargon lexicon (substring matched).
        max_words: Sentences with more words than this are flagged.
        min_jargon: Distinct jargon terms needed to flag a sentence.
    """

    def __init__(
        self,
        jargon: Iterable[str],
        max_words: int = 40,
        min_jargon: int = 2,
    ) -> None:
        self.jargon = tuple(jargon)
        self.max_words = max_words
        self.min_jargon = min_jargon

    def analyze(self, text_or_sentences: TextOrSentences) -> ComplexityResult:
        sentences = [
            s for s in _as_sentences(text_or_sentences) if len(s.text) > MIN_SENTENCE_CHARS
        ]
        findings: list[ComplexityFinding] = []
        flagged = 0

        for sentence in sentences:
            sentence_findings: list[ComplexityFinding] = []
            if sentence.word_count > self.max_words:
                sentence_findings.append(
                    ComplexityFinding(
                        text=_clip(sentence.text),
                        word_count=sentence.word_count,
                        reason="Overly long sentence - may hide important information",
                    )
                )
            jargon_count = sum(1 for term in self.jargon if term in sentence.lower)
            if jargon_count >= self.min_jargon:
                sentence_findings.append(
                    ComplexityFinding(
                        text=_clip(sentence.text),
                        word_count=sentence.word_count,
                        reason=f"Contains {jargon_count} legal jargon terms",
                    )
                )
            if sentence_findings:
                flagged += 1
                findings.extend(sentence_findings)

        return ComplexityResult(
            total_sentences=len(sentences),
            complex_sentences=flagged,
            findings=tuple(findings),
        )


# ---------------------------------------------------------------------------
# Vague language
# ---------------------------------------------------------------------------


class VagueLanguageDetector:
    """Count hedging, qualifier and under-specification terms.

    Terms are matched as whole words or phrases. Sentences with at least
    ``example_threshold`` distinct vague terms are surfaced as examples.
    """

    def __init__(
        self,
        classes: dict[str, tuple[str, ...]],
        high_threshold: int = 20,
        example_threshold: int = 3,
        max_examples: int = 3,
    ) -> None:
        self.classes = dict(classes)
        self.high_threshold = high_threshold
        self.example_threshold = example_threshold
        self.max_examples = max_examples
        self._term_res = {
            term: _term_regex([term]) for terms in self.classes.values() for term in terms
        }

    def detect(self, text: str, sentences: Sequence[Sentence] | None = None) -> VagueLanguageResult:
        lower = normalize(text)
        by_class = {
            name: sum(len(self._term_res[t].findall(lower)) for t in terms)
            for name, terms in self.classes.items()
        }
        total = sum(by_class.values())

        examples: list[str] = []
        candidates = sentences if sentences is not None else segment_sentences(text)
        for sentence in candidates:
            if len(examples) >= self.max_examples:
                break
            if len(sentence.text) <= MIN_SENTENCE_CHARS:
                continue
            distinct = sum(1 for r in self._term_res.values() if r.search(sentence.lower))
            if distinct >= self.example_threshold:
                examples.append(_clip(sentence.text))

        return VagueLanguageResult(
            by_class=by_class,
            severity=Severity.HIGH if total > self.high_threshold else Severity.MEDIUM,
            examples=tuple(examples),
        )


# ---------------------------------------------------------------------------
# Contradictions
# ---------------------------------------------------------------------------


class ContradictionDetector:
    """Pair privacy claims with statements elsewhere that contradict them.

    A pair fires only when both sides match somewhere in the document; the
    first match of each side is kept as the example.
    """

    def __init__(self, pairs: Iterable[ContradictionPair]) -> None:
        self.pairs = tuple(pairs)

    def detect(self, text: str) -> tuple[ContradictionRecord, ...]:
        records: list[ContradictionRecord] = []
        for pair in self.pairs:
            try:
                claims = evaluate(pair.key, pair.claim, text)
                if not claims:
                    continue
                contradictions = evaluate(pair.key, pair.contradiction, text)
            except PatternEvaluationError as exc:
                logger.warning("Skipping contradiction pair: %s", exc)
                continue
            if contradictions:
                records.append(
                    ContradictionRecord(
                        description=pair.description,
                        claim_example=excerpt(claims[0]),
                        contradiction_example=excerpt(contradictions[0]),
                    )
                )
        return tuple(records)
