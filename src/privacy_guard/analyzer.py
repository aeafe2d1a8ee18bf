"""Analyzer orchestrating segmentation, detectors and risk aggregation.

``RiskAnalyzer`` is the primary entry point. It takes raw document text
and returns one immutable ``RiskReport``. Degraded inputs (too short, no
taxonomy) produce placeholder reports instead of exceptions.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable

from .classifier import detect_document_types
from .detectors import (
    ComplexityAnalyzer,
    ContradictionDetector,
    EntityExtractor,
    LegalPatternDetector,
    NegationAwareMatcher,
    RedFlagClassifier,
    VagueLanguageDetector,
)
from .errors import (
    InsufficientInputError,
    MissingConfigurationError,
    ensure_configured,
    ensure_sufficient_input,
)
from .models import ReportStatus, RiskLevel, RiskReport
from .parsers import load_document
from .preprocessing import normalize, readability_grade, segment_sentences
from .scoring import (
    PrivacyWeights,
    RiskWeights,
    aggregate,
    build_bullets,
    build_summary,
    privacy_score,
)
from .taxonomy import Taxonomy, TaxonomyStore

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 100
PLACEHOLDER_SCORE = 30


class RiskAnalyzer:
    """Heuristic risk analyzer for terms of service and privacy policies.

    Example::

        analyzer = RiskAnalyzer(taxonomy=default_taxonomy())
        report = analyzer.analyze(policy_text)

        print(report.risk_level.value, report.risk_score)
        for reason in report.reasons:
            print(" -", reason)

    Args:
        taxonomy: A ``Taxonomy``, a ``TaxonomyStore`` for hot reloading, or
            None (every call then returns an "analysis unavailable" report).
        weights: Aggregate risk weights.
        privacy_weights: Privacy score deductions.
        min_length: Texts shorter than this short-circuit to a placeholder.
        parallel: Run the independent detectors on a thread pool.
    """

    def __init__(
        self,
        taxonomy: Taxonomy | TaxonomyStore | None = None,
        weights: RiskWeights | None = None,
        privacy_weights: PrivacyWeights | None = None,
        min_length: int = MIN_TEXT_LENGTH,
        parallel: bool = False,
    ) -> None:
        self._taxonomy = taxonomy
        self.weights = weights or RiskWeights()
        self.privacy_weights = privacy_weights or PrivacyWeights()
        self.min_length = min_length
        self.parallel = parallel

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(self, text: str | None, url: str | None = None) -> RiskReport:
        """Analyze a document and return its risk report.

        Never raises for per-document problems: short input and missing
        configuration yield placeholder reports with ``status`` set.

        Args:
            text: Extracted body text of the document.
            url: Optional page URL, used only for document-type detection.

        Returns:
            A complete ``RiskReport``.
        """
        taxonomy = self._current_taxonomy()
        try:
            ensure_configured(taxonomy)
            text = ensure_sufficient_input(text, self.min_length)
        except MissingConfigurationError as exc:
            logger.error("%s", exc)
            return _placeholder_report(ReportStatus.UNCONFIGURED, str(exc))
        except InsufficientInputError as exc:
            logger.debug("Short-circuiting analysis: %s", exc)
            return _placeholder_report(
                ReportStatus.INSUFFICIENT_INPUT,
                "Insufficient text to analyze: document appears too short "
                f"for meaningful analysis (minimum {exc.minimum} characters).",
            )

        return self._run(text, taxonomy, url)

    def analyze_file(self, file_path: str | Path, max_chars: int | None = None) -> RiskReport:
        """Load a policy file and analyze its text.

        Args:
            file_path: Path to a TXT, HTML, PDF or DOCX document.
            max_chars: Optional truncation applied before analysis.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file format is unsupported.
        """
        document = load_document(file_path)
        text = document.text
        if max_chars is not None and len(text) > max_chars:
            logger.info("Truncating %s from %d to %d characters",
                        document.filename, len(text), max_chars)
            text = text[:max_chars]
        return self.analyze(text)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _current_taxonomy(self) -> Taxonomy | None:
        if isinstance(self._taxonomy, TaxonomyStore):
            return self._taxonomy.get()
        return self._taxonomy

    def _run(self, text: str, taxonomy: Taxonomy, url: str | None) -> RiskReport:
        sentences = segment_sentences(text)
        negation = NegationAwareMatcher(taxonomy.negation_cues)
        vague_detector = VagueLanguageDetector(taxonomy.vague_classes)

        tasks: dict[str, Callable[[], Any]] = {
            "red_flags": lambda: RedFlagClassifier(taxonomy.red_flags, negation).classify(sentences),
            "legal_patterns": lambda: LegalPatternDetector(taxonomy.legal_patterns).detect(text),
            "entities": lambda: EntityExtractor(taxonomy).extract(text),
            "complexity": lambda: ComplexityAnalyzer(taxonomy.legal_jargon).analyze(sentences),
            "vague": lambda: vague_detector.detect(text, sentences),
            "contradictions": lambda: ContradictionDetector(taxonomy.contradictions).detect(text),
        }
        results = self._run_tasks(tasks)

        assessment = aggregate(
            legal_patterns=results["legal_patterns"],
            entities=results["entities"],
            complexity=results["complexity"],
            vague=results["vague"],
            contradictions=results["contradictions"],
            red_flags=results["red_flags"],
            weights=self.weights,
        )
        lower = normalize(text)
        mentions_protections = any(term in lower for term in taxonomy.privacy_protections)

        return RiskReport(
            risk_score=assessment.risk_score,
            risk_level=assessment.risk_level,
            reasons=assessment.reasons,
            red_flags=results["red_flags"],
            entities=results["entities"],
            complexity=results["complexity"],
            vague_language=results["vague"],
            contradictions=results["contradictions"],
            legal_patterns=results["legal_patterns"],
            privacy_score=privacy_score(
                results["red_flags"],
                results["legal_patterns"],
                results["entities"],
                mentions_protections,
                self.privacy_weights,
            ),
            readability_grade=readability_grade(sentences),
            summary=build_summary(
                assessment.risk_score,
                assessment.risk_level,
                assessment.reasons,
                len(results["contradictions"]),
            ),
            bullets=build_bullets(
                results["red_flags"],
                {rule.key: rule.bullet for rule in taxonomy.red_flags},
                results["legal_patterns"],
                results["entities"],
                results["contradictions"],
            ),
            document_types=tuple(t.value for t in detect_document_types(text, url)),
        )

    def _run_tasks(self, tasks: dict[str, Callable[[], Any]]) -> dict[str, Any]:
        if not self.parallel:
            return {name: task() for name, task in tasks.items()}
        with ThreadPoolExecutor(max_workers=len(tasks)) as pool:
            futures = {name: pool.submit(task) for name, task in tasks.items()}
            return {name: future.result() for name, future in futures.items()}


def _placeholder_report(status: ReportStatus, reason: str) -> RiskReport:
    """Fixed low-confidence report for inputs that cannot be analyzed."""
    return RiskReport(
        risk_score=PLACEHOLDER_SCORE,
        risk_level=RiskLevel.MEDIUM,
        reasons=(reason,),
        summary=reason,
        bullets=(reason,),
        status=status,
    )


def analyze(text: str | None, taxonomy: Taxonomy | None = None) -> RiskReport:
    """One-off analysis of ``text`` with ``taxonomy``.

    Example::

        report = analyze(policy_text, default_taxonomy())
    """
    return RiskAnalyzer(taxonomy=taxonomy).analyze(text)
