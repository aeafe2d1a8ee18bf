"""Privacy Guard -- offline risk assessment for terms of service and privacy policies."""

__version__ = "0.3.0"

from .analyzer import RiskAnalyzer, analyze
from .classifier import DocumentType, detect_document_types
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
    PatternEvaluationError,
    PrivacyGuardError,
    TaxonomyError,
)
from .models import (
    ComplexityResult,
    ContradictionRecord,
    EntityBag,
    Finding,
    KeywordMatch,
    RedFlag,
    ReportStatus,
    RiskLevel,
    RiskReport,
    Sentence,
    Severity,
    VagueLanguageResult,
)
from .preprocessing import readability_grade, segment_sentences
from .scoring import PrivacyWeights, RiskWeights
from .taxonomy import (
    ContradictionPair,
    LegalPattern,
    Matcher,
    RedFlagRule,
    RegexMatcher,
    Taxonomy,
    TaxonomyStore,
    default_taxonomy,
    load_taxonomy,
)

__all__ = [
    # Core
    "RiskAnalyzer",
    "analyze",
    "RiskReport",
    "RiskLevel",
    "ReportStatus",
    "Severity",
    # Configuration
    "Taxonomy",
    "TaxonomyStore",
    "LegalPattern",
    "ContradictionPair",
    "RedFlagRule",
    "Matcher",
    "RegexMatcher",
    "default_taxonomy",
    "load_taxonomy",
    "RiskWeights",
    "PrivacyWeights",
    # Detectors
    "NegationAwareMatcher",
    "RedFlagClassifier",
    "LegalPatternDetector",
    "EntityExtractor",
    "ComplexityAnalyzer",
    "VagueLanguageDetector",
    "ContradictionDetector",
    # Results
    "Sentence",
    "KeywordMatch",
    "Finding",
    "RedFlag",
    "EntityBag",
    "ComplexityResult",
    "VagueLanguageResult",
    "ContradictionRecord",
    # Text helpers
    "segment_sentences",
    "readability_grade",
    "DocumentType",
    "detect_document_types",
    # Errors
    "PrivacyGuardError",
    "InsufficientInputError",
    "MissingConfigurationError",
    "PatternEvaluationError",
    "TaxonomyError",
]
