"""Shared test fixtures for privacy-guard tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from privacy_guard.analyzer import RiskAnalyzer
from privacy_guard.taxonomy import Taxonomy, default_taxonomy

# Neutral text that triggers no detector; used to reach the minimum length.
FILLER = (
    "Thank you for reading this document about the Service. "
    "Please contact support with any questions you have."
)

NEGATED_SHARING = (
    "We do not share your personal information with third parties "
    "for marketing purposes without your consent."
)

MONETIZATION = (
    "We may provide your information to selected partners in exchange "
    "for valuable consideration to improve our services."
)

PRIVATE_BUT_SHARED = (
    "Your data is private and secure.\n\n"
    "We may share your data with advertising partners, analytics providers, "
    "and data brokers."
)

# 45 words, no sentence punctuation
LONG_SENTENCE = " ".join(("you agree that the service " * 9).split())

SENSITIVE_DATA = (
    "We collect biometric identifiers. Biometric templates are stored on our servers. "
    "We also process financial information and precise location for fraud checks."
)


@pytest.fixture
def sample_policy_path() -> Path:
    """Path to the sample privacy policy text file."""
    return Path(__file__).parent.parent / "examples" / "sample_privacy_policy.txt"


@pytest.fixture
def sample_policy_text(sample_policy_path: Path) -> str:
    """Full text of the sample privacy policy."""
    return sample_policy_path.read_text(encoding="utf-8")


@pytest.fixture
def taxonomy() -> Taxonomy:
    """The built-in taxonomy."""
    return default_taxonomy()


@pytest.fixture
def analyzer(taxonomy: Taxonomy) -> RiskAnalyzer:
    return RiskAnalyzer(taxonomy=taxonomy)


@pytest.fixture
def tmp_policy_file(tmp_path: Path, sample_policy_text: str) -> Path:
    """Create a temporary text file with policy content."""
    file = tmp_path / "policy.txt"
    file.write_text(sample_policy_text, encoding="utf-8")
    return file


class BoomMatcher:
    """Matcher that always fails, for error-path tests."""

    def matches(self, text: str) -> list[str]:
        raise RuntimeError("boom")
