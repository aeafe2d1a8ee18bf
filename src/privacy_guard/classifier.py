"""Document-type detection for consumer legal pages.

Classifies a page as terms of service, a privacy policy and/or a cookie
policy from phrase patterns in its URL and body text. A page can belong
to several types at once.
"""

from __future__ import annotations

import re
from enum import Enum


class DocumentType(str, Enum):
    """Consumer-facing legal document categories."""

    TERMS = "terms"
    PRIVACY = "privacy"
    COOKIES = "cookies"


DOCUMENT_PATTERNS: dict[DocumentType, list[re.Pattern]] = {
    DocumentType.TERMS: [
        re.compile(r"terms[\s_-]+of[\s_-]+service", re.IGNORECASE),
        re.compile(r"terms[\s_-]+and[\s_-]+conditions", re.IGNORECASE),
        re.compile(r"terms[\s_-]+of[\s_-]+use", re.IGNORECASE),
        re.compile(r"user[\s_-]+agreement", re.IGNORECASE),
        re.compile(r"service[\s_-]+agreement", re.IGNORECASE),
        re.compile(r"legal[\s_-]+terms", re.IGNORECASE),
    ],
    DocumentType.PRIVACY: [
        re.compile(r"privacy[\s_-]+policy", re.IGNORECASE),
        re.compile(r"privacy[\s_-]+notice", re.IGNORECASE),
        re.compile(r"privacy[\s_-]+statement", re.IGNORECASE),
        re.compile(r"data[\s_-]+protection", re.IGNORECASE),
        re.compile(r"how\s+we\s+use\s+your\s+data", re.IGNORECASE),
    ],
    DocumentType.COOKIES: [
        re.compile(r"cookie[\s_-]+policy", re.IGNORECASE),
        re.compile(r"cookie[\s_-]+notice", re.IGNORECASE),
        re.compile(r"cookie[\s_-]+consent", re.IGNORECASE),
        re.compile(r"manage[\s_-]+cookies", re.IGNORECASE),
        re.compile(r"cookie[\s_-]+preferences", re.IGNORECASE),
    ],
}


def detect_document_types(text: str, url: str | None = None) -> tuple[DocumentType, ...]:
    """Return every document type whose patterns match ``url`` or ``text``.

    Types are returned in declaration order without duplicates.

    Example::

        detect_document_types("Read our Privacy Policy", "https://x.com/terms-of-service")
        # (DocumentType.TERMS, DocumentType.PRIVACY)
    """
    haystacks = [h for h in (url, text) if h]
    return tuple(
        doc_type
        for doc_type, patterns in DOCUMENT_PATTERNS.items()
        if any(p.search(h) for p in patterns for h in haystacks)
    )
