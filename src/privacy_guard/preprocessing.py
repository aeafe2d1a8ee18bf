"""Sentence segmentation, normalization and readability scoring.

Segmentation is deliberately simple: any run of ``.``, ``!`` or ``?``
ends a sentence. Abbreviations ("e.g.", "Inc.") and decimal numbers are
therefore split too; detectors are tuned for that behaviour.
"""

from __future__ import annotations

import re

from .models import Sentence

# Segments of text between terminating punctuation runs
_SEGMENT_RE = re.compile(r"[^.!?]+")

# Typographic apostrophes and quotes folded to ASCII for matching
_MATCH_FOLD = str.maketrans({"’": "'", "‘": "'", "“": '"', "”": '"'})


def normalize(text: str) -> str:
    """Lower-case ``text`` and fold curly quotes for lexicon matching."""
    return text.lower().translate(_MATCH_FOLD)


def tokenize_words(text: str) -> list[str]:
    """Split ``text`` into whitespace-delimited words."""
    return text.split()


def segment_sentences(text: str) -> tuple[Sentence, ...]:
    """Split ``text`` into trimmed, non-empty sentences.

    Each :class:`Sentence` keeps the original casing plus its character
    span in ``text``; ``lower`` is the normalized form used for matching.

    Args:
        text: Raw document text.

    Returns:
        Sentences in document order.
    """
    if not text:
        return ()

    sentences: list[Sentence] = []
    for match in _SEGMENT_RE.finditer(text):
        raw = match.group()
        stripped = raw.strip()
        if not stripped:
            continue
        start = match.start() + (len(raw) - len(raw.lstrip()))
        sentences.append(
            Sentence(
                text=stripped,
                lower=normalize(stripped),
                word_count=len(tokenize_words(stripped)),
                start_char=start,
                end_char=start + len(stripped),
            )
        )
    return tuple(sentences)


# ---------------------------------------------------------------------------
# Readability
# ---------------------------------------------------------------------------

_SILENT_ENDING_RE = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]{1,2}")


def count_syllables(word: str) -> int:
    """Estimate the syllable count of an English word.

    Strips silent endings and counts vowel groups of up to two letters.
    Non-letters are ignored. Always at least 1.
    """
    word = re.sub(r"[^a-z]", "", word.lower())
    if len(word) <= 3:
        return 1
    word = _SILENT_ENDING_RE.sub("", word)
    word = re.sub(r"^y", "", word)
    return len(_VOWEL_GROUP_RE.findall(word)) or 1


def readability_grade(sentences: tuple[Sentence, ...] | list[Sentence]) -> int:
    """Simplified Flesch-Kincaid grade level, rounded and clamped to 1-20.

    Returns 12 when there is nothing to measure.
    """
    words = [word for sentence in sentences for word in tokenize_words(sentence.text)]
    if not sentences or not words:
        return 12

    avg_sentence_length = len(words) / len(sentences)
    avg_syllables = sum(count_syllables(w) for w in words) / len(words)
    grade = 0.39 * avg_sentence_length + 11.8 * avg_syllables - 15.59
    return max(1, min(20, round(grade)))
