"""Answer normalization for exercise grading.

The same normalization backs free-text/translation answer checks and the
comparison of a reorder exercise's picked words against its canonical answer.
"""

import re
from typing import Iterable

_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,!?;:])")
_SPACE_AFTER_PUNCT = re.compile(r"([.,!?;:])\s*")
_WHITESPACE = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    """Normalize an answer for comparison.

    Lowercases, trims, removes whitespace before ``. , ! ? ; :``, puts exactly
    one space after each of those marks and collapses remaining whitespace.
    The function is idempotent.

    Args:
        text: Raw answer text

    Returns:
        Normalized answer

    Example:
        >>> normalize_answer("Ich  komme , jetzt !")
        'ich komme, jetzt!'
    """
    normalized = text.lower().strip()
    normalized = _SPACE_BEFORE_PUNCT.sub(r"\1", normalized)
    normalized = _SPACE_AFTER_PUNCT.sub(r"\1 ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def normalize_punctuation(text: str) -> str:
    """Case-preserving punctuation normalization used by content checks.

    Collapses whitespace and removes any whitespace around ``. , ! ? ; :``.

    Example:
        >>> normalize_punctuation("Die Rechnung , bitte .")
        'Die Rechnung,bitte.'
    """
    collapsed = _WHITESPACE.sub(" ", text).strip()
    collapsed = _SPACE_BEFORE_PUNCT.sub(r"\1", collapsed)
    return _SPACE_AFTER_PUNCT.sub(r"\1", collapsed).strip()


def answers_match(given: str, expected: str) -> bool:
    """Compare a learner answer with the expected answer after normalization."""
    return normalize_answer(given) == normalize_answer(expected)


def reorder_matches(picked_words: Iterable[str], answer: str) -> bool:
    """Check a reorder attempt: picked words joined by spaces vs the answer."""
    return answers_match(" ".join(picked_words), answer)
