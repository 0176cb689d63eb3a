"""Text processing utilities for SEO content analysis."""

import re
from difflib import SequenceMatcher

# Capitalised words that usually open a sentence rather than follow an initial.
_SENTENCE_STARTERS = (
    "The|An|It|Its|This|That|These|Those|He|She|We|They|You|In|On|At|For|"
    "But|And|Or|If|When|Our|My|Your|There|Here|So|Then|Also"
)

# "!" and "?" always end a sentence.  A full stop does not end one after a
# common honorific, inside a decimal number, or after a single capital
# initial that is followed by a capitalised name ("J. Smith").
_SENTENCE_BOUNDARY = re.compile(
    r"[.!?]*[!?][.!?]*"
    r"|(?<!\bDr)(?<!\bMr)(?<!\bMs)(?<!\bMrs)(?<!\bProf)(?<!\b[A-Z])\.+(?!\d)"
    r"|(?<=\b[A-Z])\.+(?!\s+(?!(?:" + _SENTENCE_STARTERS + r")\b)[A-Z][a-z])"
)


def count_words(text: str) -> int:
    """Count words in text.

    Args:
        text: Input text.

    Returns:
        Word count.
    """
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """Split text into sentences on ``.``, ``!`` and ``?`` runs.

    Args:
        text: Input text.

    Returns:
        Non-empty, stripped sentence fragments in document order.
    """
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]


def calculate_readability(text: str) -> float:
    """Calculate the Flesch Reading Ease score for text.

    Returns:
        Score clamped to [0, 100] and rounded to one decimal.  Text with no
        sentences or no words scores 0.
    """
    sentences = split_sentences(text)
    words = text.split()
    if not sentences or not words:
        return 0.0

    syllable_count = sum(_count_syllables(w) for w in words)
    fre = (
        206.835
        - 1.015 * (len(words) / len(sentences))
        - 84.6 * (syllable_count / len(words))
    )
    return round(max(0.0, min(100.0, fre)), 1)


def semantic_density(text: str) -> float:
    """Percentage of distinct words longer than three characters.

    Returns:
        ``unique_long_words / total_words * 100``; 0 for empty text.
    """
    words = text.lower().split()
    if not words:
        return 0.0
    unique = {w for w in words if len(w) > 3}
    return len(unique) / len(words) * 100


def count_occurrences(text: str, phrase: str) -> int:
    """Count whole-phrase, case-insensitive occurrences of *phrase* in *text*.

    Args:
        text: The full text content.
        phrase: Single or multi-word phrase to count.

    Returns:
        Number of non-overlapping matches.
    """
    phrase = phrase.strip()
    if not text or not phrase:
        return 0
    pattern = re.compile(
        r"(?<![\w-])" + re.escape(phrase) + r"(?![\w-])", re.IGNORECASE
    )
    return len(pattern.findall(text))


def similarity_ratio(a: str, b: str) -> float:
    """Edit-distance style similarity between two strings in [0, 1]."""
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------

def _count_syllables(word: str) -> int:
    """Estimate syllable count for an English word."""
    word = word.lower().strip(".,!?;:'\"-()")
    if not word:
        return 0
    if len(word) <= 3:
        return 1

    vowels = "aeiouy"
    count = 0
    prev_vowel = False
    for char in word:
        is_vowel = char in vowels
        if is_vowel and not prev_vowel:
            count += 1
        prev_vowel = is_vowel

    # Adjust for silent 'e'
    if word.endswith("e") and count > 1:
        count -= 1
    # Adjust for 'le' ending
    if word.endswith("le") and len(word) > 2 and word[-3] not in vowels:
        count += 1

    return max(1, count)
