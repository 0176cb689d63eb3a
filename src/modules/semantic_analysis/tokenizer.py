"""Text normalisation and n-gram candidate building shared by every analyzer."""

import re
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from src.utils.text_processing import split_sentences

MIN_TOKEN_LENGTH = 3
MAX_TOKEN_LENGTH = 50
MAX_NGRAM = 3

_NON_WORD = re.compile(r"[^\w\s-]")
_EDGE_PUNCT = "-_.,!?;:'\"()[]{}<>«»“”‘’"


def normalize_text(text: str) -> str:
    """Lowercase, replace non-word/non-hyphen characters and collapse spaces."""
    if not text:
        return ""
    return " ".join(_NON_WORD.sub(" ", text.lower()).split())


def tokenize(text: str) -> list[str]:
    """Split normalised text into tokens of 3 to 50 characters."""
    return [
        tok for tok in normalize_text(text).split()
        if MIN_TOKEN_LENGTH <= len(tok) <= MAX_TOKEN_LENGTH
        and any(ch.isalnum() for ch in tok)
    ]


def strip_edge_punctuation(word: str) -> str:
    return word.strip(_EDGE_PUNCT)


@dataclass(frozen=True)
class TokenSet:
    """Candidate phrases from one text span.

    Behaves like a set for membership and size; iteration yields phrases in
    first-seen order so downstream tie-breaking is reproducible.
    """

    phrases: tuple[str, ...] = ()
    _lookup: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_lookup", frozenset(self.phrases))

    def __contains__(self, phrase: object) -> bool:
        return phrase in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self.phrases)

    def __len__(self) -> int:
        return len(self.phrases)

    def union(self, other: Iterable[str]) -> "TokenSet":
        merged = dict.fromkeys(self.phrases)
        for phrase in other:
            merged.setdefault(phrase, None)
        return TokenSet(tuple(merged))


def build_ngrams(
    text: str,
    stop_words: frozenset[str],
    max_n: int = MAX_NGRAM,
) -> TokenSet:
    """Build the uni/bi/trigram candidate set for *text*.

    Stop words are removed from the token sequence before windowing, so a
    phrase can bridge a dropped stop word ("best practices for the marketing"
    yields "practices marketing").

    Args:
        text: Raw text span.
        stop_words: Closed stop-word list.
        max_n: Longest window to build.

    Returns:
        A :class:`TokenSet` ordered by position, shorter windows first.
    """
    return TokenSet(tuple(count_ngrams(text, stop_words, max_n)))


def count_ngrams(
    text: str,
    stop_words: frozenset[str],
    max_n: int = MAX_NGRAM,
) -> Counter:
    """Count every retained n-gram window in *text*.

    Uses the same windowing and stop-word filter as :func:`build_ngrams`; the
    returned Counter preserves first-seen order.
    """
    tokens = [tok for tok in tokenize(text) if tok not in stop_words]
    counts: Counter = Counter()
    for i in range(len(tokens)):
        for n in range(1, max_n + 1):
            window = tokens[i:i + n]
            if len(window) < n:
                break
            counts[" ".join(window)] += 1
    return counts


def phrases_from_tokens(tokens: Iterable[str], stop_words: frozenset[str]) -> TokenSet:
    """Candidate set for pre-tokenized keywords.

    The n-grams of the joined single-word tokens come first, followed by any
    supplied token (e.g. a parser-built bigram) not already covered.
    """
    tokens = [t for t in tokens if t and t not in stop_words]
    singles = [t for t in tokens if " " not in t]
    joined = build_ngrams(" ".join(singles), stop_words)
    return joined.union(tokens)


@dataclass(frozen=True)
class PreparedText:
    """Per-call view of the page content, computed once and shared.

    Attributes:
        content: Original text as supplied.
        lower: Lowercased content.
        sentences: Sentence fragments in original case.
        sentences_lower: The same fragments lowercased.
        words: Lowercased whitespace tokens with edge punctuation removed.
    """

    content: str
    lower: str
    sentences: tuple[str, ...]
    sentences_lower: tuple[str, ...]
    words: tuple[str, ...]

    @classmethod
    def from_content(cls, content: str) -> "PreparedText":
        content = content or ""
        sentences = tuple(split_sentences(content))
        words = tuple(
            w for w in (strip_edge_punctuation(raw) for raw in content.lower().split()) if w
        )
        return cls(
            content=content,
            lower=content.lower(),
            sentences=sentences,
            sentences_lower=tuple(s.lower() for s in sentences),
            words=words,
        )
