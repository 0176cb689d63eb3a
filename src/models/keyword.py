"""Keyword candidate records produced by the keyword inference engine."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KeywordCandidate:
    """A scored keyword or phrase.

    ``confidence_score`` is the sum of the weights of the signals listed in
    ``extracted_from``, clamped to 1.  Primary candidates may also carry an
    unnamed length bonus (5 to 30 characters) and a multi-source bonus (more
    than one named signal), so their score can exceed the named weights.
    """

    term: str
    extracted_from: tuple[str, ...]
    confidence_score: float
    context_sentences: tuple[str, ...] = ()

    @property
    def is_multi_word(self) -> bool:
        return len(self.term.split()) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "term": self.term,
            "extracted_from": list(self.extracted_from),
            "confidence_score": self.confidence_score,
            "context_sentences": list(self.context_sentences),
        }


@dataclass(frozen=True)
class KeywordClassAnalysis:
    """Top candidates of one class (primary or secondary) plus a summary."""

    confidence_score: float
    keywords: tuple[KeywordCandidate, ...]
    reasoning_summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "confidence_score": self.confidence_score,
            "keywords": [kw.to_dict() for kw in self.keywords],
            "reasoning_summary": self.reasoning_summary,
        }


@dataclass(frozen=True)
class InferredKeywords:
    primary: KeywordClassAnalysis
    secondary: KeywordClassAnalysis

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary.to_dict(),
            "secondary": self.secondary.to_dict(),
        }
