"""Primary keyword candidate generation.

Candidates come from an explicit, ordered tuple of generator functions.  The
structural fallback (single URL/title/H1 tokens) runs only when the main
generators produce fewer than ``fallback_trigger`` valid multi-word phrases,
and single words are used only when no multi-word phrase survives at all.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from src.models.page import PageSignals
from src.models.semantic import SemanticAnalysis
from src.modules.semantic_analysis.core_topic import DEFAULT_TOPIC
from src.modules.semantic_analysis.heuristics import HeuristicTables
from src.modules.semantic_analysis.tokenizer import (
    PreparedText,
    build_ngrams,
    normalize_text,
    phrases_from_tokens,
)

logger = logging.getLogger(__name__)

# One to four whole words following (or preceding) a marker.
_PHRASE = r"([a-z0-9][\w-]*(?:\s+[a-z0-9][\w-]*){0,3})"
_TWO_WORDS = r"([a-z0-9][\w-]*\s+[a-z0-9][\w-]*)"

_STRUCTURAL_TOPIC_PATTERNS = tuple(re.compile(p) for p in (
    r"\bhow to\s+" + _PHRASE,
    r"\bguide to\s+" + _PHRASE,
    r"\bwhat is\s+" + _PHRASE,
    r"\bbest\s+" + _PHRASE,
    _PHRASE + r"\s+(?:tips|guide|strategies|techniques)\b",
))

_SUBTOPIC_PATTERNS = tuple(re.compile(p) for p in (
    r"\btips for\s+" + _TWO_WORDS,
    r"\bguide to\s+" + _TWO_WORDS,
    r"\bhow to\s+" + _TWO_WORDS,
    r"\bbest\s+" + _TWO_WORDS,
    _TWO_WORDS + r"\s+strategies\b",
    _TWO_WORDS + r"\s+techniques\b",
))

_SEMANTIC_TOPIC_MARKERS = (
    "how to", "guide to", "tutorial on", "learn about", "what is",
    "definition of", "explanation of", "process of", "method for",
    "approach to", "comparison between", "analysis of", "review of",
)
_SEMANTIC_TOPIC_PATTERNS = tuple(
    re.compile(r"\b" + re.escape(marker) + r"\s+" + _PHRASE)
    for marker in _SEMANTIC_TOPIC_MARKERS
)

_CONTEXTUAL_PATTERN = re.compile(
    r"([a-z0-9][\w-]*\s+[a-z0-9][\w-]*\s+[a-z0-9][\w-]*)\s+"
    r"(?:that help|for beginners|best practices|step by step|complete guide|proven methods)\b"
)

_INTENT_MARKERS = (
    "best", "top", "list of", "buy", "purchase", "price of", "official",
    "website for", "download", "sign up for", "register for",
)
_INTENT_PATTERNS = tuple(
    re.compile(r"\b" + re.escape(marker) + r"\s+" + _PHRASE)
    for marker in _INTENT_MARKERS
)

_SEMANTIC_ENTITY_PATTERN = re.compile(
    r"((?:[a-z0-9][\w-]*\s+){1,3}"
    r"(?:method|approach|technique|strategy|framework|process|workflow|"
    r"software|application|platform|system|tool|service|solution|product|technology)s?)\b"
)

_ENTITY_SUFFIX = re.compile(
    r"(inc|corp|llc|ltd|company|organization|group|university|college|school|"
    r"institute|center|software|platform|system|tool|application|city|state|"
    r"country|region|doctor|professor|expert|specialist)$"
)


@dataclass(frozen=True)
class CandidateContext:
    """Everything a candidate generator may look at for one page."""

    signals: PageSignals
    analysis: SemanticAnalysis
    text: PreparedText
    tables: HeuristicTables

    @property
    def structural_texts(self) -> tuple[str, ...]:
        """Lowercased title plus heading texts, title first."""
        texts = []
        if self.signals.title:
            texts.append(self.signals.title.lower())
        texts.extend(h.lower() for h in self.signals.heading_texts)
        return tuple(texts)

    def trim(self, phrase: str) -> str:
        """Normalise and strip leading/trailing stop words and connectors."""
        connectors = self.tables.keywords["connectors"]
        tokens = normalize_text(phrase).split()
        while tokens and (self.tables.is_stop_word(tokens[0]) or tokens[0] in connectors):
            tokens.pop(0)
        while tokens and (self.tables.is_stop_word(tokens[-1]) or tokens[-1] in connectors):
            tokens.pop()
        return " ".join(tokens)


Generator = Callable[[CandidateContext], list[str]]


# ------------------------------------------------------------------
# Generators
# ------------------------------------------------------------------

def core_topic_terms(ctx: CandidateContext) -> list[str]:
    """Core topic, the first heading's structural topic and heading subtopics."""
    terms: list[str] = []
    topic = ctx.analysis.core_topic.topic
    if topic and topic != DEFAULT_TOPIC:
        terms.append(topic)
    first = ctx.signals.first_heading
    if first is not None:
        structural = structural_topic(first.text, ctx)
        if structural:
            terms.append(structural)
    subtopics: list[str] = []
    for text in ctx.structural_texts:
        for pattern in _SUBTOPIC_PATTERNS:
            for match in pattern.finditer(text):
                sub = ctx.trim(match.group(1))
                if 3 < len(sub) < 30:
                    subtopics.append(sub)
    return terms + _unique(subtopics)[:5]


def entity_keywords(ctx: CandidateContext) -> list[str]:
    """Multi-word entities plus heading/meta keywords with entity suffixes."""
    found = [
        " ".join(e.lower().split())
        for e in ctx.analysis.entity_extraction.all_entities()
        if len(e.split()) > 1
    ]
    pool = [kw for h in ctx.signals.headings for kw in h.keywords]
    pool.extend(ctx.signals.meta_keywords)
    found.extend(kw for kw in pool if _ENTITY_SUFFIX.search(kw))
    return _unique(found)


def semantic_topics(ctx: CandidateContext) -> list[str]:
    """Phrases introduced by "how to", "guide to", "what is" and similar markers."""
    topics: list[str] = []
    for text in ctx.structural_texts:
        for pattern in _SEMANTIC_TOPIC_PATTERNS:
            for match in pattern.finditer(text):
                topic = ctx.trim(match.group(1))
                if 3 < len(topic) < 50:
                    topics.append(topic)
    return _unique(topics)[:5]


def contextual_phrases(ctx: CandidateContext) -> list[str]:
    """Three-word phrases before outcome markers ("... for beginners")."""
    phrases: list[str] = []
    for text in ctx.structural_texts:
        for match in _CONTEXTUAL_PATTERN.finditer(text):
            phrase = ctx.trim(match.group(1))
            if 5 < len(phrase) < 40:
                phrases.append(phrase)
    return _unique(phrases)[:4]


def intent_phrases(ctx: CandidateContext) -> list[str]:
    """Objects of intent markers such as "best", "buy" or "download"."""
    phrases: list[str] = []
    for text in ctx.structural_texts:
        for pattern in _INTENT_PATTERNS:
            for match in pattern.finditer(text):
                phrase = ctx.trim(match.group(1))
                if 2 < len(phrase) < 30:
                    phrases.append(phrase)
    return _unique(phrases)[:5]


def semantic_entities(ctx: CandidateContext) -> list[str]:
    """Phrases ending in method/platform/tool style nouns."""
    entities: list[str] = []
    for text in ctx.structural_texts:
        for match in _SEMANTIC_ENTITY_PATTERN.finditer(text):
            entity = ctx.trim(match.group(1))
            if 5 < len(entity) < 60:
                entities.append(entity)
    return _unique(entities)[:5]


def structural_tokens(ctx: CandidateContext) -> list[str]:
    """Fallback: topically relevant URL, title and H1 tokens and phrases."""
    stop_words = ctx.tables.stop_words
    pool: list[str] = list(phrases_from_tokens(ctx.signals.url_keywords, stop_words))
    pool.extend(build_ngrams(ctx.signals.title_text, stop_words))
    h1 = ctx.signals.h1
    if h1 is not None:
        pool.extend(h1.keywords)
        pool.extend(build_ngrams(h1.text, stop_words))
    return [
        token for token in _unique(pool)
        if len(token) > 3 and not token.isdigit() and _is_topically_relevant(token, ctx)
    ]


PRIMARY_GENERATORS: tuple[tuple[str, Generator], ...] = (
    ("core_topic_terms", core_topic_terms),
    ("entity_keywords", entity_keywords),
    ("semantic_topics", semantic_topics),
    ("contextual_phrases", contextual_phrases),
    ("intent_phrases", intent_phrases),
    ("semantic_entities", semantic_entities),
)
FALLBACK_GENERATOR: tuple[str, Generator] = ("structural_tokens", structural_tokens)


# ------------------------------------------------------------------
# Filters and dispatch
# ------------------------------------------------------------------

def structural_topic(heading: str, ctx: CandidateContext) -> str:
    """Topic of a heading via marker patterns, else its first two meaningful words."""
    lower = heading.lower()
    for pattern in _STRUCTURAL_TOPIC_PATTERNS:
        match = pattern.search(lower)
        if match:
            topic = ctx.trim(match.group(1))
            if topic:
                return topic
    meaningful = [
        w for w in normalize_text(lower).split()
        if len(w) > 3 and not ctx.tables.is_stop_word(w)
    ]
    return " ".join(meaningful[:2])


def is_valid_primary_phrase(phrase: str, tables: HeuristicTables) -> bool:
    """Multi-word, not dominated by generic words, two or more content tokens."""
    cfg = tables.keywords
    blocklist = frozenset(cfg["generic_blocklist"])
    connectors = frozenset(cfg["connectors"])
    tokens = [t for t in phrase.lower().split() if len(t) > 1]
    if len(tokens) < 2:
        return False
    if any(t in blocklist for t in tokens):
        if not any(t not in blocklist and len(t) >= 4 for t in tokens):
            return False
    return sum(1 for t in tokens if t not in connectors) >= 2


def is_acceptable_secondary(keyword: str, tables: HeuristicTables) -> bool:
    """Phrases always pass; single words must be neither generic nor stop words."""
    tokens = keyword.split()
    if len(tokens) >= 2:
        return True
    if not tokens:
        return False
    word = tokens[0]
    return word not in tables.keywords["generic_singles"] and not tables.is_stop_word(word)


def needs_fallback(candidates: Iterable[str], trigger: int) -> bool:
    """True when fewer than *trigger* multi-word candidates exist."""
    multi_word = sum(1 for c in candidates if len(c.split()) > 1)
    return multi_word < trigger


def generate_primary_candidates(ctx: CandidateContext) -> list[str]:
    """Run the generators in order and apply validity and fallback rules.

    Returns:
        Valid multi-word candidates in first-seen order, or single-word
        fallback tokens when no multi-word candidate exists.
    """
    trigger = int(ctx.tables.keywords["fallback_trigger"])
    pool: list[str] = []
    for name, generator in PRIMARY_GENERATORS:
        produced = [normalize_text(c) for c in generator(ctx)]
        logger.debug("Generator %s produced %d candidate(s)", name, len(produced))
        pool.extend(produced)

    candidates = [c for c in _unique(pool) if is_valid_primary_phrase(c, ctx.tables)]
    if not needs_fallback(candidates, trigger):
        return candidates

    name, generator = FALLBACK_GENERATOR
    fallback = [normalize_text(c) for c in generator(ctx)]
    logger.debug("Fallback %s produced %d candidate(s)", name, len(fallback))
    seen = set(candidates)
    for token in fallback:
        if token not in seen and is_valid_primary_phrase(token, ctx.tables):
            candidates.append(token)
            seen.add(token)
    if candidates:
        return candidates
    return _unique(t for t in fallback if len(t.split()) == 1)


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------

def _unique(items: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        if item:
            seen.setdefault(item, None)
    return list(seen)


def _is_topically_relevant(token: str, ctx: CandidateContext) -> bool:
    """URL keyword, present in an h1-h3 heading, or sharing a sentence with the core topic."""
    if token in ctx.signals.url_keywords:
        return True
    for heading in ctx.signals.headings:
        if 1 <= heading.level <= 3 and token in heading.text.lower():
            return True
    topic = ctx.analysis.core_topic.topic
    if token == topic:
        return True
    return any(token in s and topic in s for s in ctx.text.sentences_lower)
