"""Primary / secondary keyword inference over page signals and semantic analysis."""

import logging
import re
from typing import Optional

from src.models.keyword import InferredKeywords, KeywordCandidate, KeywordClassAnalysis
from src.models.page import PageSignals
from src.models.semantic import SemanticAnalysis
from src.modules.keyword_inference.candidates import (
    CandidateContext,
    generate_primary_candidates,
    is_acceptable_secondary,
)
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import (
    PreparedText,
    TokenSet,
    build_ngrams,
    normalize_text,
    phrases_from_tokens,
)
from src.utils.text_processing import count_occurrences, similarity_ratio

logger = logging.getLogger(__name__)

NO_PRIMARY_REASONING = (
    "No primary keywords identified. The page lacks clear keyword signals in "
    "critical locations (URL, title, H1)."
)
NO_SECONDARY_REASONING = (
    "No secondary keywords identified. The page lacks supporting keyword signals "
    "in subheadings and meta elements."
)
_CONTENT_FIRST = (
    "This analysis prioritizes content optimization over search volume data, "
    "identifying semantically relevant terms that support your page's topical authority "
    "and help search engines understand your content's comprehensive coverage of the "
    "subject matter."
)
_CONTEXT_SENTENCE_LIMIT = 3


class _Locations:
    """Phrase sets for each structural location of one page."""

    def __init__(self, signals: PageSignals, tables: HeuristicTables) -> None:
        stop_words = tables.stop_words
        self.url = phrases_from_tokens(signals.url_keywords, stop_words)
        self.title = build_ngrams(signals.title_text, stop_words)
        h1 = signals.h1
        self.h1 = (
            build_ngrams(h1.text, stop_words).union(h1.keywords)
            if h1 is not None else TokenSet()
        )
        self.subheadings = TokenSet()
        for heading in signals.subheadings:
            self.subheadings = self.subheadings.union(heading.keywords)
            self.subheadings = self.subheadings.union(build_ngrams(heading.text, stop_words))
        self.meta_description = phrases_from_tokens(signals.meta_keywords, stop_words)
        self.alt_texts = TokenSet()
        for alt in signals.image_alt_texts:
            self.alt_texts = self.alt_texts.union(
                alt.keywords or build_ngrams(alt.text, stop_words)
            )
        self.meta_tags = TokenSet(signals.meta_tag_keywords)

    def in_primary_locations(self, term: str) -> bool:
        return term in self.url or term in self.title or term in self.h1


class KeywordInferenceEngine:
    """Infer the primary and secondary keywords a page is targeting.

    Primary candidates are multi-word phrases scored on the strength of the
    structural locations (URL, title, H1) that contain them; secondary
    candidates are scored on supporting locations (subheadings, meta
    description, image alt text).  All weights come from the ``keywords``
    section of the heuristic tables.

    Usage::

        engine = KeywordInferenceEngine()
        keywords = engine.infer(signals, analysis)
        keywords.primary.keywords[0].term
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self.tables = tables or default_tables()
        self._cfg = self.tables.keywords

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def infer(self, signals: PageSignals, analysis: SemanticAnalysis) -> InferredKeywords:
        """Score and rank keyword candidates for one page.

        Args:
            signals: Normalised page signals.
            analysis: The semantic analysis of the same page.

        Returns:
            An :class:`InferredKeywords` record with both classes.
        """
        text = PreparedText.from_content(signals.content)
        ctx = CandidateContext(signals=signals, analysis=analysis, text=text, tables=self.tables)
        locations = _Locations(signals, self.tables)

        primary = self.infer_primary(ctx, locations)
        primary_terms = [kw.term for kw in primary.keywords]
        secondary = self.infer_secondary(ctx, locations, primary_terms)
        logger.info(
            "Keyword inference complete: %d primary, %d secondary (top=%r)",
            len(primary.keywords), len(secondary.keywords),
            primary_terms[0] if primary_terms else None,
        )
        return InferredKeywords(primary=primary, secondary=secondary)

    def infer_primary(self, ctx: CandidateContext, locations: _Locations) -> KeywordClassAnalysis:
        candidates = generate_primary_candidates(ctx)
        scored = [self.score_primary(term, ctx, locations) for term in candidates]
        scored.sort(key=lambda kw: kw.confidence_score, reverse=True)
        keywords = tuple(scored[: int(self._cfg["primary_limit"])])
        return KeywordClassAnalysis(
            confidence_score=self._aggregate(keywords, bonus_above=1),
            keywords=keywords,
            reasoning_summary=self._primary_reasoning(keywords),
        )

    def infer_secondary(
        self,
        ctx: CandidateContext,
        locations: _Locations,
        primary_terms: list[str],
    ) -> KeywordClassAnalysis:
        candidates = self.secondary_pool(ctx.signals, locations, primary_terms)
        scored = [
            self.score_secondary(term, ctx, locations, primary_terms) for term in candidates
        ]
        scored.sort(key=lambda kw: kw.confidence_score, reverse=True)
        keywords = tuple(scored[: int(self._cfg["secondary_limit"])])
        return KeywordClassAnalysis(
            confidence_score=self._aggregate(keywords, bonus_above=5),
            keywords=keywords,
            reasoning_summary=self._secondary_reasoning(keywords),
        )

    def score_primary(
        self,
        term: str,
        ctx: CandidateContext,
        locations: _Locations,
    ) -> KeywordCandidate:
        """Sum the primary signal weights that apply to *term*."""
        weights = self._cfg["primary_weights"]
        sources: list[str] = []
        score = 0.0
        multi_word = len(term.split()) > 1

        if multi_word:
            sources.append("semantic_analysis")
            score += weights["semantic_analysis"]
            if term == ctx.analysis.core_topic.topic:
                sources.append("core_topic_analysis")
                score += weights["core_topic_analysis"]
        if term in locations.url:
            sources.append("url_slug")
            score += weights["url_slug"]
        if term in locations.title:
            sources.append("title_tag")
            score += weights["title_tag"]
        if term in locations.h1:
            sources.append("h1_heading")
            score += weights["h1_heading"]
        if self._has_semantic_context(term, ctx.structural_texts):
            sources.append("semantic_context")
            score += weights["semantic_context"]
        if 5 <= len(term) <= 30:
            score += weights["length"]
        if len(sources) > 1:
            score += weights["multi_source"]

        return KeywordCandidate(
            term=term,
            extracted_from=tuple(sources),
            confidence_score=_clamp(score),
            context_sentences=self.context_sentences(term, ctx),
        )

    def secondary_pool(
        self,
        signals: PageSignals,
        locations: _Locations,
        primary_terms: list[str],
    ) -> list[str]:
        """Ordered, acceptable secondary candidates that are not primary terms."""
        pool: list[str] = []
        for heading in signals.subheadings:
            pool.extend(heading.keywords)
        pool.extend(signals.meta_keywords)
        pool.extend(locations.alt_texts)
        pool.extend(
            kw for kw in signals.meta_tag_keywords if not locations.in_primary_locations(kw)
        )
        excluded = set(primary_terms)
        seen: dict[str, None] = {}
        for raw in pool:
            term = normalize_text(raw)
            if term and term not in excluded and is_acceptable_secondary(term, self.tables):
                seen.setdefault(term, None)
        return list(seen)

    def score_secondary(
        self,
        term: str,
        ctx: CandidateContext,
        locations: _Locations,
        primary_terms: list[str],
    ) -> KeywordCandidate:
        """Sum the secondary signal weights that apply to *term*."""
        weights = self._cfg["secondary_weights"]
        threshold = float(self._cfg["similarity_threshold"])
        sources: list[str] = []
        score = 0.0

        checks = (
            ("subheadings", term in locations.subheadings),
            ("meta_description", term in locations.meta_description),
            ("image_alt_texts", term in locations.alt_texts),
            ("meta_keywords", term in locations.meta_tags),
            ("content_body", count_occurrences(ctx.text.content, term) > 2),
            ("primary_variant", any(
                similarity_ratio(term, primary) > threshold for primary in primary_terms
            )),
        )
        for name, matched in checks:
            if matched:
                sources.append(name)
                score += weights[name]

        return KeywordCandidate(
            term=term,
            extracted_from=tuple(sources),
            confidence_score=_clamp(score),
            context_sentences=self.context_sentences(term, ctx),
        )

    def context_sentences(self, term: str, ctx: CandidateContext) -> tuple[str, ...]:
        """Up to three content sentences containing *term*, then heading texts."""
        found: list[str] = []
        for sentence, lower in zip(ctx.text.sentences, ctx.text.sentences_lower):
            if term in lower:
                found.append(sentence)
                if len(found) == _CONTEXT_SENTENCE_LIMIT:
                    return tuple(found)
        for heading in ctx.signals.heading_texts:
            if term in heading.lower() and heading not in found:
                found.append(heading)
                if len(found) == _CONTEXT_SENTENCE_LIMIT:
                    break
        return tuple(found)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _has_semantic_context(term: str, texts: tuple[str, ...]) -> bool:
        kw = re.escape(term)
        patterns = (
            r"\b" + kw + r"\s+(?:tips|guide|strategies|techniques|advice)\b",
            r"\b(?:how to|guide to|best)\s+" + kw + r"\b",
            r"\b" + kw + r"\s+(?:for|that|which)\s+",
        )
        return any(re.search(p, text) for text in texts for p in patterns)

    @staticmethod
    def _aggregate(keywords: tuple[KeywordCandidate, ...], bonus_above: int) -> float:
        if not keywords:
            return 0.0
        score = sum(kw.confidence_score for kw in keywords) / len(keywords)
        if len(keywords) > bonus_above:
            score += 0.1
        return _clamp(score)

    @staticmethod
    def _primary_reasoning(keywords: tuple[KeywordCandidate, ...]) -> str:
        if not keywords:
            return NO_PRIMARY_REASONING
        top = keywords[0]
        parts = [
            f'Primary keyword "{top.term}" identified with '
            f"{round(top.confidence_score * 100)}% confidence.",
            f"Found in: {', '.join(top.extracted_from)}.",
        ]
        if "url_slug" in top.extracted_from:
            parts.append("Strong signal from URL slug.")
        if "title_tag" in top.extracted_from:
            parts.append("Reinforced by title tag.")
        if "h1_heading" in top.extracted_from:
            parts.append("Confirmed by H1 heading.")
        if top.is_multi_word:
            parts.append(
                "This multi-word phrase aligns with modern semantic SEO practices, where "
                "Google prioritizes contextual understanding over exact keyword matching."
            )
        if {"semantic_analysis", "semantic_context"} & set(top.extracted_from):
            parts.append(
                "The semantic analysis approach identifies content-relevant terms that may "
                "have lower search volume but higher topical relevance and user intent alignment."
            )
        parts.append(
            "This content-first methodology focuses on optimizing for what your page "
            "actually covers rather than chasing high-volume, competitive keywords."
        )
        if len(keywords) > 1:
            others = ", ".join(kw.term for kw in keywords[1:])
            parts.append(f"Additional primary keywords: {others}.")
        return " ".join(parts)

    @staticmethod
    def _secondary_reasoning(keywords: tuple[KeywordCandidate, ...]) -> str:
        if not keywords:
            return NO_SECONDARY_REASONING
        top = ", ".join(kw.term for kw in keywords[:3])
        return " ".join((
            f"Identified {len(keywords)} secondary keywords. Top candidates: {top}.",
            "These keywords appear in subheadings, meta descriptions, image alt texts, "
            "and content body.",
            "They provide semantic support and long-tail opportunities for the primary "
            "keywords.",
            _CONTENT_FIRST,
        ))


def _clamp(score: float) -> float:
    return round(min(1.0, max(0.0, score)), 4)
