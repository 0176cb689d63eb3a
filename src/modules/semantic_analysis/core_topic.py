"""Core topic identification from fused URL, meta, heading, entity and frequency signals."""

import logging
from collections import Counter
from typing import Optional

from src.models.page import PageSignals
from src.models.semantic import CoreTopic, EntityBundle
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import (
    PreparedText,
    build_ngrams,
    count_ngrams,
    phrases_from_tokens,
    strip_edge_punctuation,
)

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "general content"
_MIN_CANDIDATE_LENGTH = 2


class CoreTopicIdentifier:
    """Pick the single best topic label for a page.

    Every candidate phrase accumulates fixed weights from the signal buckets
    it appears in (URL slug, meta keywords, first heading, extracted entities,
    repeated body phrases).  The winner's confidence is its score normalised
    against a full-strength signal, and the reasoning string names each
    bucket that contributed.

    Usage::

        identifier = CoreTopicIdentifier()
        topic = identifier.identify(signals, prepared, entities)
        print(topic.topic, topic.confidence_score, topic.reasoning)
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        self._cfg = self._tables.core_topic

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score_candidates(
        self,
        signals: PageSignals,
        text: PreparedText,
        entities: EntityBundle,
    ) -> dict[str, float]:
        """Return the weighted score of every candidate, in first-seen order."""
        cfg = self._cfg
        stop_words = self._tables.stop_words
        scores: dict[str, float] = {}

        def _add(phrase: str, weight: float) -> None:
            if len(phrase) > _MIN_CANDIDATE_LENGTH:
                scores[phrase] = scores.get(phrase, 0.0) + weight

        for phrase in phrases_from_tokens(signals.url_keywords, stop_words):
            _add(phrase, cfg["url_weight"])
        for phrase in phrases_from_tokens(signals.meta_keywords, stop_words):
            _add(phrase, cfg["meta_weight"])

        first = signals.first_heading
        if first is not None:
            for phrase in build_ngrams(first.text, stop_words):
                if len(phrase) > cfg["heading_min_length"]:
                    _add(phrase, cfg["heading_weight"])

        for entity in entities.all_entities():
            _add(" ".join(entity.lower().split()), cfg["entity_weight"])

        for phrase, freq in self._content_counts(text).items():
            if freq > cfg["frequency_threshold"]:
                _add(phrase, min(cfg["frequency_factor"] * freq, cfg["frequency_cap"]))

        return scores

    def identify(
        self,
        signals: PageSignals,
        text: PreparedText,
        entities: EntityBundle,
    ) -> CoreTopic:
        """Select the highest-scoring candidate (ties go to the first seen).

        Args:
            signals: Parsed page signals.
            text: Prepared body content.
            entities: Entities already extracted from the content.

        Returns:
            A :class:`CoreTopic` with confidence in [0, 1] and a reasoning
            trace naming each contributing signal bucket.
        """
        scores = self.score_candidates(signals, text, entities)
        if not scores:
            logger.info("No core topic signals found; falling back to %r", DEFAULT_TOPIC)
            return CoreTopic(
                topic=DEFAULT_TOPIC,
                confidence_score=0.0,
                reasoning=(
                    "No topic signals found in the URL slug, meta keywords, "
                    "headings, entities or body content."
                ),
            )

        best_topic, best_score = "", float("-inf")
        for phrase, score in scores.items():
            if score > best_score:
                best_topic, best_score = phrase, score

        confidence = max(0.0, min(best_score / self._cfg["normalizer"], 1.0))
        trace = self._trace(best_topic, signals, text, entities)
        reasoning = f'Main topic "{best_topic}" identified with score {best_score:g}.'
        if trace:
            reasoning += " Evidence: " + ", ".join(clause for _, clause in trace) + "."

        topic = CoreTopic(
            topic=best_topic,
            confidence_score=round(confidence, 4),
            reasoning=reasoning,
            co_occurring_terms=tuple(self.co_occurring_terms(best_topic, text)),
            score=round(best_score, 4),
            signals=tuple(name for name, _ in trace),
        )
        logger.info(
            "Core topic %r (score=%.2f, confidence=%.2f, candidates=%d)",
            topic.topic, best_score, topic.confidence_score, len(scores),
        )
        return topic

    def co_occurring_terms(self, topic: str, text: PreparedText) -> list[str]:
        """Words sharing a sentence with *topic* (longer than 3 chars, non-stop)."""
        limit = int(self._cfg["co_occurring_limit"])
        topic_tokens = set(topic.split())
        terms: dict[str, None] = {}
        for sentence in text.sentences_lower:
            if topic not in sentence:
                continue
            for raw in sentence.split():
                word = strip_edge_punctuation(raw)
                if (
                    len(word) > 3
                    and not self._tables.is_stop_word(word)
                    and word not in topic_tokens
                ):
                    terms.setdefault(word, None)
                    if len(terms) >= limit:
                        return list(terms)
        return list(terms)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _content_counts(self, text: PreparedText) -> Counter:
        return count_ngrams(text.content, self._tables.stop_words)

    def _trace(
        self,
        topic: str,
        signals: PageSignals,
        text: PreparedText,
        entities: EntityBundle,
    ) -> list[tuple[str, str]]:
        """Return ``(signal_name, clause)`` pairs explaining *topic*."""
        stop_words = self._tables.stop_words
        trace: list[tuple[str, str]] = []
        if topic in phrases_from_tokens(signals.url_keywords, stop_words):
            trace.append(("url_slug", "found in URL slug"))
        if topic in phrases_from_tokens(signals.meta_keywords, stop_words):
            trace.append(("meta_keywords", "found in meta keywords"))
        if any(topic in h.lower() for h in signals.heading_texts):
            trace.append(("headings", "found in headings"))
        categories = entities.categories_for(topic)
        if categories:
            trace.append(("entity", "identified as entity type: " + ", ".join(categories)))
        freq = self._content_counts(text).get(topic, 0)
        if freq > self._cfg["frequency_threshold"]:
            trace.append(("content_frequency", f"appears {freq} times in body content"))
        return trace
