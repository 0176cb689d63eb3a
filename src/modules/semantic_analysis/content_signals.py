"""Content-level signals: readability, topics, quality, topical authority and intent."""

import logging
import re
from typing import Optional

from src.models.semantic import EntityBundle, UserIntentSignals
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import PreparedText
from src.utils.text_processing import calculate_readability, count_words, semantic_density

logger = logging.getLogger(__name__)

_INTENT_NAMES = ("informational", "navigational", "transactional", "commercial")


class ContentSignalAnalyzer:
    """Page-level scores that sit beside the keyword pipeline.

    Usage::

        signals = ContentSignalAnalyzer()
        readability = signals.readability(prepared)
        quality = signals.content_quality(prepared, heading_count=4,
                                          entities=bundle, readability=readability)
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        self._cfg = self._tables.content_signals

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def readability(self, text: PreparedText) -> float:
        """Flesch Reading Ease, 0 for empty content."""
        return calculate_readability(text.content)

    def content_topics(self, text: PreparedText) -> list[str]:
        """Phrases introduced by topic indicators ("about ...", "regarding ...")."""
        limit = int(self._cfg["topic_limit"])
        topics: dict[str, None] = {}
        for sentence in text.sentences_lower:
            for indicator in self._cfg["topic_indicators"]:
                match = re.search(r"\b" + re.escape(indicator) + r"\b\s+(.+)", sentence)
                if not match:
                    continue
                topic = match.group(1).strip()
                if 5 < len(topic) < 100:
                    topics.setdefault(topic, None)
        return list(topics)[:limit]

    @staticmethod
    def content_quality(
        text: PreparedText,
        heading_count: int,
        entities: EntityBundle,
        readability: float,
    ) -> int:
        """Weighted 0-100 quality score.

        Readability 40%, depth 20%, structure 15%, entity richness 15% and
        semantic density 10%.
        """
        word_count = count_words(text.content)
        score = readability * 0.4
        score += min(20.0, word_count / 100 * 2)
        score += min(15.0, heading_count * 3)
        score += min(15.0, entities.total * 2)
        score += min(10.0, semantic_density(text.content))
        return int(round(min(100.0, score)))

    @staticmethod
    def topical_authority(
        related_topic_count: int,
        entity_count: int,
        relationship_count: int,
    ) -> int:
        """Coverage-based authority score in [0, 100]."""
        topic_score = min(40, related_topic_count * 4)
        entity_score = min(30, entity_count * 3)
        depth_score = min(30, relationship_count * 2)
        return int(round(topic_score + entity_score + depth_score))

    def user_intent(self, text: PreparedText) -> UserIntentSignals:
        """Score the four search intents from indicator vocabulary."""
        scores = {
            name: self._intent_score(text.lower, self._cfg["intent"][name])
            for name in _INTENT_NAMES
        }
        return UserIntentSignals(**scores)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _intent_score(content_lower: str, indicators) -> int:
        if not content_lower or not indicators:
            return 0
        matches = sum(1 for ind in indicators if ind in content_lower)
        occurrences = sum(content_lower.count(ind) for ind in indicators)
        score = matches / len(indicators) * 100 + occurrences * 2
        return int(round(min(100.0, score)))
