"""Query fan-out: related queries, content gaps, expansion ideas and topic clusters."""

import logging
from typing import Optional

from src.models.page import PageSignals
from src.models.semantic import CoreTopic, EntityBundle, QueryFanOut, SemanticCluster
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import PreparedText, strip_edge_punctuation
from src.utils.text_processing import count_occurrences

logger = logging.getLogger(__name__)


def _dedupe(items, limit: Optional[int] = None) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        if item:
            seen.setdefault(item, None)
    result = list(seen)
    return result[:limit] if limit is not None else result


class QueryFanOutAnalyzer:
    """Fan a page's core topic out into queries, gaps and clusters.

    Cluster strength is the observed frequency of the cluster topic plus its
    related keywords in the body text, so identical input always yields
    identical clusters.

    Usage::

        analyzer = QueryFanOutAnalyzer()
        fan_out = analyzer.analyze(core_topic, signals, prepared, entities)
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        self._cfg = self._tables.fan_out

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(
        self,
        core_topic: CoreTopic,
        signals: PageSignals,
        text: PreparedText,
        entities: EntityBundle,
    ) -> QueryFanOut:
        """Build the full fan-out record for one page."""
        primary_topics = [core_topic.topic] + self.related_topics(core_topic.topic, text)
        primary_topics = _dedupe(primary_topics)
        fan_out = QueryFanOut(
            primary_topics=tuple(primary_topics),
            related_queries=tuple(self.related_queries(primary_topics)),
            content_gaps=tuple(self.content_gaps(signals.heading_texts)),
            expansion_opportunities=tuple(self.expansion_opportunities(entities)),
            semantic_clusters=tuple(
                self.semantic_clusters(primary_topics, signals.all_keywords(), text)
            ),
        )
        logger.debug(
            "Fan-out: %d topics, %d queries, %d gaps, %d clusters",
            len(fan_out.primary_topics), len(fan_out.related_queries),
            len(fan_out.content_gaps), len(fan_out.semantic_clusters),
        )
        return fan_out

    def related_topics(self, topic: str, text: PreparedText) -> list[str]:
        """Words that co-occur with *topic*, first few per sentence."""
        min_length = int(self._cfg["related_topic_min_length"])
        per_sentence = int(self._cfg["words_per_sentence"])
        limit = int(self._cfg["related_topic_limit"])
        topic_tokens = set(topic.split())

        related: list[str] = []
        for sentence in text.sentences_lower:
            if topic not in sentence:
                continue
            words = [
                w for w in (strip_edge_punctuation(raw) for raw in sentence.split())
                if len(w) > min_length
                and not self._tables.is_stop_word(w)
                and w not in topic_tokens
            ]
            related.extend(words[:per_sentence])
        return _dedupe(related, limit)

    def related_queries(self, topics: list[str]) -> list[str]:
        """Templated search queries for each topic."""
        templates = self._cfg["query_templates"]
        queries = (template.format(topic) for topic in topics for template in templates)
        return _dedupe(queries, int(self._cfg["query_limit"]))

    def content_gaps(self, heading_texts: tuple[str, ...]) -> list[str]:
        """Checklist sections that no heading covers yet."""
        headings_lower = [h.lower() for h in heading_texts]
        return [
            gap for gap in self._cfg["content_gaps"]
            if not any(gap in heading for heading in headings_lower)
        ]

    def expansion_opportunities(self, entities: EntityBundle) -> list[str]:
        """Entity-driven content ideas, e.g. "<person> biography"."""
        ideas: list[str] = []
        for category, templates in self._cfg["expansion_templates"].items():
            for entity in getattr(entities, category, ()):
                ideas.extend(template.format(entity) for template in templates)
        return _dedupe(ideas, int(self._cfg["expansion_limit"]))

    def semantic_clusters(
        self,
        topics: list[str],
        keywords: list[str],
        text: PreparedText,
    ) -> list[SemanticCluster]:
        """Group overlapping keywords under each topic, strongest first.

        Strength = occurrences of the topic + occurrences of every related
        keyword in the body text.
        """
        keyword_limit = int(self._cfg["cluster_keyword_limit"])
        clusters: list[SemanticCluster] = []
        for topic in topics:
            related = [
                kw for kw in keywords
                if kw != topic and (kw in topic or topic in kw)
            ][:keyword_limit]
            strength = count_occurrences(text.content, topic) + sum(
                count_occurrences(text.content, kw) for kw in related
            )
            clusters.append(SemanticCluster(
                topic=topic,
                related_keywords=tuple(related),
                strength=strength,
            ))
        clusters.sort(key=lambda c: c.strength, reverse=True)
        return clusters[: int(self._cfg["cluster_limit"])]
