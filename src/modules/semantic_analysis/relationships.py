"""Semantic relationship mapping between candidate keywords and page sentences."""

import logging
from typing import Optional

from src.models.page import PageSignals
from src.models.semantic import SemanticRelationship
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import PreparedText

logger = logging.getLogger(__name__)


class SemanticRelationshipMapper:
    """Relate URL, meta and heading keywords to the body text.

    Usage::

        mapper = SemanticRelationshipMapper()
        relationships = mapper.map(signals, prepared)
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        cfg = self._tables.relationships
        self._context_limit = int(cfg["context_limit"])
        self._context_min_length = int(cfg["context_min_length"])
        self._synonyms = {
            key: frozenset(values) for key, values in cfg["synonyms"].items()
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def map(self, signals: PageSignals, text: PreparedText) -> list[SemanticRelationship]:
        """Build one relationship per candidate keyword.

        Args:
            signals: Page signals supplying URL, meta and heading keywords.
            text: Prepared body content.

        Returns:
            Relationships sorted by descending co-occurrence score; ties keep
            keyword order (URL, then meta, then headings).
        """
        keywords = signals.all_keywords()
        url_keywords = set(signals.url_keywords)
        meta_keywords = set(signals.meta_keywords)

        relationships = [
            SemanticRelationship(
                term=keyword,
                related_to_primary_keyword=keyword in url_keywords or keyword in meta_keywords,
                relationship_type=self.relationship_type(keyword, url_keywords, meta_keywords),
                context_sentences=tuple(self.context_sentences(keyword, text)),
                co_occurrence_score=self.co_occurrence_score(keyword, keywords, text),
            )
            for keyword in keywords
        ]
        relationships.sort(key=lambda r: r.co_occurrence_score, reverse=True)
        logger.debug("Mapped %d semantic relationships", len(relationships))
        return relationships

    @staticmethod
    def co_occurrence_score(keyword: str, keywords: list[str], text: PreparedText) -> float:
        """Fraction of sentences holding *keyword* plus at least one other keyword."""
        total = len(text.sentences_lower)
        if total == 0:
            return 0.0
        others = [k for k in keywords if k != keyword]
        hits = sum(
            1 for sentence in text.sentences_lower
            if keyword in sentence and any(other in sentence for other in others)
        )
        return hits / total

    def context_sentences(self, keyword: str, text: PreparedText) -> list[str]:
        """Up to three sentences mentioning *keyword*, in original case."""
        found: list[str] = []
        for original, lower in zip(text.sentences, text.sentences_lower):
            if keyword in lower and len(original.strip()) > self._context_min_length:
                found.append(original.strip())
                if len(found) >= self._context_limit:
                    break
        return found

    def relationship_type(
        self,
        keyword: str,
        url_keywords: set[str],
        meta_keywords: set[str],
    ) -> str:
        if keyword in url_keywords:
            return "related_topic"
        if keyword in meta_keywords:
            return "attribute"
        if self.is_synonym(keyword):
            return "synonym"
        return "related_topic"

    def is_synonym(self, keyword: str) -> bool:
        """True if *keyword* is a key or a member of the synonym map."""
        keyword = keyword.lower()
        if keyword in self._synonyms:
            return True
        return any(keyword in values for values in self._synonyms.values())
