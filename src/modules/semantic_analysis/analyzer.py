"""Semantic analysis orchestrator: runs every analyzer over one page."""

import logging
from typing import Optional

from src.models.page import PageSignals
from src.models.semantic import SemanticAnalysis
from src.modules.semantic_analysis.content_signals import ContentSignalAnalyzer
from src.modules.semantic_analysis.core_topic import CoreTopicIdentifier
from src.modules.semantic_analysis.eeat import EEATScorer
from src.modules.semantic_analysis.entity_extractor import EntityExtractor
from src.modules.semantic_analysis.fan_out import QueryFanOutAnalyzer
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.relationships import SemanticRelationshipMapper
from src.modules.semantic_analysis.term_frequency import TermFrequencyAnalyzer
from src.modules.semantic_analysis.tokenizer import PreparedText
from src.utils.text_processing import count_words

logger = logging.getLogger(__name__)


class SemanticAnalyzer:
    """Deterministic, rule-based semantic analysis of one page.

    Holds only immutable heuristic tables, so an instance may be reused for
    any number of pages.  Each :meth:`analyze` call is a pure function of its
    input.

    Usage::

        analyzer = SemanticAnalyzer()
        analysis = analyzer.analyze(PageSignals.from_dict(payload))
        analysis.core_topic.topic
        analysis.to_dict()
    """

    def __init__(
        self,
        tables: Optional[HeuristicTables] = None,
        top_terms: Optional[int] = None,
    ) -> None:
        self.tables = tables or default_tables()
        self.entity_extractor = EntityExtractor(self.tables)
        self.term_frequency = TermFrequencyAnalyzer(self.tables, top_n=top_terms)
        self.core_topic = CoreTopicIdentifier(self.tables)
        self.relationships = SemanticRelationshipMapper(self.tables)
        self.eeat = EEATScorer(self.tables)
        self.fan_out = QueryFanOutAnalyzer(self.tables)
        self.content_signals = ContentSignalAnalyzer(self.tables)

    def analyze(self, signals: PageSignals) -> SemanticAnalysis:
        """Run the full pipeline.

        Args:
            signals: Normalised page signals.

        Returns:
            A :class:`SemanticAnalysis` record.
        """
        text = PreparedText.from_content(signals.content)

        entities = self.entity_extractor.extract(text)
        frequent_terms = self.term_frequency.analyze(text, signals.heading_texts)
        core_topic = self.core_topic.identify(signals, text, entities)

        relationships = self.relationships.map(signals, text)
        eeat = self.eeat.score(text.lower)
        fan_out = self.fan_out.analyze(core_topic, signals, text, entities)

        readability = self.content_signals.readability(text)
        quality = self.content_signals.content_quality(
            text,
            heading_count=len(signals.headings),
            entities=entities,
            readability=readability,
        )
        authority = self.content_signals.topical_authority(
            related_topic_count=max(len(fan_out.primary_topics) - 1, 0),
            entity_count=entities.total,
            relationship_count=len(relationships),
        )

        analysis = SemanticAnalysis(
            core_topic=core_topic,
            entity_extraction=entities,
            semantic_relationships=tuple(relationships),
            top_frequent_terms=tuple(frequent_terms),
            readability_score=readability,
            content_topics=tuple(self.content_signals.content_topics(text)),
            eeat_score=eeat,
            query_fan_out=fan_out,
            content_quality_score=quality,
            topical_authority_score=authority,
            user_intent_signals=self.content_signals.user_intent(text),
            heuristics_version=self.tables.version,
            word_count=count_words(text.content),
            sentence_count=len(text.sentences),
        )
        logger.info(
            "Semantic analysis complete: topic=%r words=%d entities=%d eeat=%.2f",
            core_topic.topic, analysis.word_count, entities.total, eeat.overall,
        )
        return analysis
