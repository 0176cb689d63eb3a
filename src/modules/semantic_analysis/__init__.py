"""Semantic Analysis engine: entities, term salience, core topic, E-E-A-T and query fan-out."""

from src.modules.semantic_analysis.analyzer import SemanticAnalyzer
from src.modules.semantic_analysis.content_signals import ContentSignalAnalyzer
from src.modules.semantic_analysis.core_topic import CoreTopicIdentifier
from src.modules.semantic_analysis.eeat import EEATScorer
from src.modules.semantic_analysis.entity_extractor import EntityExtractor
from src.modules.semantic_analysis.fan_out import QueryFanOutAnalyzer
from src.modules.semantic_analysis.heuristics import (
    HeuristicTables,
    default_tables,
    load_heuristics,
)
from src.modules.semantic_analysis.relationships import SemanticRelationshipMapper
from src.modules.semantic_analysis.term_frequency import TermFrequencyAnalyzer

__all__ = [
    "SemanticAnalyzer",
    "ContentSignalAnalyzer",
    "CoreTopicIdentifier",
    "EEATScorer",
    "EntityExtractor",
    "QueryFanOutAnalyzer",
    "HeuristicTables",
    "default_tables",
    "load_heuristics",
    "SemanticRelationshipMapper",
    "TermFrequencyAnalyzer",
]
