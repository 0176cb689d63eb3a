"""Immutable input and result records for the semantic engine."""

from src.models.page import (
    HeadingSignal,
    ImageAltText,
    PageSignals,
)
from src.models.semantic import (
    ENTITY_CATEGORIES,
    RELATIONSHIP_TYPES,
    CoreTopic,
    EEATScore,
    EntityBundle,
    FrequentTerm,
    QueryFanOut,
    SemanticAnalysis,
    SemanticCluster,
    SemanticRelationship,
    UserIntentSignals,
)
from src.models.keyword import (
    InferredKeywords,
    KeywordCandidate,
    KeywordClassAnalysis,
)

__all__ = [
    "HeadingSignal",
    "ImageAltText",
    "PageSignals",
    "ENTITY_CATEGORIES",
    "RELATIONSHIP_TYPES",
    "CoreTopic",
    "EEATScore",
    "EntityBundle",
    "FrequentTerm",
    "QueryFanOut",
    "SemanticAnalysis",
    "SemanticCluster",
    "SemanticRelationship",
    "UserIntentSignals",
    "InferredKeywords",
    "KeywordCandidate",
    "KeywordClassAnalysis",
]
