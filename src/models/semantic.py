"""Result records produced by the semantic analysis engine.

Every record is a frozen dataclass; ``to_dict()`` returns only JSON-native
types so a record can be embedded verbatim in a larger payload.
"""

from dataclasses import asdict, dataclass
from typing import Any

RELATIONSHIP_TYPES = ("synonym", "related_topic", "attribute", "competitor", "brand")
ENTITY_CATEGORIES = ("people", "organizations", "locations", "products", "technologies")


def _plain(value: Any) -> Any:
    """Convert tuples produced by :func:`asdict` into lists, recursively."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class EntityBundle:
    """Heuristically extracted named things, one de-duplicated tuple per category."""

    people: tuple[str, ...] = ()
    organizations: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    products: tuple[str, ...] = ()
    technologies: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return sum(len(getattr(self, cat)) for cat in ENTITY_CATEGORIES)

    def all_entities(self) -> list[str]:
        """Every entity across categories, first-seen order, no duplicates."""
        seen: dict[str, None] = {}
        for cat in ENTITY_CATEGORIES:
            for item in getattr(self, cat):
                seen.setdefault(item, None)
        return list(seen)

    def categories_for(self, term: str) -> list[str]:
        """Categories whose members match *term* case-insensitively."""
        term = term.lower()
        return [
            cat for cat in ENTITY_CATEGORIES
            if any(item.lower() == term for item in getattr(self, cat))
        ]

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class FrequentTerm:
    keyword: str
    count: int
    normalized_frequency: float
    tf_idf_score: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SemanticRelationship:
    """Link between a candidate keyword and the rest of the page."""

    term: str
    related_to_primary_keyword: bool
    relationship_type: str
    context_sentences: tuple[str, ...]
    co_occurrence_score: float

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class CoreTopic:
    """The single best topic label and the trace of how it was chosen."""

    topic: str
    confidence_score: float
    reasoning: str
    co_occurring_terms: tuple[str, ...] = ()
    score: float = 0.0
    signals: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class EEATScore:
    """Presence-of-signal E-E-A-T rating.

    ``overall`` is derived from the four sub-scores on every access and is
    never stored.  ``indicators`` pairs each category with the indicator
    phrases that earned its points.
    """

    expertise: int = 0
    experience: int = 0
    authoritativeness: int = 0
    trustworthiness: int = 0
    indicators: tuple[tuple[str, tuple[str, ...]], ...] = ()

    @property
    def overall(self) -> float:
        total = (
            self.expertise + self.experience
            + self.authoritativeness + self.trustworthiness
        )
        return round(total / 4, 2)

    def indicator_map(self) -> dict[str, list[str]]:
        return {category: list(found) for category, found in self.indicators}

    def to_dict(self) -> dict[str, Any]:
        return {
            "expertise": self.expertise,
            "experience": self.experience,
            "authoritativeness": self.authoritativeness,
            "trustworthiness": self.trustworthiness,
            "overall": self.overall,
        }


@dataclass(frozen=True)
class SemanticCluster:
    topic: str
    related_keywords: tuple[str, ...]
    strength: int

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class QueryFanOut:
    """Content-expansion analysis derived from the core topic and entities."""

    primary_topics: tuple[str, ...] = ()
    related_queries: tuple[str, ...] = ()
    content_gaps: tuple[str, ...] = ()
    expansion_opportunities: tuple[str, ...] = ()
    semantic_clusters: tuple[SemanticCluster, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class UserIntentSignals:
    informational: int = 0
    navigational: int = 0
    transactional: int = 0
    commercial: int = 0

    @property
    def dominant(self) -> str:
        """Intent with the highest score; ties resolve in field order.

        Empty when no intent indicator matched at all.
        """
        scores = asdict(self)
        best = max(scores, key=lambda k: scores[k])
        return best if scores[best] > 0 else ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SemanticAnalysis:
    """Full output of one :class:`SemanticAnalyzer` run."""

    core_topic: CoreTopic
    entity_extraction: EntityBundle
    semantic_relationships: tuple[SemanticRelationship, ...]
    top_frequent_terms: tuple[FrequentTerm, ...]
    readability_score: float
    content_topics: tuple[str, ...]
    eeat_score: EEATScore
    query_fan_out: QueryFanOut
    content_quality_score: int
    topical_authority_score: int
    user_intent_signals: UserIntentSignals
    heuristics_version: str = ""
    word_count: int = 0
    sentence_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "core_topic_analysis": {
                "main_topic": {
                    "topic": self.core_topic.topic,
                    "confidence_score": self.core_topic.confidence_score,
                    "reasoning": self.core_topic.reasoning,
                    "score": self.core_topic.score,
                    "signals": list(self.core_topic.signals),
                },
                "inferred_entities": self.entity_extraction.to_dict(),
                "co_occurring_terms": list(self.core_topic.co_occurring_terms),
            },
            "entity_extraction": self.entity_extraction.to_dict(),
            "semantic_relationships": [r.to_dict() for r in self.semantic_relationships],
            "top_frequent_terms": [t.to_dict() for t in self.top_frequent_terms],
            "readability_score": self.readability_score,
            "content_topics": list(self.content_topics),
            "eeat_score": self.eeat_score.to_dict(),
            "eeat_indicators": self.eeat_score.indicator_map(),
            "query_fan_out": self.query_fan_out.to_dict(),
            "content_quality_score": self.content_quality_score,
            "topical_authority_score": self.topical_authority_score,
            "user_intent_signals": self.user_intent_signals.to_dict(),
            "dominant_intent": self.user_intent_signals.dominant,
            "heuristics_version": self.heuristics_version,
            "word_count": self.word_count,
            "sentence_count": self.sentence_count,
        }
