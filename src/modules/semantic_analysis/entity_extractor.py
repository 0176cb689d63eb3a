"""Rule-based entity extraction (people, organizations, locations, products, technologies)."""

import logging
import re
from typing import Optional

from src.models.semantic import EntityBundle
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import PreparedText, strip_edge_punctuation

logger = logging.getLogger(__name__)

# Ordered most specific first; later matches inside an accepted span are skipped.
_PEOPLE_PATTERNS = (
    re.compile(r"\b(?:Dr|Prof)\.\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?\b"),
    re.compile(r"\b[A-Z][a-z]+\s+[A-Z]\.\s+[A-Z][a-z]+\b"),
    re.compile(r"\b[A-Z]\.\s+[A-Z][a-z]+\b"),
    re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b"),
)

_ANCHOR_KEYS = {
    "organizations": "organization_anchors",
    "locations": "location_anchors",
    "products": "product_anchors",
}


class EntityExtractor:
    """Pattern-matching entity extractor.

    This is a recall-over-precision heuristic, not a trained NER model: false
    positives are expected and downstream scoring treats every entity as a
    weak signal.  A string may land in more than one category.

    Usage::

        extractor = EntityExtractor()
        bundle = extractor.extract(PreparedText.from_content(page_text))
        bundle.people  # ('John Doe',)
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        entities = self._tables.entities
        self._anchors = {
            category: frozenset(entities[key]) for category, key in _ANCHOR_KEYS.items()
        }
        self._windows = entities["windows"]
        self._technologies = tuple(entities["technologies"])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, text: PreparedText) -> EntityBundle:
        """Extract all five entity categories from prepared page text."""
        bundle = EntityBundle(
            people=tuple(self.extract_people(text.sentences)),
            organizations=tuple(self.extract_anchored(text.sentences, "organizations")),
            locations=tuple(self.extract_anchored(text.sentences, "locations")),
            products=tuple(self.extract_anchored(text.sentences, "products")),
            technologies=tuple(self.extract_technologies(text.lower)),
        )
        logger.debug(
            "Extracted %d entities (people=%d, orgs=%d, locations=%d, products=%d, tech=%d)",
            bundle.total, len(bundle.people), len(bundle.organizations),
            len(bundle.locations), len(bundle.products), len(bundle.technologies),
        )
        return bundle

    def extract_people(self, sentences: tuple[str, ...]) -> list[str]:
        """Match person-name shapes such as "First Last" or "Dr. First Last".

        Args:
            sentences: Sentences in original case.

        Returns:
            De-duplicated names in first-seen order.
        """
        found: dict[str, None] = {}
        for sentence in sentences:
            spans: list[tuple[int, int]] = []
            for pattern in _PEOPLE_PATTERNS:
                for match in pattern.finditer(sentence):
                    start, end = match.span()
                    if any(s <= start and end <= e for s, e in spans):
                        continue
                    spans.append((start, end))
                    found.setdefault(" ".join(match.group(0).split()), None)
        return list(found)

    def extract_anchored(self, sentences: tuple[str, ...], category: str) -> list[str]:
        """Sliding-window extraction around category anchor words.

        When a token matches the anchor list (e.g. "inc" for organizations),
        up to N preceding tokens are joined with it.  The window restarts
        after any stop word it contains, so "developer at TechCorp Inc"
        yields "TechCorp Inc".

        Raises:
            ValueError: If *category* has no anchor list.
        """
        if category not in self._anchors:
            raise ValueError(f"Unknown entity category: {category!r}")
        anchors = self._anchors[category]
        preceding = int(self._windows[category]["preceding"])
        min_length = int(self._windows[category]["min_length"])

        found: dict[str, None] = {}
        for sentence in sentences:
            tokens = [strip_edge_punctuation(t) for t in sentence.split()]
            tokens = [t for t in tokens if t]
            for i, token in enumerate(tokens):
                if i == 0 or token.lower() not in anchors:
                    continue
                window = tokens[max(0, i - preceding):i]
                for j in range(len(window) - 1, -1, -1):
                    if self._tables.is_stop_word(window[j].lower()):
                        window = window[j + 1:]
                        break
                if not window:
                    continue
                candidate = " ".join(window + [token])
                if len(candidate) > min_length:
                    found.setdefault(candidate, None)
        return list(found)

    def extract_technologies(self, content_lower: str) -> list[str]:
        """Case-insensitive containment check against the technology vocabulary."""
        if not content_lower:
            return []
        return [term for term in self._technologies if term in content_lower]
