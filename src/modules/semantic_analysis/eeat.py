"""E-E-A-T (Expertise, Experience, Authoritativeness, Trustworthiness) scoring.

The scores are presence-of-signal heuristics: each category awards fixed
points for every indicator phrase found anywhere in the lowercased content.
They say nothing about whether the claims are true or the writing is good,
only whether the vocabulary that usually accompanies such content appears.
Present them to users as signal coverage, not as a quality verdict.
"""

import logging
from typing import Optional

from src.models.semantic import EEATScore
from src.modules.semantic_analysis.heuristics import (
    EEAT_CATEGORIES,
    HeuristicTables,
    default_tables,
)

logger = logging.getLogger(__name__)

_MAX_SCORE = 100


class EEATScorer:
    """Score the four E-E-A-T axes independently.

    Usage::

        scorer = EEATScorer()
        eeat = scorer.score(prepared.lower)
        eeat.overall  # mean of the four sub-scores
    """

    def __init__(self, tables: Optional[HeuristicTables] = None) -> None:
        self._tables = tables or default_tables()
        self._indicators = self._tables.eeat

    def score(self, content_lower: str) -> EEATScore:
        """Return the four sub-scores and their matched indicators for lowercased content."""
        eeat = EEATScore(
            expertise=self.expertise(content_lower),
            experience=self.experience(content_lower),
            authoritativeness=self.authoritativeness(content_lower),
            trustworthiness=self.trustworthiness(content_lower),
            indicators=tuple(
                (category, tuple(found))
                for category, found in self.matched_indicators(content_lower).items()
            ),
        )
        logger.debug("E-E-A-T scores: %s (overall=%.2f)", eeat.to_dict(), eeat.overall)
        return eeat

    def expertise(self, content_lower: str) -> int:
        """Methodology, research and credential vocabulary."""
        return self._category_score("expertise", content_lower)

    def experience(self, content_lower: str) -> int:
        """First-hand usage vocabulary: case studies, hands-on testing."""
        return self._category_score("experience", content_lower)

    def authoritativeness(self, content_lower: str) -> int:
        """Citation and recognition vocabulary."""
        return self._category_score("authoritativeness", content_lower)

    def trustworthiness(self, content_lower: str) -> int:
        """Policy, contact and assurance vocabulary."""
        return self._category_score("trustworthiness", content_lower)

    def matched_indicators(self, content_lower: str) -> dict[str, list[str]]:
        """Indicators found per category, for audit trails."""
        return {
            cat: [ind for ind in self._indicators[cat] if ind in content_lower]
            for cat in EEAT_CATEGORIES
        }

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _category_score(self, category: str, content_lower: str) -> int:
        if not content_lower:
            return 0
        points = sum(
            float(weight)
            for indicator, weight in self._indicators[category].items()
            if indicator in content_lower
        )
        return int(round(min(points, _MAX_SCORE)))
