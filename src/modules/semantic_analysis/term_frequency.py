"""Single-document TF-IDF salience scoring."""

import logging
import math
from collections import Counter
from typing import Optional

from src.models.semantic import FrequentTerm
from src.modules.semantic_analysis.heuristics import HeuristicTables, default_tables
from src.modules.semantic_analysis.tokenizer import PreparedText

logger = logging.getLogger(__name__)


class TermFrequencyAnalyzer:
    """Score token salience within one page.

    The page itself is the corpus: ``idf = ln(total / count)`` rewards terms
    that are present but not dominant.  This is a prominence score, not a
    corpus-relative TF-IDF, and must stay single-document so results remain
    comparable between runs.

    Usage::

        analyzer = TermFrequencyAnalyzer()
        terms = analyzer.analyze(prepared, heading_texts=["SEO Guide"])
    """

    def __init__(self, tables: Optional[HeuristicTables] = None, top_n: Optional[int] = None) -> None:
        self._tables = tables or default_tables()
        cfg = self._tables.term_frequency
        self.top_n = int(top_n if top_n is not None else cfg["top_n"])
        self._short_length = int(cfg["short_term_length"])
        self._length_bonus = float(cfg["length_bonus"])
        self._heading_bonus = float(cfg["heading_bonus"])

    def analyze(
        self,
        text: PreparedText,
        heading_texts: tuple[str, ...] = (),
    ) -> list[FrequentTerm]:
        """Return the top terms sorted by descending TF-IDF score.

        Args:
            text: Prepared page content.
            heading_texts: Heading strings used for the position bonus.

        Returns:
            Up to ``top_n`` :class:`FrequentTerm` records; empty for empty
            content.
        """
        words = [w for w in text.words if len(w) > 2]
        total = len(words)
        if total == 0:
            return []

        headings_lower = " ".join(heading_texts).lower()
        counts = Counter(words)
        terms: list[FrequentTerm] = []
        for term, count in counts.items():
            tf = count / total
            idf = math.log(total / count)
            length_bonus = self._length_bonus if len(term) <= self._short_length else 1.0
            position_bonus = self._heading_bonus if term in headings_lower else 1.0
            terms.append(FrequentTerm(
                keyword=term,
                count=count,
                normalized_frequency=tf,
                tf_idf_score=tf * idf * length_bonus * position_bonus,
            ))

        # Stable sort keeps first-seen order for equal scores.
        terms.sort(key=lambda t: t.tf_idf_score, reverse=True)
        return terms[: self.top_n]
