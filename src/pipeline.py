"""Single-page pipeline: payload in, semantic analysis plus inferred keywords out."""

import logging
from typing import Any, Optional

from src.models.page import PageSignals
from src.modules.keyword_inference import KeywordInferenceEngine
from src.modules.semantic_analysis import SemanticAnalyzer
from src.modules.semantic_analysis.heuristics import HeuristicTables

logger = logging.getLogger(__name__)


def analyze_page(
    payload: Any,
    tables: Optional[HeuristicTables] = None,
    top_terms: Optional[int] = None,
) -> dict[str, Any]:
    """Run both engines over one parser payload.

    Args:
        payload: Mapping with ``content``, ``headings``, ``url_keywords`` and
            ``meta_keywords`` (plus optional ``title``, ``image_alt_texts`` and
            ``meta_tag_keywords``).
        tables: Heuristic tables; the bundled defaults when omitted.
        top_terms: Override for the number of frequent terms reported.

    Returns:
        ``{"semantic_analysis": {...}, "inferred_keywords": {...}}`` built from
        JSON-native types only.

    Raises:
        InvalidInputError: If the payload or its content has the wrong type.
    """
    signals = PageSignals.from_dict(payload)
    analysis = SemanticAnalyzer(tables=tables, top_terms=top_terms).analyze(signals)
    keywords = KeywordInferenceEngine(tables=tables).infer(signals, analysis)
    return {
        "semantic_analysis": analysis.to_dict(),
        "inferred_keywords": keywords.to_dict(),
    }
