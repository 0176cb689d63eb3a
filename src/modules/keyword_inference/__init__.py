"""Keyword Inference module -- primary and secondary keyword candidates and scoring."""

from src.modules.keyword_inference.candidates import (
    FALLBACK_GENERATOR,
    PRIMARY_GENERATORS,
    is_acceptable_secondary,
    is_valid_primary_phrase,
    needs_fallback,
)
from src.modules.keyword_inference.engine import KeywordInferenceEngine

__all__ = [
    "KeywordInferenceEngine",
    "PRIMARY_GENERATORS",
    "FALLBACK_GENERATOR",
    "is_acceptable_secondary",
    "is_valid_primary_phrase",
    "needs_fallback",
]
