"""Sentiment analysis: LLM classifier with a deterministic fallback."""

from edu360.services.sentiment.classifier import (
    InvalidVerdictError,
    SentimentClassifier,
    parse_verdict,
)
from edu360.services.sentiment.heuristics import (
    CONCERNING_KEYWORDS,
    fallback_verdict,
    matched_keywords,
)

__all__ = [
    "CONCERNING_KEYWORDS",
    "InvalidVerdictError",
    "SentimentClassifier",
    "fallback_verdict",
    "matched_keywords",
    "parse_verdict",
]
