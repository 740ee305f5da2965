"""Relevance scoring of records against search keywords.

This module provides:
- score_condition: contribution of one condition for one keyword
- MatchScorer: scores records against keywords with a fixed condition table
- match_score: one-shot scoring entry point
- ScoreResult / ConditionHit: breakdown of a scored record
"""

from .engine import MatchScorer, match_score, normalize_conditions, score_condition
from .exceptions import ConditionShapeError, InvalidConditionError, ScoringError
from .models import ConditionHit, ScoreResult
from .utils import resolve_search_key

__all__ = [
    "MatchScorer",
    "match_score",
    "score_condition",
    "normalize_conditions",
    "resolve_search_key",
    "ScoreResult",
    "ConditionHit",
    "ScoringError",
    "InvalidConditionError",
    "ConditionShapeError",
]
