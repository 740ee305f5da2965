"""Keyword relevance scoring for record collections."""

from search_score.config.models import Condition
from search_score.scoring import (
    ConditionHit,
    ConditionShapeError,
    InvalidConditionError,
    MatchScorer,
    ScoreResult,
    ScoringError,
    match_score,
    score_condition,
)

__version__ = "1.0.0"

__all__ = [
    "Condition",
    "MatchScorer",
    "match_score",
    "score_condition",
    "ScoreResult",
    "ConditionHit",
    "ScoringError",
    "InvalidConditionError",
    "ConditionShapeError",
]
