"""Relevance scoring of records against search keywords.

This module implements:
1. score_condition: the contribution of one condition for one keyword
2. MatchScorer: every keyword x every condition against one record, with the
   whole-match penalty
3. match_score: one-shot functional entry point over MatchScorer

Scores are comparative only. Higher means a better match, there is no upper
bound, and a score is never negative.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from search_score.config.loader import format_validation_errors
from search_score.config.models import Condition
from search_score.logging import get_logger

from .exceptions import ConditionShapeError, InvalidConditionError
from .models import ConditionHit, ScoreResult
from .utils import is_number, normalize_text, number_to_text, read_field, resolve_search_key

logger = get_logger(__name__, component="scoring")

ConditionLike = Union[Condition, Mapping]
Conditions = Union[ConditionLike, Sequence[ConditionLike]]
Keywords = Union[Optional[str], Sequence[Optional[str]]]


def coerce_condition(condition: ConditionLike) -> Condition:
    """Validate a plain mapping into a Condition. Conditions pass through."""
    if isinstance(condition, Condition):
        return condition
    try:
        return Condition.model_validate(condition)
    except ValidationError as e:
        raise InvalidConditionError(
            "Invalid condition", errors=format_validation_errors(e)
        ) from e


def normalize_conditions(conditions: Conditions) -> List[Condition]:
    """Wrap a single condition into a list and validate every entry."""
    if conditions is None:
        return []
    if isinstance(conditions, (Condition, Mapping)):
        conditions = [conditions]
    return [coerce_condition(condition) for condition in conditions]


def normalize_keywords(keys: Keywords) -> List[Optional[str]]:
    """Wrap a single keyword into a list. Entries are kept as given."""
    if keys is None or isinstance(keys, str):
        return [keys]
    return list(keys)


def _score_text(condition: Condition, text: str, search_key: str) -> float:
    """Exact match awards equal, otherwise a substring match awards include."""
    if condition.equal and text == search_key:
        return condition.equal
    if condition.include and search_key in text:
        return condition.include
    return 0.0


def _as_text(condition: Condition, value: Any, expected: str) -> str:
    if isinstance(value, str):
        return value
    if is_number(value):
        return number_to_text(value)
    raise ConditionShapeError(condition.name, expected, type(value).__name__)


def score_condition(condition: ConditionLike, keyword: str, record: Any) -> float:
    """Score one keyword against one condition on one record.

    Algorithm:
    1. Read the condition's field; a missing or None field scores 0
    2. Resolve the search key through the condition prefix; an ineligible
       keyword scores 0
    3. Scalar field: compare the trimmed, lowercased value with the key
    4. Array field: compare every element, and halve the total unless every
       element matched

    Args:
        condition: Condition or mapping with the same keys
        keyword: Search keyword, compared as given (callers lowercase it)
        record: Mapping or object carrying the field

    Returns:
        Non-negative contribution of this condition

    Raises:
        ConditionShapeError: If the field's type contradicts condition.array
        InvalidConditionError: If a condition mapping fails validation
    """
    condition = coerce_condition(condition)

    source = read_field(record, condition.name)
    if source is None:
        return 0.0

    search_key = resolve_search_key(keyword, condition.prefix)
    if search_key is None:
        return 0.0

    if not condition.array:
        if isinstance(source, (list, tuple)):
            raise ConditionShapeError(condition.name, "a string or number", type(source).__name__)
        text = normalize_text(_as_text(condition, source, "a string or number"))
        return _score_text(condition, text, search_key)

    if not isinstance(source, (list, tuple)):
        raise ConditionShapeError(condition.name, "a list of strings", type(source).__name__)

    score = 0.0
    matched_items = 0
    for item in source:
        text = normalize_text(_as_text(condition, item, "a list of strings"))
        item_score = _score_text(condition, text, search_key)
        if item_score:
            score += item_score
            matched_items += 1

    # Partial array matches count at half weight
    if matched_items < len(source):
        score /= 2
    return score


class MatchScorer:
    """Scores records against keywords with a fixed condition table.

    The condition table is validated once at construction. Instances hold no
    mutable state and can be shared between threads.

    Example:
        >>> scorer = MatchScorer([{"name": "name", "equal": 100, "include": 50}])
        >>> scorer.score({"name": "left-pad"}, ["left-pad"])
        100.0
    """

    def __init__(self, conditions: Conditions, logger_instance: Optional[logging.Logger] = None):
        """Initialize MatchScorer.

        Args:
            conditions: One condition or a sequence of them (models or mappings)
            logger_instance: Optional logger instance (defaults to module logger)

        Raises:
            InvalidConditionError: If a condition mapping fails validation
        """
        self.conditions = tuple(normalize_conditions(conditions))
        self.logger = logger_instance or logger

    def evaluate(self, record: Any, keys: Keywords) -> ScoreResult:
        """Score a record and report every contribution.

        Algorithm:
        1. Skip keywords that are None or empty
        2. Score every remaining keyword against every condition; each
           non-zero result is one match
        3. Halve the total if the match count differs from the number of
           keywords supplied (skipped ones included)

        Args:
            record: Mapping or object to score
            keys: One keyword or a sequence of keywords

        Returns:
            ScoreResult with the final score and its breakdown
        """
        keywords = normalize_keywords(keys)

        raw_score = 0.0
        hits: List[ConditionHit] = []
        for position, keyword in self._eligible(keywords):
            for condition in self.conditions:
                contribution = score_condition(condition, keyword, record)
                if contribution:
                    hits.append(ConditionHit(keyword, condition.name, contribution, position))
                    raw_score += contribution

        # Compares pair count with keyword count, not keyword coverage
        penalized = len(hits) != len(keywords)
        score = raw_score / 2 if penalized else raw_score

        self.logger.debug(
            "Record scored",
            extra={
                "event": "scoring.record.scored",
                "score": score,
                "match_count": len(hits),
                "keyword_count": len(keywords),
                "penalized": penalized,
            },
        )

        return ScoreResult(
            score=score,
            raw_score=raw_score,
            match_count=len(hits),
            keyword_count=len(keywords),
            penalized=penalized,
            hits=hits,
        )

    def score(self, record: Any, keys: Keywords) -> float:
        """Score a record, returning only the number."""
        return self.evaluate(record, keys).score

    @staticmethod
    def _eligible(keywords: Iterable[Optional[str]]) -> Iterable[Tuple[int, str]]:
        for position, keyword in enumerate(keywords):
            # Non-strings have no length to search with
            if isinstance(keyword, str) and keyword:
                yield position, keyword


def match_score(conditions: Conditions, record: Any, keys: Keywords) -> float:
    """Score how well a record matches the keywords under the given conditions.

    Args:
        conditions: One condition or a sequence of them (models or mappings)
        record: Mapping or object to score
        keys: One keyword or a sequence of keywords

    Returns:
        Non-negative comparative score; higher is a better match

    Example:
        >>> match_score([{"name": "name", "equal": 100}], {"name": "Test"}, "test")
        100.0
    """
    return MatchScorer(conditions).score(record, keys)
