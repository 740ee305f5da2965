"""Result models for the scoring engine."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ConditionHit:
    """A non-zero contribution of one condition for one keyword.

    Attributes:
        keyword: Keyword as supplied by the caller
        position: Index of the keyword in the supplied list
        condition_name: Field the condition inspected
        score: Contribution after array halving
    """

    keyword: str
    condition_name: str
    score: float
    position: int = 0


@dataclass
class ScoreResult:
    """Outcome of scoring one record against a keyword list.

    Attributes:
        score: Final score, halved when the match count missed the keyword count
        raw_score: Sum of all contributions before the whole-match penalty
        match_count: Number of keyword x condition pairs that scored
        keyword_count: Number of keywords supplied, including skipped empty ones
        penalized: True if the whole-match penalty halved the score
        hits: Every non-zero contribution in evaluation order
    """

    score: float
    raw_score: float = 0.0
    match_count: int = 0
    keyword_count: int = 0
    penalized: bool = False
    hits: List[ConditionHit] = field(default_factory=list)

    @property
    def is_match(self) -> bool:
        """True if any condition scored for any keyword."""
        return self.score > 0

    @property
    def matched_keywords(self) -> List[str]:
        """Distinct keywords with at least one hit, in first-hit order."""
        seen = []
        for hit in self.hits:
            if hit.keyword not in seen:
                seen.append(hit.keyword)
        return seen

    @property
    def all_keywords_matched(self) -> bool:
        """True if every supplied keyword produced at least one hit.

        Repeated keywords are counted per position. Informational only: the
        penalty compares match_count with keyword_count, which is not the same
        check when several conditions match one keyword.
        """
        covered = {hit.position for hit in self.hits}
        return self.keyword_count > 0 and len(covered) == self.keyword_count
