"""
Urgency Scorer

Reduces the evaluated keyword matches of a letter to a single verdict:
a category, a 0-100 score and a traffic-light tier.

Only non-neutralized matches count, and they count with their
effective (context-adjusted) weight:

  - any active RED keyword    -> max red weight × deadline multiplier, cap 100
  - else any active YELLOW    -> max yellow weight × deadline multiplier, cap 79
  - else any active GREEN     -> max green weight, cap 39 (no multiplier)
  - else                      -> 0

If every red keyword was cancelled, the letter falls through to the
yellow or green rule instead of raising a false alarm.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from klartext.collector import collect_matches
from klartext.config import settings
from klartext.context import EvaluatedKeyword, round_half_up
from klartext.keywords import CATEGORIES, CATEGORY_LABELS, URGENCY_DESCRIPTIONS
from klartext.rules import (
    TIER_SCORE_CAPS,
    build_summary,
    get_deadline_multiplier,
    get_recommendations,
    get_urgency_from_score,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringResult:
    """Complete verdict for one letter."""
    urgency: str                        # "red", "yellow" or "green"
    score: int                          # 0-100
    category: str
    category_label: str
    matches: tuple[EvaluatedKeyword, ...]
    summary: str
    urgency_description: str            # Traffic-light caption
    recommendations: tuple[str, ...]
    engine_version: str = settings.ENGINE_VERSION

    @property
    def active_matches(self) -> list[EvaluatedKeyword]:
        return [m for m in self.matches if not m.is_neutralized]

    @property
    def neutralized_matches(self) -> list[EvaluatedKeyword]:
        return [m for m in self.matches if m.is_neutralized]


def determine_category(matches: list[EvaluatedKeyword]) -> str:
    """
    Pick the letter category with the highest summed effective weight.

    No matches at all yields "unknown". Matches that were all
    neutralized yield "informational": the letter talks about an
    action that is not happening. Ties go to the earlier category in
    CATEGORIES.
    """
    if not matches:
        return "unknown"

    active = [m for m in matches if not m.is_neutralized]
    if not active:
        return "informational"

    totals = {category: 0 for category in CATEGORIES}
    for match in active:
        totals[match.category] += match.effective_weight

    best_category = "unknown"
    best_total = 0
    for category in CATEGORIES:
        if totals[category] > best_total:
            best_category = category
            best_total = totals[category]
    return best_category


def calculate_score(
    matches: list[EvaluatedKeyword],
    deadline_days: Optional[int] = None,
) -> int:
    """
    Score a letter from its active matches, 0-100.

    The deadline multiplier only applies to red and yellow keywords.
    """
    active = [m for m in matches if not m.is_neutralized]
    multiplier = get_deadline_multiplier(deadline_days)

    for tier in ("red", "yellow"):
        weights = [m.effective_weight for m in active if m.urgency == tier]
        if weights:
            return min(TIER_SCORE_CAPS[tier], round_half_up(max(weights) * multiplier))

    green = [m.effective_weight for m in active if m.urgency == "green"]
    if green:
        return min(TIER_SCORE_CAPS["green"], max(green))
    return 0


def analyze_text(text: str, deadline_days: Optional[int] = None) -> ScoringResult:
    """
    Analyze a letter and return its verdict.

    Never raises: empty or keyword-free text yields category "unknown"
    with score 0.

    Args:
        text: The letter text (ideally already normalized).
        deadline_days: Days until the letter's deadline, if known.

    Returns:
        ScoringResult with tier, score, category, matches and advice.
    """
    matches = collect_matches(text)
    category = determine_category(matches)
    score = calculate_score(matches, deadline_days)
    urgency = get_urgency_from_score(score)
    category_label = CATEGORY_LABELS[category]

    neutralized_count = sum(1 for m in matches if m.is_neutralized)
    if neutralized_count:
        logger.debug(
            "%d keyword(s) neutralized by context",
            neutralized_count,
            extra={"neutralized_count": neutralized_count},
        )

    return ScoringResult(
        urgency=urgency,
        score=score,
        category=category,
        category_label=category_label,
        matches=tuple(matches),
        summary=build_summary(urgency, category, category_label),
        urgency_description=URGENCY_DESCRIPTIONS[urgency],
        recommendations=tuple(get_recommendations(category)),
    )
