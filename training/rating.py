"""
================================================================================
SKILL RATING CALCULATOR
================================================================================

Purpose: Turns a validated self-assessment into the rating shown to the
player: a continuous rating, the half-point displayed rating, a badge name
and the progress within the current half-point band.

FORMULA (weights are fixed, changing them changes every stored rating):
    weighted_rating_raw = technical_average * 0.5
                        + awareness_average * 0.2
                        + consistency_score * 0.2
                        + experience_value  * 0.1
    rating              = 1.5 + weighted_rating_raw * 0.6
    displayed_rating    = nearest 0.5 (halves round up)
    progress_percent    = ((rating - displayed_rating) / 0.5) * 100, clamped 0-100

The badge is looked up from the displayed rating, never from the raw value.
================================================================================
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from training.assessment import (
    AssessmentValidationError,
    SkillAssessmentInput,
    aggregate_scores,
)

TECHNICAL_WEIGHT = 0.5
AWARENESS_WEIGHT = 0.2
CONSISTENCY_WEIGHT = 0.2
EXPERIENCE_WEIGHT = 0.1

RATING_BASE = 1.5
RATING_SCALE = 0.6
RATING_STEP = 0.5

# Bounds of any displayed rating the formula can produce from valid scores
DISPLAYED_RATING_RANGE = (1.5, 6.0)

# (displayed rating, badge) checked in order after the "< 2.5" case
BADGE_LADDER: List[Tuple[float, str]] = [
    (2.5, "Getting There"),
    (3.0, "Intermediate"),
    (3.5, "Leveling Up"),
    (4.0, "Advanced"),
    (4.5, "Elite"),
]
STARTER_BADGE = "Starter"
EXPERT_BADGE = "Expert"
EXPERT_THRESHOLD = 5.0


@dataclass(frozen=True)
class RatingResult:
    weighted_rating_raw: float
    rating: float
    displayed_rating: float
    badge_name: str
    progress_percent: int

    def to_profile_fields(self) -> Dict[str, Any]:
        """Columns written to the profile row after an assessment."""
        return {
            "weighted_rating_raw": self.weighted_rating_raw,
            "displayed_rating": self.displayed_rating,
            "badge_name": self.badge_name,
            "progress_percent": self.progress_percent,
        }


def quantize_rating(rating: float) -> float:
    """Round a rating to the nearest half point, halves rounding up.

    Python's round() uses banker's rounding, which would send 3.25 to 3.0
    instead of 3.5, so the rounding is done with floor().
    """
    return math.floor(rating / RATING_STEP + 0.5) * RATING_STEP


def badge_for_rating(displayed_rating: float) -> str:
    """Return the badge for a displayed rating.

    Args:
        displayed_rating (float): Rating to look up. Values that are not a
            multiple of 0.5 are quantized first.

    Returns:
        str: Badge name from the ladder (Starter ... Expert).

    Example:
        >>> badge_for_rating(3.0)
        'Intermediate'
        >>> badge_for_rating(2.0)
        'Starter'
    """
    quantized = quantize_rating(displayed_rating)
    if quantized < BADGE_LADDER[0][0]:
        return STARTER_BADGE
    for threshold, badge in BADGE_LADDER:
        if quantized == threshold:
            return badge
    if quantized >= EXPERT_THRESHOLD:
        return EXPERT_BADGE
    # Unreachable for quantized values, kept so the lookup is total
    return STARTER_BADGE


def next_level_target(displayed_rating: float) -> float:
    return displayed_rating + RATING_STEP


def calculate_rating(assessment: SkillAssessmentInput) -> RatingResult:
    """Compute the rating, badge and band progress for an assessment.

    Args:
        assessment (SkillAssessmentInput): Validated assessment.

    Returns:
        RatingResult: Deterministic result, identical for identical input.
    """
    averages = aggregate_scores(assessment)

    weighted_rating_raw = (
        averages.technical_average * TECHNICAL_WEIGHT
        + averages.awareness_average * AWARENESS_WEIGHT
        + assessment.consistency_score * CONSISTENCY_WEIGHT
        + averages.experience_value * EXPERIENCE_WEIGHT
    )

    rating = RATING_BASE + weighted_rating_raw * RATING_SCALE
    displayed_rating = quantize_rating(rating)

    # Negative when the rating was rounded up, which clamps to 0
    band_position = ((rating - displayed_rating) / RATING_STEP) * 100
    progress_percent = int(round(max(0.0, min(100.0, band_position))))

    return RatingResult(
        weighted_rating_raw=weighted_rating_raw,
        rating=rating,
        displayed_rating=displayed_rating,
        badge_name=badge_for_rating(displayed_rating),
        progress_percent=progress_percent,
    )


@dataclass(frozen=True)
class AssessmentOutcome:
    """Result of rating raw assessment data: either a rating or the validation error."""

    assessment: Optional[SkillAssessmentInput] = None
    rating: Optional[RatingResult] = None
    error: Optional[AssessmentValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Tuple[SkillAssessmentInput, RatingResult]:
        if self.error is not None:
            raise self.error
        return self.assessment, self.rating


def assess(data: Dict[str, Any]) -> AssessmentOutcome:
    """Validate raw assessment data and rate it without raising.

    The caller decides how to surface a failure (HTTP 422, CLI message, ...).
    """
    try:
        assessment = SkillAssessmentInput.from_dict(data)
    except AssessmentValidationError as e:
        return AssessmentOutcome(error=e)
    return AssessmentOutcome(assessment=assessment, rating=calculate_rating(assessment))
