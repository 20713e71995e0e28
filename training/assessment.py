"""
================================================================================
SELF-ASSESSMENT INPUT AND SCORE AGGREGATION
================================================================================

Purpose: Holds the raw answers of a pickleball self-assessment and collapses
them into the three averages the rating formula needs.

An assessment has:
- experience bucket (0-4) and weekly play frequency (1, 3 or 4)
- 9 technical sub-scores (1-5): Serve, Return, Dinks, Drops, Resets,
  Volleys, Hand speed, Lobs, Speedups
- 2 awareness sub-scores (1-5): Positioning, Anticipation
- a consistency score (1-4) and a play style label

Every value is checked on the way in. A missing or out-of-range field raises
AssessmentValidationError naming the field, so no None or NaN ever reaches
the arithmetic.
================================================================================
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

# =============================================================================
# SKILL TABLES
# =============================================================================
# Order matters: it is the tie-break order for focus area selection.

TECHNICAL_SKILLS: List[Tuple[str, str]] = [
    ("Serve", "serve_score"),
    ("Return", "return_score"),
    ("Dinks", "dink_score"),
    ("Drops", "drop_score"),
    ("Resets", "reset_score"),
    ("Volleys", "volley_score"),
    ("Hand speed", "hand_speed_score"),
    ("Lobs", "lob_score"),
    ("Speedups", "speedup_score"),
]

AWARENESS_SKILLS: List[Tuple[str, str]] = [
    ("Positioning", "positioning_score"),
    ("Anticipation", "anticipation_score"),
]

SKILL_SCORE_RANGE = (1, 5)

# Answer labels shown by the assessment form, keyed by stored code
EXPERIENCE_BUCKETS = {
    0: "Less than 3 months",
    1: "Three to six months",
    2: "Six to twelve months",
    3: "More than one year",
    4: "More than two years",
}

FREQUENCY_OPTIONS = {
    1: "Once per week",
    3: "Two to three times per week",
    4: "Four times per week or more",
}

CONSISTENCY_OPTIONS = {
    1: "Almost never",
    2: "Sometimes",
    3: "Often",
    4: "Very often",
}

PLAY_STYLES = [
    "Keep the ball in play",
    "Mix soft and fast shots",
    "Control pace and placement",
    "Aggressive and strategic",
]


class AssessmentValidationError(ValueError):
    """Raised when an assessment field is missing or outside its allowed values."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _read_int(data: Dict[str, Any], field: str) -> int:
    """Read one integer field, rejecting missing, boolean, fractional and string values."""
    if field not in data or data[field] is None:
        raise AssessmentValidationError(field, "is required")

    value = data[field]
    # bool is a subclass of int, but True is not a score
    if isinstance(value, bool):
        raise AssessmentValidationError(field, f"must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise AssessmentValidationError(field, f"must be a whole number, got {value!r}")
        return int(value)
    if isinstance(value, int):
        return value
    raise AssessmentValidationError(field, f"must be an integer, got {value!r}")


def _check_range(field: str, value: int, low: int, high: int) -> int:
    if not low <= value <= high:
        raise AssessmentValidationError(field, f"must be between {low} and {high}, got {value}")
    return value


def _check_choice(field: str, value: int, allowed) -> int:
    if value not in allowed:
        options = ", ".join(str(v) for v in sorted(allowed))
        raise AssessmentValidationError(field, f"must be one of {options}, got {value}")
    return value


@dataclass(frozen=True)
class SkillAssessmentInput:
    experience_months: int
    frequency_per_week: int
    serve_score: int
    return_score: int
    dink_score: int
    drop_score: int
    reset_score: int
    volley_score: int
    hand_speed_score: int
    lob_score: int
    speedup_score: int
    positioning_score: int
    anticipation_score: int
    consistency_score: int
    play_style: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkillAssessmentInput":
        """Build a validated assessment from a profile row or request body.

        Args:
            data (dict): Raw values keyed by profile column name. Unknown keys
                (rating fields, ids, timestamps) are ignored.

        Returns:
            SkillAssessmentInput: The validated, immutable assessment.

        Raises:
            AssessmentValidationError: If any field is missing or out of range.
        """
        if not isinstance(data, dict):
            raise AssessmentValidationError("profileData", "must be an object")

        values = {
            "experience_months": _check_choice(
                "experience_months", _read_int(data, "experience_months"), EXPERIENCE_BUCKETS
            ),
            "frequency_per_week": _check_choice(
                "frequency_per_week", _read_int(data, "frequency_per_week"), FREQUENCY_OPTIONS
            ),
        }

        low, high = SKILL_SCORE_RANGE
        for _, field in TECHNICAL_SKILLS + AWARENESS_SKILLS:
            values[field] = _check_range(field, _read_int(data, field), low, high)

        values["consistency_score"] = _check_choice(
            "consistency_score", _read_int(data, "consistency_score"), CONSISTENCY_OPTIONS
        )

        play_style = data.get("play_style") or None
        if play_style is not None and play_style not in PLAY_STYLES:
            raise AssessmentValidationError("play_style", f"unknown play style {play_style!r}")
        values["play_style"] = play_style

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def technical_scores(self) -> List[Tuple[str, int]]:
        """Return (skill name, score) pairs in declared order."""
        return [(name, getattr(self, field)) for name, field in TECHNICAL_SKILLS]

    def awareness_scores(self) -> List[Tuple[str, int]]:
        return [(name, getattr(self, field)) for name, field in AWARENESS_SKILLS]


@dataclass(frozen=True)
class ScoreAverages:
    technical_average: float
    awareness_average: float
    experience_value: float


def aggregate_scores(assessment: SkillAssessmentInput) -> ScoreAverages:
    """Collapse an assessment into the averages used by the rating formula.

    Args:
        assessment (SkillAssessmentInput): Validated assessment.

    Returns:
        ScoreAverages: Mean of the 9 technical scores, mean of the 2 awareness
        scores and the mean of experience bucket and weekly frequency.
    """
    technical = [score for _, score in assessment.technical_scores()]
    awareness = [score for _, score in assessment.awareness_scores()]

    technical_average = sum(technical) / len(technical)
    awareness_average = sum(awareness) / len(awareness)
    experience_value = (assessment.experience_months + assessment.frequency_per_week) / 2

    return ScoreAverages(
        technical_average=technical_average,
        awareness_average=awareness_average,
        experience_value=experience_value,
    )
