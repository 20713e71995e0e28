"""Training plan derivation.

Combines focus area selection and the text templates into the plan that is
written back onto a profile. Focus areas are always recomputed here from the
raw scores, never taken from the caller.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from training.assessment import SkillAssessmentInput
from training.focus import select_focus_areas
from training.program import ProgramTemplate, generate_drills, generate_training_program
from training.rating import next_level_target
from utils.formatting import join_focus_areas


@dataclass(frozen=True)
class TrainingPlan:
    top_three_focus_areas: List[str]
    training_program: str
    recommended_drills: str
    next_level_target: float
    ai_generated_at: datetime

    def to_profile_fields(self) -> Dict[str, Any]:
        """Columns written to the profile row, focus areas comma-joined."""
        return {
            "top_three_focus_areas": join_focus_areas(self.top_three_focus_areas),
            "training_program": self.training_program,
            "recommended_drills": self.recommended_drills,
            "next_level_target": self.next_level_target,
            "ai_generated_at": self.ai_generated_at.isoformat(),
        }


def build_training_plan(assessment: SkillAssessmentInput, displayed_rating: float,
                        template: Optional[ProgramTemplate] = None,
                        now: Optional[datetime] = None) -> TrainingPlan:
    """Build the full training plan for an assessed player.

    Args:
        assessment (SkillAssessmentInput): Validated raw scores.
        displayed_rating (float): Half-point rating already shown to the player.
        template (ProgramTemplate, optional): Program template. Defaults to the
            two-week template.
        now (datetime, optional): Generation timestamp. Defaults to current UTC.

    Returns:
        TrainingPlan: The complete plan. Every reassessment replaces it whole.
    """
    focus_areas = select_focus_areas(assessment)

    training_program = generate_training_program(
        focus_areas,
        displayed_rating,
        assessment.experience_months,
        assessment.frequency_per_week,
        template=template,
    )

    return TrainingPlan(
        top_three_focus_areas=focus_areas,
        training_program=training_program,
        recommended_drills=generate_drills(focus_areas),
        next_level_target=next_level_target(displayed_rating),
        ai_generated_at=now or datetime.now(timezone.utc),
    )
