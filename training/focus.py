"""Focus area selection for training plans.

Picks up to three sub-skills a player should work on next. The order of the
returned names is the order of the plan's training blocks.
"""

from typing import List

from training.assessment import SkillAssessmentInput

FOCUS_AREA_COUNT = 3
WEAKNESS_THRESHOLD = 2


def select_focus_areas(assessment: SkillAssessmentInput) -> List[str]:
    """Select the focus areas for an assessment.

    Technical skills are sorted by score (ties keep declared order) and the
    lowest three form the fallback list. Every skill scored 2 or lower counts
    as a weakness: sorted technical ones first, then Positioning and
    Anticipation in that fixed order. Awareness weaknesses are appended, not
    ranked against the technical ones.

    - 3+ weaknesses: the first three of them
    - 1-2 weaknesses: all of them, topped up from the lowest technical skills
    - none: the three lowest technical skills

    Args:
        assessment (SkillAssessmentInput): Validated assessment.

    Returns:
        list[str]: One to three distinct skill names.
    """
    # sorted() is stable, so equal scores keep the declared skill order
    sorted_technical = sorted(assessment.technical_scores(), key=lambda item: item[1])
    weakest = [name for name, _ in sorted_technical[:FOCUS_AREA_COUNT]]

    all_weaknesses = [name for name, score in sorted_technical if score <= WEAKNESS_THRESHOLD]
    all_weaknesses += [
        name for name, score in assessment.awareness_scores() if score <= WEAKNESS_THRESHOLD
    ]

    if len(all_weaknesses) >= FOCUS_AREA_COUNT:
        return all_weaknesses[:FOCUS_AREA_COUNT]

    if all_weaknesses:
        focus_areas = list(all_weaknesses)
        for name in weakest:
            if len(focus_areas) >= FOCUS_AREA_COUNT:
                break
            if name not in focus_areas:
                focus_areas.append(name)
        return focus_areas

    return weakest
