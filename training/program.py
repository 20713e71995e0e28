"""
================================================================================
TRAINING PROGRAM AND DRILL TEXT
================================================================================

Purpose: Renders the two text blocks stored on a profile after an assessment:
the training program and the recommended drills. Both are fixed templates
filled with the player's focus areas and rating, nothing is generated by a
model.

Program templates sit behind ProgramTemplate so a new revision can be added
without touching callers. The canonical template is the two-week calendar.
================================================================================
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from utils.formatting import format_rating

# =============================================================================
# DRILL LIBRARY
# =============================================================================
# One paragraph per sub-skill, keyed by the names used in focus areas

DRILL_LIBRARY: Dict[str, str] = {
    "Serve": "**Serve Practice**: Set up targets in service boxes. Aim for 8/10 successful serves to each target. Focus on consistent toss and smooth swing.",
    "Return": "**Return Drill**: Have partner serve to you. Focus on returning deep to baseline. Alternate forehand and backhand returns.",
    "Dinks": "**Dinking Ladder**: Start at kitchen line. Dink cross-court for 20 consecutive shots. Then try straight-ahead dinks. Focus on soft touch and control.",
    "Drops": "**Third Shot Drop**: Position at baseline. Partner feeds from kitchen. Practice drops to land in kitchen zone. Aim for 10 good drops in a row.",
    "Resets": "**Reset Drill**: Partner hits fast balls from kitchen. Practice resetting to soft dinks. Focus on absorbing pace.",
    "Volleys": "**Volley Wall**: Partner feeds fast balls. Block back with firm wrist. Alternate forehand and backhand volleys.",
    "Hand speed": "**Reaction Drill**: Stand at kitchen. Partner hits quick shots at you. Practice fast hands and short backswing.",
    "Lobs": "**Lob Targets**: Set targets at baseline. Practice offensive and defensive lobs. Focus on height and depth.",
    "Speedups": "**Attack Drill**: Partner feeds high balls. Practice speedups to feet and middle. Focus on timing.",
    "Positioning": "**Court Awareness**: Play points focusing only on position. After each shot, move to optimal spot before next shot.",
    "Anticipation": "**Read and React**: Partner alternates shots. Practice reading paddle angle and body position to anticipate next shot.",
}

DRILLS_HEADER = "**Recommended Drills for Your Focus Areas:**\n\n"

WARM_UP_SUFFIX = (
    "**General Warm-up (before each session):**\n"
    "- 5 minutes of dynamic stretching\n"
    "- 3 minutes of footwork patterns (split-step, side shuffle)\n"
    "- 2 minutes of paddle work (wrist rolls, shadow swings)\n"
)

PLAN_SLOTS = 3


def drill_for(area: str) -> str:
    """Return the drill paragraph for a focus area, or a generic one."""
    return DRILL_LIBRARY.get(area, f"Practice {area} with focus on form and consistency.")


def generate_drills(focus_areas: Sequence[str]) -> str:
    """Render the numbered drill listing for the given focus areas.

    Example:
        >>> generate_drills(["Footwork"]).splitlines()[2]
        '1. Practice Footwork with focus on form and consistency.'
    """
    drills = DRILLS_HEADER
    for index, area in enumerate(focus_areas, start=1):
        drills += f"{index}. {drill_for(area)}\n\n"
    drills += WARM_UP_SUFFIX
    return drills


def pad_focus_areas(focus_areas: Sequence[str], slots: int = PLAN_SLOTS) -> List[str]:
    """Fill a short focus list up to `slots` entries by repeating the first area.

    Raises:
        ValueError: If focus_areas is empty.
    """
    if not focus_areas:
        raise ValueError("At least one focus area is required to build a training program")
    padded = list(focus_areas[:slots])
    while len(padded) < slots:
        padded.append(padded[0])
    return padded


def experience_level(experience_months: int) -> str:
    """Map the experience bucket code to beginner/intermediate/advanced."""
    if experience_months <= 1:
        return "beginner"
    if experience_months <= 3:
        return "intermediate"
    return "advanced"


# =============================================================================
# PROGRAM TEMPLATES
# =============================================================================

class ProgramTemplate(ABC):
    """A named way of rendering a training program from focus areas."""

    name = "base"

    @abstractmethod
    def render(self, focus_areas: Sequence[str], displayed_rating: float,
               experience_months: int, frequency_per_week: int) -> str:
        """Return the program text. Must accept 1-3 focus areas."""


class TwoWeekProgramTemplate(ProgramTemplate):
    """Two-week calendar: one week of foundations, one week of applying them."""

    name = "two_week"

    def render(self, focus_areas, displayed_rating, experience_months, frequency_per_week):
        first, second, third = pad_focus_areas(focus_areas)
        level = experience_level(experience_months)
        current = format_rating(displayed_rating)
        target = format_rating(displayed_rating + 0.5)

        if level == "beginner":
            partners = "patient partners"
        else:
            partners = "players at or slightly above your level"

        program = f"**Your Two-Week Training Plan ({current} → {target})**\n\n"

        program += "**Week 1: Build Foundation**\n"
        program += f"- Day 1-2: Focus on {first} fundamentals. Practice slow, controlled repetitions.\n"
        program += f"- Day 3-4: Work on {second}. Combine with footwork drills.\n"
        program += f"- Day 5-6: Integrate {third} into live play situations.\n"
        program += "- Day 7: Rest and video review.\n\n"

        program += "**Week 2: Apply and Refine**\n"
        program += "- Day 1-2: Combine all three focus areas in drills.\n"
        program += f"- Day 3-4: Practice game scenarios emphasizing {first} and {second}.\n"
        program += "- Day 5-6: Play matches focusing on consistency over power.\n"
        program += "- Day 7: Self-assessment and goal adjustment.\n\n"

        program += "**Key Principles:**\n"
        program += "- Warm up for 10 minutes before each session\n"
        program += "- Focus on form over speed initially\n"
        program += "- Record progress in a journal\n"
        program += f"- Play with {partners}\n"

        return program


DEFAULT_TEMPLATE = TwoWeekProgramTemplate()


def generate_training_program(focus_areas: Sequence[str], displayed_rating: float,
                              experience_months: int, frequency_per_week: int,
                              template: ProgramTemplate = None) -> str:
    """Render the training program with the given template (two-week by default)."""
    template = template or DEFAULT_TEMPLATE
    return template.render(focus_areas, displayed_rating, experience_months, frequency_per_week)
