"""Tests for focus area selection."""

from training.assessment import SkillAssessmentInput
from training.focus import select_focus_areas
from tests.conftest import make_assessment


def _focus(**scores):
    return select_focus_areas(SkillAssessmentInput.from_dict(make_assessment(**scores)))


def test_no_weaknesses_uses_lowest_technical_in_declared_order():
    assert _focus() == ["Serve", "Return", "Dinks"]


def test_three_technical_weaknesses_sorted_by_score():
    focus = _focus(serve_score=1, return_score=2, dink_score=1, lob_score=2)
    assert focus == ["Serve", "Dinks", "Return"]


def test_awareness_weakness_topped_up_from_lowest_technical():
    focus = _focus(
        serve_score=4, return_score=4, dink_score=4, drop_score=4, reset_score=4,
        volley_score=4, hand_speed_score=4, lob_score=3, speedup_score=4,
        positioning_score=2,
    )
    assert focus == ["Positioning", "Lobs", "Serve"]


def test_awareness_weaknesses_only_follow_technical_ones():
    # Positioning is the lowest score but technical weaknesses fill the list first
    focus = _focus(serve_score=2, return_score=2, dink_score=2, positioning_score=1)
    assert focus == ["Serve", "Return", "Dinks"]


def test_mixed_weaknesses_keep_technical_first():
    focus = _focus(lob_score=2, anticipation_score=1)
    assert focus == ["Lobs", "Anticipation", "Serve"]


def test_top_up_skips_areas_already_selected():
    focus = _focus(serve_score=1)
    assert focus == ["Serve", "Return", "Dinks"]
    assert len(set(focus)) == len(focus)


def test_both_awareness_weaknesses_and_one_technical():
    focus = _focus(speedup_score=1, positioning_score=2, anticipation_score=2)
    assert focus == ["Speedups", "Positioning", "Anticipation"]


def test_selection_is_stable_across_calls():
    assessment = SkillAssessmentInput.from_dict(make_assessment(volley_score=2, reset_score=2))
    assert select_focus_areas(assessment) == select_focus_areas(assessment)


def test_three_technical_ones_in_declared_order():
    scores = {field: 5 for field in [
        "serve_score", "return_score", "dink_score", "drop_score", "reset_score", "volley_score",
        "hand_speed_score", "lob_score", "speedup_score", "positioning_score", "anticipation_score",
    ]}
    scores.update(lob_score=1, serve_score=1, dink_score=1)
    assert _focus(**scores) == ["Serve", "Dinks", "Lobs"]
