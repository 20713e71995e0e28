"""Tests for assessment parsing, validation and score aggregation."""

import pytest

from training.assessment import (
    AWARENESS_SKILLS,
    TECHNICAL_SKILLS,
    AssessmentValidationError,
    SkillAssessmentInput,
    aggregate_scores,
)
from tests.conftest import make_assessment


class TestFromDict:

    def test_valid_answers_parse(self):
        assessment = SkillAssessmentInput.from_dict(make_assessment())
        assert assessment.serve_score == 3
        assert assessment.consistency_score == 2
        assert assessment.play_style == "Keep the ball in play"

    def test_extra_keys_are_ignored(self):
        data = make_assessment(id="player-1", displayed_rating=3.0, badge_name="Intermediate")
        assessment = SkillAssessmentInput.from_dict(data)
        assert "displayed_rating" not in assessment.to_dict()

    @pytest.mark.parametrize("field", [field for _, field in TECHNICAL_SKILLS + AWARENESS_SKILLS])
    def test_missing_skill_score_names_field(self, field):
        data = make_assessment()
        del data[field]
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(data)
        assert exc_info.value.field == field

    def test_none_counts_as_missing(self):
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(make_assessment(consistency_score=None))
        assert exc_info.value.field == "consistency_score"
        assert "required" in str(exc_info.value)

    @pytest.mark.parametrize("value", [0, 6, -1])
    def test_skill_score_out_of_range(self, value):
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(make_assessment(dink_score=value))
        assert exc_info.value.field == "dink_score"

    def test_consistency_above_four_rejected(self):
        with pytest.raises(AssessmentValidationError):
            SkillAssessmentInput.from_dict(make_assessment(consistency_score=5))

    def test_frequency_must_be_a_form_option(self):
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(make_assessment(frequency_per_week=2))
        assert exc_info.value.field == "frequency_per_week"

    def test_experience_bucket_above_four_rejected(self):
        with pytest.raises(AssessmentValidationError):
            SkillAssessmentInput.from_dict(make_assessment(experience_months=12))

    def test_boolean_is_not_a_score(self):
        with pytest.raises(AssessmentValidationError):
            SkillAssessmentInput.from_dict(make_assessment(serve_score=True))

    def test_fractional_score_rejected(self):
        with pytest.raises(AssessmentValidationError):
            SkillAssessmentInput.from_dict(make_assessment(serve_score=3.5))

    def test_whole_float_accepted(self):
        assessment = SkillAssessmentInput.from_dict(make_assessment(serve_score=4.0))
        assert assessment.serve_score == 4

    @pytest.mark.parametrize("value", ["3", "--3", "\u00b2", "3a", float("nan"), float("inf")])
    def test_strings_and_non_finite_floats_rejected(self, value):
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(make_assessment(serve_score=value))
        assert exc_info.value.field == "serve_score"

    def test_unknown_play_style_rejected(self):
        with pytest.raises(AssessmentValidationError) as exc_info:
            SkillAssessmentInput.from_dict(make_assessment(play_style="Bangers only"))
        assert exc_info.value.field == "play_style"

    def test_empty_play_style_allowed(self):
        assessment = SkillAssessmentInput.from_dict(make_assessment(play_style=""))
        assert assessment.play_style is None

    def test_non_dict_rejected(self):
        with pytest.raises(AssessmentValidationError):
            SkillAssessmentInput.from_dict(["serve", 3])


class TestAggregateScores:

    def test_all_threes(self):
        averages = aggregate_scores(SkillAssessmentInput.from_dict(make_assessment()))
        assert averages.technical_average == 3
        assert averages.awareness_average == 3
        assert averages.experience_value == 0.5

    def test_mixed_scores(self):
        data = make_assessment(
            serve_score=5, return_score=4, dink_score=1,
            positioning_score=5, anticipation_score=2,
            experience_months=4, frequency_per_week=4,
        )
        averages = aggregate_scores(SkillAssessmentInput.from_dict(data))
        assert averages.technical_average == pytest.approx((5 + 4 + 1 + 3 * 6) / 9)
        assert averages.awareness_average == 3.5
        assert averages.experience_value == 4

    def test_skill_order_matches_declaration(self):
        assessment = SkillAssessmentInput.from_dict(make_assessment())
        names = [name for name, _ in assessment.technical_scores()]
        assert names[:3] == ["Serve", "Return", "Dinks"]
        assert [name for name, _ in assessment.awareness_scores()] == ["Positioning", "Anticipation"]
