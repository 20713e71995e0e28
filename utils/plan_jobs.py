"""
================================================================================
ASSESSMENT SUBMISSION AND TRAINING PLAN JOBS
================================================================================

Purpose: Orchestrates the two steps that follow a finished self-assessment.

1. submit_assessment(): validate, rate, save the rating and open a pending
   plan job. The rating is returned at once so it can be shown right away.
2. run_plan_job(): build the training plan, save it and mark the job done,
   or failed with the error message. Runs after the response is sent.

Every plan generation is tracked by a job row, so a player whose plan never
arrived can be shown a failed state instead of an empty dashboard.

Concurrent reassessments from the same player are not serialized: the last
write wins for both the rating and the plan.
================================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import math

from training.assessment import AssessmentValidationError, SkillAssessmentInput
from training.plan import TrainingPlan, build_training_plan
from training.rating import DISPLAYED_RATING_RANGE, RatingResult, assess, quantize_rating
from utils import db
from utils.functions_client import invoke_training_program_function

logger = logging.getLogger(__name__)

PENDING = "pending"
DONE = "done"
FAILED = "failed"


@dataclass(frozen=True)
class SubmissionResult:
    user_id: str
    rating: RatingResult
    job_id: Any
    profile_data: Dict[str, Any]


def submit_assessment(user_id: str, data: Dict[str, Any]) -> SubmissionResult:
    """Rate a submitted assessment, save it and open a plan job.

    Args:
        user_id (str): Profile id of the player.
        data (dict): Raw assessment answers.

    Returns:
        SubmissionResult: Rating, the pending job id and the profile data
        (answers plus rating fields) for plan generation.

    Raises:
        AssessmentValidationError: If the answers are incomplete or invalid.
        PersistenceError: If the rating or the job could not be saved. The
            answers are not lost, the player can submit again.
    """
    # The form refuses to finish without a play style
    if not (data or {}).get("play_style"):
        raise AssessmentValidationError("play_style", "is required")

    assessment, rating = assess(data).unwrap()

    db.save_assessment(user_id, assessment, rating)
    job = db.create_plan_job(user_id)

    profile_data = assessment.to_dict()
    profile_data.update(rating.to_profile_fields())

    logger.info(f"Assessment submitted for {user_id}, plan job {job['id']} pending")
    return SubmissionResult(user_id=user_id, rating=rating, job_id=job["id"], profile_data=profile_data)


def _displayed_rating_from(profile_data: Dict[str, Any], assessment: SkillAssessmentInput) -> float:
    """Use the already shown rating when present, otherwise recompute it."""
    displayed_rating = profile_data.get("displayed_rating")
    if displayed_rating is None:
        _, rating = assess(assessment.to_dict()).unwrap()
        return rating.displayed_rating
    if isinstance(displayed_rating, bool) or not isinstance(displayed_rating, (int, float)):
        raise AssessmentValidationError("displayed_rating", f"must be a number, got {displayed_rating!r}")

    displayed_rating = float(displayed_rating)
    # NaN and infinity parse from JSON but would end up in the program text
    if not math.isfinite(displayed_rating):
        raise AssessmentValidationError("displayed_rating", f"must be finite, got {displayed_rating!r}")
    low, high = DISPLAYED_RATING_RANGE
    if not low <= displayed_rating <= high or quantize_rating(displayed_rating) != displayed_rating:
        raise AssessmentValidationError(
            "displayed_rating", f"must be a multiple of 0.5 between {low} and {high}, got {displayed_rating}"
        )
    return displayed_rating


def generate_training_plan_for_user(user_id: str, profile_data: Dict[str, Any]) -> TrainingPlan:
    """Build a training plan from profile data and save it on the profile.

    Raises:
        AssessmentValidationError: If profile_data lacks a required score.
        PersistenceError: If the plan could not be saved.
    """
    assessment = SkillAssessmentInput.from_dict(profile_data)
    displayed_rating = _displayed_rating_from(profile_data, assessment)

    plan = build_training_plan(assessment, displayed_rating)
    db.save_training_plan(user_id, plan)
    return plan


def run_plan_job(job_id: Any, user_id: str, profile_data: Dict[str, Any]) -> Optional[TrainingPlan]:
    """Run one plan job to completion and record its outcome.

    Meant to run as a background task, so failures are recorded on the job
    row and logged instead of raised. Returns the plan, or None on failure.
    """
    try:
        plan = generate_training_plan_for_user(user_id, profile_data)
    except Exception as e:
        logger.error(f"Plan job {job_id} for {user_id} failed: {e}")
        try:
            db.update_plan_job(job_id, FAILED, error=str(e))
        except db.PersistenceError as update_error:
            logger.error(f"Could not mark plan job {job_id} as failed: {update_error}")
        return None

    try:
        db.update_plan_job(job_id, DONE)
    except db.PersistenceError as e:
        # The plan itself is saved; only the job row is stale
        logger.warning(f"Plan job {job_id} finished but status update failed: {e}")
    logger.info(f"Plan job {job_id} for {user_id} done")
    return plan


def run_remote_plan_job(job_id: Any, user_id: str, profile_data: Dict[str, Any]) -> bool:
    """Run a plan job through the deployed function instead of in-process.

    The remote function saves the plan itself; this only records whether it
    answered with success. Returns True when the job is done.
    """
    try:
        invoke_training_program_function(user_id, profile_data)
    except Exception as e:
        logger.error(f"Remote plan job {job_id} for {user_id} failed: {e}")
        try:
            db.update_plan_job(job_id, FAILED, error=str(e))
        except db.PersistenceError as update_error:
            logger.error(f"Could not mark plan job {job_id} as failed: {update_error}")
        return False

    try:
        db.update_plan_job(job_id, DONE)
    except db.PersistenceError as e:
        logger.warning(f"Remote plan job {job_id} finished but status update failed: {e}")
    return True
