"""
FastAPI endpoints for self-assessment ratings and training plans
Hosted on Vercel
"""
import os
import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request, BackgroundTasks
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from training.assessment import AssessmentValidationError
from training.rating import next_level_target
from utils import db
from utils.formatting import format_progress, format_timestamp, split_focus_areas
from utils.plan_jobs import (
    DONE,
    PENDING,
    generate_training_plan_for_user,
    run_plan_job,
    run_remote_plan_job,
    submit_assessment,
)
from utils.validation import validate_user_id

logger = logging.getLogger(__name__)

app = FastAPI(title="PaddleTrack Training API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)


class SelfAssessmentRequest(BaseModel):
    userId: str
    assessment: Dict[str, Any]


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"error": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


@app.get("/")
async def root():
    return {"message": "PaddleTrack Training API", "version": "1.0.0"}


@app.post("/generate-training-program")
async def generate_training_program(request: Request):
    """
    Build and store the training plan for a player
    Body: {"userId": ..., "profileData": {...}}
    profileData may be omitted, the stored assessment is used instead
    """
    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Request body must be JSON")

    if not isinstance(body, dict):
        return _error(400, "Request body must be an object")

    user_id = body.get("userId")
    is_valid, message = validate_user_id(user_id)
    if not is_valid:
        return _error(400, message)

    try:
        profile_data = body.get("profileData")
        if not profile_data:
            profile_data = db.get_assessment_profile(user_id)
            if not profile_data:
                return _error(400, f"No assessment found for {user_id}")

        plan = generate_training_plan_for_user(user_id, profile_data)
    except AssessmentValidationError as e:
        return _error(400, str(e), field=e.field)
    except (db.PersistenceError, db.SupabaseConfigError) as e:
        logger.error(f"Error generating training program for {user_id}: {e}")
        return _error(500, str(e))

    return {
        "success": True,
        "focusAreas": plan.top_three_focus_areas,
        "nextLevelTarget": plan.next_level_target,
    }


@app.post("/self-assessment")
async def self_assessment(payload: SelfAssessmentRequest, background_tasks: BackgroundTasks):
    """
    Rate a finished self-assessment and queue its training plan
    The rating comes back immediately, the plan is tracked by a job
    """
    is_valid, message = validate_user_id(payload.userId)
    if not is_valid:
        return _error(400, message)

    try:
        result = submit_assessment(payload.userId, payload.assessment)
    except AssessmentValidationError as e:
        return _error(422, e.message, field=e.field)
    except (db.PersistenceError, db.SupabaseConfigError) as e:
        logger.error(f"Error saving assessment for {payload.userId}: {e}")
        return _error(500, str(e))

    # With a deployed function configured, plan generation runs there
    if os.environ.get("TRAINING_PROGRAM_FUNCTION_URL"):
        runner = run_remote_plan_job
    else:
        runner = run_plan_job
    background_tasks.add_task(runner, result.job_id, result.user_id, result.profile_data)

    rating = result.rating
    return {
        "success": True,
        "rating": {
            "displayedRating": rating.displayed_rating,
            "badgeName": rating.badge_name,
            "progressPercent": rating.progress_percent,
            "nextLevelTarget": next_level_target(rating.displayed_rating),
        },
        "jobId": result.job_id,
        "jobStatus": PENDING,
    }


@app.get("/training-plan-jobs/{job_id}")
async def get_training_plan_job(job_id: str):
    """Job status for clients polling after an assessment"""
    try:
        job = db.get_plan_job(job_id)
    except (db.PersistenceError, db.SupabaseConfigError) as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return {
        "jobId": job["id"],
        "userId": job.get("user_id"),
        "status": job.get("status"),
        "error": job.get("error"),
        "createdAt": job.get("created_at"),
        "updatedAt": job.get("updated_at"),
    }


@app.get("/training-plan/{user_id}")
async def get_training_plan(user_id: str):
    """
    Training dashboard data: rating, badge, focus areas, program and drills
    """
    try:
        profile = db.get_training_profile(user_id)
        if not profile or profile.get("displayed_rating") is None:
            raise HTTPException(status_code=404, detail="No self-assessment found")
        job = db.get_latest_plan_job(user_id)
    except HTTPException:
        raise
    except (db.PersistenceError, db.SupabaseConfigError) as e:
        raise HTTPException(status_code=500, detail=str(e))

    if job:
        plan_status = job.get("status")
    elif profile.get("training_program"):
        plan_status = DONE
    else:
        plan_status = None

    return {
        "displayedRating": profile["displayed_rating"],
        "badgeName": profile.get("badge_name"),
        "progressPercent": profile.get("progress_percent"),
        "progressLabel": format_progress(profile.get("progress_percent")),
        "nextLevelTarget": profile.get("next_level_target"),
        "focusAreas": split_focus_areas(profile.get("top_three_focus_areas")),
        "trainingProgram": profile.get("training_program"),
        "recommendedDrills": profile.get("recommended_drills"),
        "aiGeneratedAt": profile.get("ai_generated_at"),
        "aiGeneratedAtLabel": format_timestamp(profile.get("ai_generated_at")),
        "planStatus": plan_status,
    }


# For Vercel
@app.get("/api/health")
async def health_check():
    return {"status": "healthy"}
