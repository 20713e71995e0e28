# Supabase data access layer for the training backend
# This module centralizes all database access operations
# Architecture: FastAPI routes / scripts → utils.plan_jobs → utils.db → Supabase REST API
# Other modules should not import Supabase directly, they should use functions from this module

import os
from datetime import datetime, timezone
from functools import lru_cache
import logging

from dotenv import load_dotenv
from supabase import create_client

from training.assessment import AWARENESS_SKILLS, TECHNICAL_SKILLS

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
JOBS_TABLE = "training_plan_jobs"

# Raw assessment answers as stored on the profile row
ASSESSMENT_COLUMNS = (
    ["experience_months", "frequency_per_week"]
    + [field for _, field in TECHNICAL_SKILLS + AWARENESS_SKILLS]
    + ["consistency_score", "play_style"]
)

# Columns the training dashboard reads
TRAINING_PROFILE_COLUMNS = [
    "displayed_rating",
    "badge_name",
    "progress_percent",
    "top_three_focus_areas",
    "training_program",
    "recommended_drills",
    "next_level_target",
    "ai_generated_at",
]


class SupabaseConfigError(RuntimeError):
    """Raised when Supabase credentials are missing from the environment."""


class PersistenceError(RuntimeError):
    """Raised when a Supabase read or write fails."""


# CONNECTION

# Get a cached Supabase client
# Serverless invocations reuse the process between requests, so the client is
# created once and shared. The service role key is needed because the backend
# writes to profiles on behalf of the player
@lru_cache(maxsize=1)
def get_supabase_client():
    load_dotenv()
    supabase_url = os.environ.get("SUPABASE_URL")
    supabase_key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY") or os.environ.get("SUPABASE_KEY")
    if not supabase_url or not supabase_key:
        raise SupabaseConfigError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_KEY) must be set"
        )
    return create_client(supabase_url, supabase_key)


# INTERNAL HELPERS

def _now_iso():
    return datetime.now(timezone.utc).isoformat()


# Return the first row of a query result or None
def _first_row(result):
    if result.data:
        return result.data[0]
    return None


# PROFILES

# Load the full profile row for a user
def get_profile(user_id):
    try:
        result = get_supabase_client().table(PROFILES_TABLE).select("*").eq("id", user_id).limit(1).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching profile {user_id}: {e}")
        raise PersistenceError(f"Failed to load profile {user_id}") from e
    return _first_row(result)


# Load only the stored assessment answers plus the displayed rating
# The backend recomputes focus areas from these, never from client-sent values
def get_assessment_profile(user_id):
    columns = ", ".join(["id", "displayed_rating"] + ASSESSMENT_COLUMNS)
    try:
        result = get_supabase_client().table(PROFILES_TABLE).select(columns).eq("id", user_id).limit(1).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching assessment for {user_id}: {e}")
        raise PersistenceError(f"Failed to load assessment for {user_id}") from e
    return _first_row(result)


# Save raw answers and the computed rating in one update
# A reassessment overwrites everything, so no merge with the old values is needed
def save_assessment(user_id, assessment, rating):
    update_data = assessment.to_dict()
    update_data.update(rating.to_profile_fields())
    update_data["self_assessment_complete"] = True
    try:
        get_supabase_client().table(PROFILES_TABLE).update(update_data).eq("id", user_id).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error saving assessment for {user_id}: {e}")
        raise PersistenceError(f"Failed to save assessment for {user_id}") from e
    logger.info(f"Saved assessment for {user_id}: {rating.displayed_rating} ({rating.badge_name})")


# Save a generated training plan onto the profile
def save_training_plan(user_id, plan):
    try:
        get_supabase_client().table(PROFILES_TABLE).update(plan.to_profile_fields()).eq("id", user_id).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error saving training plan for {user_id}: {e}")
        raise PersistenceError(f"Failed to save training plan for {user_id}") from e
    logger.info(f"Saved training plan for {user_id}: {', '.join(plan.top_three_focus_areas)}")


# Load the columns shown on the training dashboard
def get_training_profile(user_id):
    columns = ", ".join(TRAINING_PROFILE_COLUMNS)
    try:
        result = get_supabase_client().table(PROFILES_TABLE).select(columns).eq("id", user_id).limit(1).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching training profile {user_id}: {e}")
        raise PersistenceError(f"Failed to load training profile {user_id}") from e
    return _first_row(result)


# Return assessed profiles that never received a training program
# Used by the batch regeneration script to recover failed or lost plan jobs
def get_profiles_missing_plan(limit=100):
    columns = ", ".join(["id", "displayed_rating"] + ASSESSMENT_COLUMNS)
    try:
        result = (
            get_supabase_client()
            .table(PROFILES_TABLE)
            .select(columns)
            .eq("self_assessment_complete", True)
            .is_("training_program", "null")
            .limit(limit)
            .execute()
        )
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching profiles without training plan: {e}")
        raise PersistenceError("Failed to load profiles without training plan") from e
    return result.data or []


# TRAINING PLAN JOBS

# Create a pending job row for a plan generation run
def create_plan_job(user_id):
    timestamp = _now_iso()
    job_data = {
        "user_id": user_id,
        "status": "pending",
        "error": None,
        "created_at": timestamp,
        "updated_at": timestamp,
    }
    try:
        result = get_supabase_client().table(JOBS_TABLE).insert(job_data).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error creating plan job for {user_id}: {e}")
        raise PersistenceError(f"Failed to create plan job for {user_id}") from e
    job = _first_row(result)
    if not job:
        raise PersistenceError(f"Plan job insert for {user_id} returned no row")
    return job


# Move a job to a new status, keeping the error message for failed runs
def update_plan_job(job_id, status, error=None):
    update_data = {"status": status, "error": error, "updated_at": _now_iso()}
    try:
        get_supabase_client().table(JOBS_TABLE).update(update_data).eq("id", job_id).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error updating plan job {job_id}: {e}")
        raise PersistenceError(f"Failed to update plan job {job_id}") from e


def get_plan_job(job_id):
    try:
        result = get_supabase_client().table(JOBS_TABLE).select("*").eq("id", job_id).limit(1).execute()
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching plan job {job_id}: {e}")
        raise PersistenceError(f"Failed to load plan job {job_id}") from e
    return _first_row(result)


# Most recent job for a user, newest first by creation time
def get_latest_plan_job(user_id):
    try:
        result = (
            get_supabase_client()
            .table(JOBS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
    except SupabaseConfigError:
        raise
    except Exception as e:
        logger.error(f"Error fetching latest plan job for {user_id}: {e}")
        raise PersistenceError(f"Failed to load latest plan job for {user_id}") from e
    return _first_row(result)
