"""
Client for the deployed generate-training-program function
"""

import os
import logging
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv

from utils.validation import redact_sensitive

logger = logging.getLogger(__name__)

FUNCTION_PATH = "/functions/v1/generate-training-program"
REQUEST_TIMEOUT = 30


class FunctionInvocationError(RuntimeError):
    """Raised when the training program function does not answer with success."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def get_function_url() -> str:
    """
    Resolve the function URL: TRAINING_PROGRAM_FUNCTION_URL if set,
    otherwise the Supabase Edge Function path under SUPABASE_URL
    """
    load_dotenv()
    explicit_url = os.environ.get("TRAINING_PROGRAM_FUNCTION_URL")
    if explicit_url:
        return explicit_url
    supabase_url = os.environ.get("SUPABASE_URL", "").rstrip("/")
    if not supabase_url:
        raise FunctionInvocationError("Neither TRAINING_PROGRAM_FUNCTION_URL nor SUPABASE_URL is set")
    return supabase_url + FUNCTION_PATH


def invoke_training_program_function(user_id: str, profile_data: Dict[str, Any],
                                     url: Optional[str] = None,
                                     api_key: Optional[str] = None) -> Dict[str, Any]:
    """
    POST {userId, profileData} to the training program function.

    Args:
        user_id: Profile id the plan is generated for
        profile_data: Assessment answers plus the computed rating fields
        url: Function URL, resolved from the environment when omitted
        api_key: Bearer key, SUPABASE_ANON_KEY when omitted

    Returns:
        dict: The success body ({success, focusAreas, nextLevelTarget})
    """
    url = url or get_function_url()
    api_key = api_key or os.environ.get("SUPABASE_ANON_KEY", "")

    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    payload = {"userId": user_id, "profileData": profile_data}
    logger.info(f"Invoking training program function at {url} for {user_id} {redact_sensitive(headers)}")

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.error(f"Network error calling training program function: {e}")
        raise FunctionInvocationError(f"Network error: {e}") from e

    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    if response.status_code != 200 or not body.get("success"):
        message = body.get("error") or f"Status {response.status_code}"
        logger.error(f"Training program function failed for {user_id}: {message}")
        raise FunctionInvocationError(message, status_code=response.status_code)

    return body
