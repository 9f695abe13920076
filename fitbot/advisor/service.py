"""
AI Advisor

Production mode: load the user's profile, render the plan prompt, relay it.
Test mode: relay a caller-supplied prompt for a synthetic user; the store is
not touched.
"""

import logging
from typing import Any, Callable, ContextManager, Dict

from fitbot.config import Settings
from fitbot.db import USERS_TABLE, TableClient
from fitbot.shared.errors import invalid_request, not_found

from .client import request_completion
from .models import (
    DEFAULT_TEST_PROMPT,
    PRODUCTION_MAX_TOKENS,
    TEST_MAX_TOKENS,
    TEST_USER,
    USER_PROFILE_COLUMNS,
    AdvisorRequest,
    UserProfile,
)
from .prompt import build_fitness_prompt

logger = logging.getLogger(__name__)


def load_user_profile(client: TableClient, user_id: str) -> UserProfile:
    row = client.select_one(USERS_TABLE, columns=USER_PROFILE_COLUMNS, filters={"id": user_id})
    if row is None:
        raise not_found(f"User not found: {user_id}")
    return UserProfile.model_validate(row)


def generate_advice(
    settings: Settings,
    request: AdvisorRequest,
    client_factory: Callable[[Settings], ContextManager[TableClient]],
) -> Dict[str, Any]:
    """Build the prompt for the request's mode and return the advisor payload."""
    if request.test_mode:
        prompt = request.test_prompt or DEFAULT_TEST_PROMPT
        user = TEST_USER
        max_tokens = TEST_MAX_TOKENS
    else:
        if not request.user_id:
            raise invalid_request("userId is required for production mode")
        with client_factory(settings) as client:
            user = load_user_profile(client, request.user_id)
        prompt = build_fitness_prompt(user)
        max_tokens = PRODUCTION_MAX_TOKENS

    logger.info(f"Requesting advice (test_mode={request.test_mode}, max_tokens={max_tokens})")
    content, data = request_completion(settings, prompt, max_tokens)

    response: Dict[str, Any] = {
        "success": True,
        "user": user.display_name,
        "aiRecommendations": content,
        "testMode": request.test_mode,
    }
    if request.test_mode:
        response.update({
            "fullResponse": data,
            "prompt": prompt,
            "usage": data.get("usage"),
        })
    return response
