"""
Chat-Completion Client
======================
Single blocking request per call. No retry, no streaming.

Failures raise FitbotException:
- missing API key            -> CONFIGURATION_ERROR
- transport error / timeout  -> AI_API_ERROR
- non-2xx status             -> AI_API_ERROR (status + upstream body in details)
- missing/empty choices[0]   -> AI_API_ERROR
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from fitbot.config import Settings
from fitbot.shared.errors import ErrorCode, FitbotException

from .models import TEMPERATURE

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"


def _upstream_error(message: str, status: Optional[int] = None, body: Any = None) -> FitbotException:
    return FitbotException(
        ErrorCode.AI_API_ERROR,
        message,
        details={"status": status, "details": body},
    )


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_content(data: Any) -> str:
    """Return choices[0].message.content or raise AI_API_ERROR."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        raise _upstream_error("OpenAI API error", body=data)

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if content is None:
        raise _upstream_error("OpenAI API error", body=data)
    return content


def request_completion(settings: Settings, prompt: str, max_tokens: int) -> Tuple[str, Dict[str, Any]]:
    """
    Send one user message to the completion API.

    Returns (generated text, full upstream response).
    """
    if not settings.openai_api_key:
        raise FitbotException(ErrorCode.CONFIGURATION_ERROR, "OPENAI_API_KEY not found in environment")

    payload = {
        "model": settings.openai_model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": max_tokens,
        "temperature": TEMPERATURE,
    }
    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "Content-Type": "application/json",
    }

    try:
        with httpx.Client(timeout=settings.openai_timeout_seconds) as client:
            response = client.post(
                f"{settings.openai_base_url}{CHAT_COMPLETIONS_ENDPOINT}",
                json=payload,
                headers=headers,
            )
    except httpx.TimeoutException:
        logger.error(f"Completion request timed out after {settings.openai_timeout_seconds}s")
        raise _upstream_error(f"OpenAI API request timed out after {settings.openai_timeout_seconds}s")
    except httpx.HTTPError as e:
        logger.error(f"Completion request failed: {e}")
        raise _upstream_error(f"Cannot reach OpenAI API: {e}")

    data = _parse_body(response)
    if response.status_code < 200 or response.status_code >= 300:
        logger.error(f"Completion API returned HTTP {response.status_code}")
        raise _upstream_error("OpenAI API error", status=response.status_code, body=data)

    try:
        content = extract_content(data)
    except FitbotException as e:
        e.details["status"] = response.status_code
        raise
    return content, data
