"""
FitBot Error Taxonomy
=====================
Every failure surfaces to the client as HTTP 400 with an ``error`` message.
The code is kept for logging and tests; it never changes the status.

Kinds:
- CONFIGURATION_ERROR: missing API key or store credentials
- STORE_ERROR: any query/mutation failure in the relational store
- NOT_FOUND: no form for slug, no run for user, no user profile
- INVALID_REQUEST: malformed body, unknown action, missing ids
- RUN_ALREADY_SUBMITTED: write attempted on a terminal run
- AI_API_ERROR: upstream completion failure or malformed completion
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    STORE_ERROR = "STORE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    RUN_ALREADY_SUBMITTED = "RUN_ALREADY_SUBMITTED"
    AI_API_ERROR = "AI_API_ERROR"


class FitbotException(Exception):
    """Exception carrying an error code, client message and optional details."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        http_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.http_code = http_code
        self.details = details or {}
        super().__init__(f"{error_code.value}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


def not_found(message: str) -> FitbotException:
    return FitbotException(ErrorCode.NOT_FOUND, message)


def invalid_request(message: str) -> FitbotException:
    return FitbotException(ErrorCode.INVALID_REQUEST, message)
