"""FitBot Shared Utilities"""

from .errors import ErrorCode, FitbotException
from .types import RecordId, PointsMapping
from .cors import CORS_HEADERS, ALLOWED_HEADERS, preflight_response

__all__ = [
    "ErrorCode",
    "FitbotException",
    "RecordId",
    "PointsMapping",
    "CORS_HEADERS",
    "ALLOWED_HEADERS",
    "preflight_response",
]
