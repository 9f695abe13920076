"""
FitBot AI Advisor

Builds a natural-language fitness-plan prompt from a user's profile (or a
test override) and relays it to a chat-completion API.
"""

from .models import AdvisorRequest, UserProfile, DEFAULT_TEST_PROMPT
from .prompt import calculate_bmi, bmi_category, build_fitness_prompt
from .client import request_completion
from .service import generate_advice
from .router import router as advisor_router

__all__ = [
    "AdvisorRequest",
    "UserProfile",
    "DEFAULT_TEST_PROMPT",
    "calculate_bmi",
    "bmi_category",
    "build_fitness_prompt",
    "request_completion",
    "generate_advice",
    "advisor_router",
]
