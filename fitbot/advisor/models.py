"""
AI Advisor Models

- AdvisorRequest: endpoint body (production or test mode)
- UserProfile: the user fields the plan prompt needs
"""

from typing import Optional

from pydantic import BaseModel, Field

from fitbot.shared.types import RecordId


DEFAULT_TEST_PROMPT = "Say hello world"

TEST_MAX_TOKENS = 50
PRODUCTION_MAX_TOKENS = 1500
TEMPERATURE = 0.7

USER_PROFILE_COLUMNS = [
    "name", "surname", "height", "weight", "age", "fitness_level", "risk_factor",
]


class AdvisorRequest(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}

    user_id: Optional[RecordId] = Field(default=None, alias="userId")
    test_mode: bool = Field(default=False, alias="testMode")
    test_prompt: Optional[str] = Field(default=None, alias="testPrompt")


class UserProfile(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    height: Optional[float] = None  # cm
    weight: Optional[float] = None  # kg
    age: Optional[int] = None
    fitness_level: Optional[int] = None
    risk_factor: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.surname}"


TEST_USER = UserProfile(name="Test", surname="User")
