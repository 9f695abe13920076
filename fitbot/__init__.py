"""
FitBot Onboarding API
=====================
Questionnaire, scoring and AI fitness-advisor handlers.
"""

__version__ = "1.0.0"
