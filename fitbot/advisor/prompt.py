"""
Fitness Plan Prompt

BMI is used only for prompt text, never for scoring.
"""

from fitbot.shared.errors import invalid_request

from .models import UserProfile


# Upper bound (exclusive) -> category; anything above the last is Obese.
BMI_CATEGORIES = [
    (18.5, "Underweight"),
    (25.0, "Normal weight"),
    (30.0, "Overweight"),
]

FITNESS_PLAN_TEMPLATE = """Create a personalized fitness plan for:
- Name: {name} {surname}
- Age: {age}
- BMI: {bmi:.1f} ({category})
- Fitness Level: {fitness_level}/5 (1=Beginner, 5=Advanced)
- Risk Factor: {risk_factor} risk
- Height: {height}cm, Weight: {weight}kg

Please provide:
1. Weekly workout schedule
2. Exercise recommendations based on fitness level
3. Safety considerations based on risk factor
4. Progression plan
5. Nutrition tips

Keep it practical and actionable."""


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    for upper_bound, category in BMI_CATEGORIES:
        if bmi < upper_bound:
            return category
    return "Obese"


def _format_measure(value: float) -> str:
    # 180.0 -> "180", 72.5 -> "72.5"
    return f"{value:g}"


def build_fitness_prompt(user: UserProfile) -> str:
    if not user.height or user.weight is None:
        raise invalid_request("User profile is missing height or weight")

    bmi = calculate_bmi(user.height, user.weight)
    return FITNESS_PLAN_TEMPLATE.format(
        name=user.name,
        surname=user.surname,
        age=user.age,
        bmi=bmi,
        category=bmi_category(bmi),
        fitness_level=user.fitness_level,
        risk_factor=user.risk_factor,
        height=_format_measure(user.height),
        weight=_format_measure(user.weight),
    )
