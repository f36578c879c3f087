"""Prompt rendering for recommendations and chat."""

from enum import Enum

from diet_coach.domain.errors import PreconditionMissing
from diet_coach.domain.history import UserHistory
from diet_coach.domain.logs import DailySummary
from diet_coach.domain.profiles import UserProfile, UserTarget


class MissingFact(str, Enum):
    """Facts the compiler may find absent."""

    PROFILE = "profile"
    TARGET = "target"
    FOOD_LOGS = "foodLogs"
    WATER_LOGS = "waterLogs"
    EXERCISE_LOGS = "exerciseLogs"


class FactPolicy(str, Enum):
    """What to do when a fact is absent."""

    FAIL = "fail"
    PLACEHOLDER = "placeholder"


PLACEHOLDERS: dict[MissingFact, str] = {
    MissingFact.PROFILE: "No physical information provided.",
    MissingFact.TARGET: "No weight target provided.",
    MissingFact.FOOD_LOGS: "No food logs found for the past week.",
    MissingFact.WATER_LOGS: (
        "No water logs found for the past week. Assume normal water intake."
    ),
    MissingFact.EXERCISE_LOGS: "No exercise logs found for the past week.",
}

RECOMMENDATION_POLICY: dict[MissingFact, FactPolicy] = {
    MissingFact.PROFILE: FactPolicy.FAIL,
    MissingFact.TARGET: FactPolicy.FAIL,
    MissingFact.FOOD_LOGS: FactPolicy.FAIL,
    MissingFact.WATER_LOGS: FactPolicy.PLACEHOLDER,
    MissingFact.EXERCISE_LOGS: FactPolicy.PLACEHOLDER,
}

CHAT_POLICY: dict[MissingFact, FactPolicy] = dict.fromkeys(
    MissingFact, FactPolicy.PLACEHOLDER
)

_FOOD_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("Fat", "fat_g", "g"),
    ("Saturated Fat", "saturated_fat_g", "g"),
    ("Unsaturated Fat", "unsaturated_fat_g", "g"),
    ("Trans Fat", "trans_fat_g", "g"),
    ("Cholesterol", "cholesterol_mg", "mg"),
    ("Sodium", "sodium_mg", "mg"),
    ("Carbs", "carbs_g", "g"),
    ("Protein", "protein_g", "g"),
    ("Sugar", "sugar_g", "g"),
    ("Fiber", "fiber_g", "g"),
)

_RECOMMENDATION_TASK = (
    "Task: Generate personalized recommendations under three categories: "
    "Food, Exercise, and Water.\n"
    "Please keep it short and concise.\n"
    "\n"
    "Food description format (adjust based on user data):\n"
    "Today Target Calories: // example: 1800 kcal\n"
    "Carbs: // example: 300 g\n"
    "Protein: // example: 60 g\n"
    "Fat: // example: 50 g\n"
    "Sugar: // example: 50 g\n"
    "\n"
    "Exercise description format (adjust based on user data):\n"
    "This Week Target Cardio: // example: 2 more sessions\n"
    "Weightlifting: // example: 1 more session\n"
    "Yoga: // example: Congratulations, you have done enough!\n"
    "\n"
    "Water description format (adjust based on user data):\n"
    "// example: Drink another 5 glasses of water today"
)

_CHAT_GUIDANCE = (
    "Do not criticize the given info above. "
    "If there is not enough data, start with a general recommendation, "
    "then ask the user for more info. "
    "Do not ask for data that is hard to find or calculate, "
    "for example missing cholesterol or fiber and incomplete exercise logs."
)


def compile_recommendation_prompt(
    history: UserHistory,
    policy: dict[MissingFact, FactPolicy] = RECOMMENDATION_POLICY,
) -> str:
    """Render the daily recommendation prompt."""
    return (
        "Based on this user's information, provide a personalized "
        "recommendation focusing on three main topics: Food, Exercise, "
        "and Water.\n\n"
        f"{_render_sections(history, policy)}\n\n"
        f"{_RECOMMENDATION_TASK}"
    )


def compile_chat_instructions(
    history: UserHistory,
    policy: dict[MissingFact, FactPolicy] = CHAT_POLICY,
) -> str:
    """Render system instructions for the chatbot."""
    return (
        "You are a diet and exercise advisor in a nutrition tracking app. "
        "Only reply to diet and exercise topics. "
        "Here is the information the user entered in the app:\n\n"
        f"{_render_sections(history, policy)}\n\n"
        f"{_CHAT_GUIDANCE}"
    )


def _render_sections(
    history: UserHistory, policy: dict[MissingFact, FactPolicy]
) -> str:
    # resolve in a fixed order so the first missing fact is the one reported
    profile = _resolve(
        history.profile, MissingFact.PROFILE, policy, render_profile
    )
    target = _resolve(history.target, MissingFact.TARGET, policy, render_target)
    food = _resolve(history.food, MissingFact.FOOD_LOGS, policy, render_food_days)
    water = _resolve(
        history.water, MissingFact.WATER_LOGS, policy, render_water_days
    )
    exercise = _resolve(
        history.exercise, MissingFact.EXERCISE_LOGS, policy, render_exercise_days
    )
    return "\n\n".join(
        [
            f"User Physical\n{profile}",
            f"User Target\n{target}",
            f"Food Log (7-day history)\n{food}",
            f"Water Log (7-day history)\n{water}",
            f"Exercise Log (7-day history)\n{exercise}",
        ]
    )


def _resolve(value, fact, policy, render) -> str:  # type: ignore[no-untyped-def]
    if value:
        return render(value)
    if policy.get(fact, FactPolicy.FAIL) is FactPolicy.FAIL:
        raise PreconditionMissing(fact.value)
    return PLACEHOLDERS[fact]


def render_profile(profile: UserProfile) -> str:
    """Render the physical information block."""
    name = " ".join(part for part in (profile.first_name, profile.last_name) if part)
    bmi = profile.bmi
    return "\n".join(
        [
            f"Name: {name or 'unknown'}",
            f"Weight: {_unit(profile.weight_kg, 'kg')}",
            f"Height: {_unit(profile.height_cm, 'cm')}",
            f"BMI: {format_number(bmi, decimals=1) if bmi else 'unknown'}",
            f"Gender: {profile.gender or 'unknown'}",
            f"Medicine: {profile.medical_notes or 'none'}",
            f"Activity levels: {profile.activity_level or 'unknown'}",
        ]
    )


def render_target(target: UserTarget) -> str:
    """Render the weight target block."""
    return (
        f"Target Weight: {_unit(target.target_weight_kg, 'kg')}\n"
        f"Duration: {_unit(target.duration_weeks, ' weeks')}"
    )


def render_food_days(days: list[DailySummary]) -> str:
    """Render one block per day of food totals."""
    blocks = []
    for day in days:
        parts = [f"Calories: {format_number(day.totals.get('calories', 0.0))}"]
        parts.extend(
            f"{label}: {format_number(day.totals.get(key, 0.0))}{unit}"
            for label, key, unit in _FOOD_FIELDS
        )
        blocks.append(f"Date: {day.day.isoformat()}\n" + "; ".join(parts))
    return "\n".join(blocks)


def render_water_days(days: list[DailySummary]) -> str:
    """Render daily water totals."""
    return "\n".join(
        f"Date: {day.day.isoformat()}\n"
        f"Water: {format_number(day.totals.get('volume_ml', 0.0))} ml"
        for day in days
    )


def render_exercise_days(days: list[DailySummary]) -> str:
    """Render daily exercise minutes with a per-category breakdown."""
    blocks = []
    for day in days:
        minutes = format_number(day.totals.get("duration_minutes", 0.0))
        line = f"Exercise: {minutes} minutes"
        if day.breakdown:
            detail = ", ".join(
                f"{name} {format_number(value)} minutes"
                for name, value in day.breakdown.items()
            )
            line = f"{line} ({detail})"
        blocks.append(f"Date: {day.day.isoformat()}\n{line}")
    return "\n".join(blocks)


def format_number(value: float, decimals: int = 1) -> str:
    """Format a number without a trailing ``.0`` for whole values."""
    rounded = round(float(value), decimals)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.{decimals}f}"


def _unit(value: float | None, unit: str) -> str:
    if value is None:
        return "unknown"
    return f"{format_number(value)}{unit}"
