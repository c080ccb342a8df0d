"""AI nutrition coach: conversational advice and weekly meal coaching.

Conversations send the user's targets and the last two weeks of entries as
system context, followed by the prior turns the client keeps locally. Weekly
meal coaching runs in two model calls: the first builds a table of recurring
meal slots from the week's entries, the second proposes one or two changes
that close the gap to the targets. Totals and gaps are computed here so the
models never have to add up the raw log.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from food_tracker.domain.coach import (
    ChatMessage,
    MealCoachingReport,
    MealTable,
    RecommendationSet,
    WeekSummary,
)
from food_tracker.domain.entries import NutritionRecord
from food_tracker.domain.goals import GoalContext, GoalDirection
from food_tracker.errors import AnalysisError, ValidationError
from food_tracker.services.frequent_items import round_half_up
from food_tracker.services.goals import goal_direction

_logger = logging.getLogger(__name__)

COACH_ACTION = "coach_conversation"
COACH_HISTORY_DAYS = 14

GOAL_LABELS = {
    GoalDirection.DEFICIT: "CUTTING",
    GoalDirection.SURPLUS: "BULKING",
    GoalDirection.MAINTENANCE: "MAINTENANCE",
}

COACH_SYSTEM_PROMPT = """You are a trusted 1:1 nutrition coach for Indian \
clients: warm and supportive, but direct and practical. Every answer must be \
something the client can act on today.

Understand their current eating pattern before suggesting changes. Prefer
small, sustainable swaps over overhauls: replace the least nutritious habit
first, add nutrition before removing foods, tweak meals they already eat.
Respect Indian dietary patterns and recommend wholesome desi foods; never
suggest extreme diets or red meat.

Write like you are texting a client who trusts you. No bullet points and no
formal headers. Use Indian food words (sabzi, dal, roti, dahi). Keep it to
three to five short paragraphs:
1. Acknowledge what you see in their logs.
2. Name the single biggest opportunity.
3. Suggest one or two specific swaps or additions.
Ask a follow-up question only when the logs are empty or the question cannot
be answered without it. Two weeks of logs is usually enough context."""

MEAL_PATTERN_INSTRUCTIONS = """You are helping a nutrition coach read one \
week of a client's food log. Identify the client's TYPICAL meal slots from \
when they actually eat, not from textbook meal times.

For each slot that occurs at least two or three times in the week:
- name it (Breakfast, Mid-Morning Snack, Lunch, Afternoon Snack, Evening \
Snack, Dinner, Late Night Snack)
- give the usual time range
- list four to six specific foods the client actually ate in that slot
- give the average calories and protein of ONE occurrence (sum the \
occurrences, then divide by how many there were; never report the weekly total)
- give how often it happens, e.g. "Most days (5/7)"

Show patterns, not an audit; approximations within 10-15% are fine. Focus on
Indian foods where relevant.

Return ONLY valid JSON, no markdown:
{"mealTable": [{"meal": "Breakfast", "timing": "7:30 AM - 9:00 AM", \
"examples": ["Paneer paratha with curd", "Poha with peanuts", \
"Oats with banana", "Egg bhurji with toast"], "avgCal": 380, "avgPro": 18, \
"frequency": "Most days (5/7)"}]}"""

RECOMMENDATION_SYSTEM_PROMPT = """You are an expert nutrition coach giving \
surgical recommendations from a client's meal pattern table. Use at most two \
changes, and their net effects must add up to the gap between current and \
target intake. Skip anything under 100 kcal or 10 g protein; if the gap is \
that small, say the client is on track. Each recommendation is one line in \
the form "ACTION what -> Net: +Xcal, +Yg", aimed at the meal slot with the \
biggest opportunity. Prefer Indian foods such as paneer, dal, eggs, chicken, \
curd, sprouts and chana."""

RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "json_schema",
    "json_schema": {
        "name": "strategic_recommendations",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "recommendations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "targetMeal": {"type": "string"},
                            "recommendation": {"type": "string"},
                        },
                        "required": ["targetMeal", "recommendation"],
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["recommendations"],
            "additionalProperties": False,
        },
    },
}

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class CoachClient(Protocol):
    """Interface for chat-style LLM completions."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, object] | None = None,
    ) -> str:
        """Return the assistant message text."""


class UsageRecorder(Protocol):
    """Interface for API usage logging."""

    def record_usage(
        self, user_id: UUID, action: str, success: bool, error: str | None = None
    ) -> None:
        """Record one API call for analytics."""


@dataclass
class CoachService:
    """Service for coach conversations and weekly meal coaching."""

    client: CoachClient
    model: str = "gpt-4o"
    temperature: float = 0.7
    max_tokens: int = 1000
    pattern_model: str = "o3-mini-2025-01-31"
    recommendation_model: str = "gpt-4o-2024-08-06"
    recommendation_max_tokens: int = 2000
    usage_recorder: UsageRecorder | None = None

    async def ask(  # noqa: PLR0913
        self,
        user_id: UUID,
        message: str,
        goal: GoalContext,
        entries: list[NutritionRecord],
        history: Sequence[ChatMessage] = (),
        today: date | None = None,
    ) -> str:
        """Answer a question using the user's targets and recent entries."""
        text = message.strip()
        if not text:
            raise ValidationError("message is required")

        context = format_context(goal, entries, today or date.today())
        messages = [
            {"role": "system", "content": f"{COACH_SYSTEM_PROMPT}\n\n{context}"}
        ]
        messages.extend(
            {"role": turn.role, "content": turn.content} for turn in history
        )
        messages.append({"role": "user", "content": text})

        reply = await self.client.complete(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not reply.strip():
            raise AnalysisError("Coach returned an empty response")
        if self.usage_recorder is not None:
            self.usage_recorder.record_usage(user_id, COACH_ACTION, success=True)
        _logger.info(
            "Coach answered: user=%s entries=%s history=%s",
            user_id,
            len(entries),
            len(history),
        )
        return reply.strip()

    async def meal_coaching(
        self, user_id: UUID, entries: list[NutritionRecord], goal: GoalContext
    ) -> MealCoachingReport:
        """Build a meal pattern table with targeted changes for a week."""
        daily_meals = group_daily_meals(entries)
        if not daily_meals:
            raise ValidationError("No entries logged for meal coaching")
        summary = summarize_week(daily_meals, goal)

        table = _parse(
            await self.client.complete(
                model=self.pattern_model,
                messages=[
                    {
                        "role": "user",
                        "content": _pattern_prompt(daily_meals, summary, goal),
                    }
                ],
            ),
            MealTable,
        )
        recommendations = _parse(
            await self.client.complete(
                model=self.recommendation_model,
                messages=[
                    {"role": "system", "content": RECOMMENDATION_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": _recommendation_prompt(table, summary, goal),
                    },
                ],
                temperature=self.temperature,
                max_tokens=self.recommendation_max_tokens,
                response_format=RECOMMENDATION_SCHEMA,
            ),
            RecommendationSet,
        )

        changes = {
            item.target_meal: item.recommendation
            for item in recommendations.recommendations
        }
        meals = [
            meal.model_copy(update={"change": changes.get(meal.meal)})
            for meal in table.meals
        ]
        _logger.info(
            "Meal coaching built: user=%s days=%s meals=%s changes=%s",
            user_id,
            summary.days_logged,
            len(meals),
            len(changes),
        )
        return MealCoachingReport(
            meals=meals,
            summary=summary,
            target_calories=goal.target_calories,
            target_protein=goal.target_protein,
        )


def history_dates(today: date, days: int = COACH_HISTORY_DAYS) -> list[date]:
    """Return the dates of the coaching window ending today, oldest first."""
    if days < 1:
        raise ValidationError(f"days must be >= 1, got {days}")
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def format_context(
    goal: GoalContext, entries: list[NutritionRecord], today: date
) -> str:
    """Render targets and recent entries as coach context, newest day first."""
    lines = [
        f"**Current Date:** {today.strftime('%A, %B')} {today.day}, {today.year}",
        "",
        f"**User Context (Last {COACH_HISTORY_DAYS} Days):**",
        "",
        "**Nutrition Targets:**",
        f"- Target Calories: {_number(goal.target_calories)} cal/day",
        f"- Maintenance Calories: {_number(goal.maintenance_calories)} cal/day",
        f"- Target Protein: {_number(goal.target_protein)}g/day",
        "",
    ]
    by_day = _group_by_day(entries)
    if not by_day:
        lines.append("No recent food logs available.")
        return "\n".join(lines)

    lines.append("**Recent Food Logs:**")
    for day in sorted(by_day, reverse=True):
        day_entries = by_day[day]
        calories = sum(entry.calories for entry in day_entries)
        protein = sum(entry.protein for entry in day_entries)
        lines.append("")
        lines.append(
            f"{day.isoformat()}: {_number(calories)} cal, {_number(protein)}g protein"
        )
        for entry in day_entries:
            line = (
                f"  - {entry.name}: {_number(entry.calories)} cal, "
                f"{_number(entry.protein)}g pro"
            )
            if entry.note and entry.note != entry.name:
                line += f" ({entry.note})"
            if entry.image_ref:
                line += " [photo]"
            lines.append(line)
    return "\n".join(lines)


def group_daily_meals(entries: list[NutritionRecord]) -> list[dict[str, object]]:
    """Group entries by date with rounded daily totals, oldest day first."""
    by_day = _group_by_day(entries)
    return [
        {
            "date": day.isoformat(),
            "dayName": day.strftime("%A"),
            "totalCalories": round_half_up(sum(entry.calories for entry in meals)),
            "totalProtein": round_half_up(sum(entry.protein for entry in meals)),
            "meals": [
                {
                    "time": entry.logged_at.strftime("%H:%M")
                    if entry.logged_at
                    else None,
                    "food": entry.name,
                    "calories": entry.calories,
                    "protein": entry.protein,
                }
                for entry in meals
            ],
        }
        for day, meals in sorted(by_day.items())
    ]


def summarize_week(
    daily_meals: list[dict[str, object]], goal: GoalContext
) -> WeekSummary:
    """Average the logged days and measure the gap to the targets."""
    days_logged = len(daily_meals)
    total_calories = sum(int(day["totalCalories"]) for day in daily_meals)
    total_protein = sum(int(day["totalProtein"]) for day in daily_meals)
    if not days_logged:
        average_calories = average_protein = 0
    else:
        average_calories = round_half_up(total_calories / days_logged)
        average_protein = round_half_up(total_protein / days_logged)
    return WeekSummary(
        days_logged=days_logged,
        average_calories=average_calories,
        average_protein=average_protein,
        calorie_gap=goal.target_calories - average_calories,
        protein_gap=goal.target_protein - average_protein,
        goal_label=GOAL_LABELS[goal_direction(goal)],
    )


def _pattern_prompt(
    daily_meals: list[dict[str, object]], summary: WeekSummary, goal: GoalContext
) -> str:
    data = {
        "coachingContext": {
            "targetCalories": goal.target_calories,
            "targetProtein": goal.target_protein,
            "maintenanceCalories": goal.maintenance_calories,
            "goal": summary.goal_label,
            "daysLogged": summary.days_logged,
        },
        "weekSummary": {
            "avgCalories": summary.average_calories,
            "avgProtein": summary.average_protein,
            "gaps": {"calories": summary.calorie_gap, "protein": summary.protein_gap},
        },
        "dailyMeals": daily_meals,
    }
    return (
        f"{MEAL_PATTERN_INSTRUCTIONS}\n\n"
        f"CLIENT'S WEEKLY DATA:\n{json.dumps(data, indent=2)}\n\n"
        f"Days logged: {summary.days_logged}. "
        f"Daily average: {summary.average_calories} calories, "
        f"{summary.average_protein}g protein. "
        f"Target: {_number(goal.target_calories)} calories, "
        f"{_number(goal.target_protein)}g protein. Goal: {summary.goal_label}."
    )


def _recommendation_prompt(
    table: MealTable, summary: WeekSummary, goal: GoalContext
) -> str:
    meal_table = [
        meal.model_dump(by_alias=True, exclude={"change"}) for meal in table.meals
    ]
    return (
        f"MEAL TABLE:\n{json.dumps(meal_table, indent=2)}\n\n"
        f"Current: {summary.average_calories} cal, "
        f"{summary.average_protein}g protein\n"
        f"Target: {_number(goal.target_calories)} cal, "
        f"{_number(goal.target_protein)}g protein\n"
        f"Gap to close: {_signed(summary.calorie_gap)} cal, "
        f"{_signed(summary.protein_gap)}g protein\n"
        f"Goal: {summary.goal_label}\n"
        f"Days logged: {summary.days_logged}\n\n"
        "Give at most two recommendations that together close this gap."
    )


def _parse(raw: str, model: type[_ModelT]) -> _ModelT:
    """Parse a JSON answer, tolerating a markdown code fence around it."""
    content = raw.strip()
    if content.startswith("```"):
        content = content.removeprefix("```json").removeprefix("```")
        content = content.removesuffix("```").strip()
    try:
        return model.model_validate(json.loads(content))
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        _logger.warning("Invalid coaching response: %s", content[:200])
        raise AnalysisError(f"Invalid response for {model.__name__}") from exc


def _group_by_day(
    entries: list[NutritionRecord],
) -> dict[date, list[NutritionRecord]]:
    grouped: dict[date, list[NutritionRecord]] = {}
    for entry in entries:
        grouped.setdefault(entry.occurred_on, []).append(entry)
    return grouped


def _number(value: float) -> str:
    return f"{value:g}"


def _signed(value: float) -> str:
    return f"{value:+g}" if value else "0"
