"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from food_tracker.api.admin import router as admin_router
from food_tracker.api.models import (
    AnalyzeRequest,
    CoachRequest,
    FeedbackCreate,
    FoodEntryCreate,
    GoalUpdate,
)
from food_tracker.app_logging import configure_logging
from food_tracker.containers import AppContainer
from food_tracker.domain.coach import ChatMessage, MealCoachingReport
from food_tracker.domain.entries import FrequentItemCluster, NutritionRecord
from food_tracker.domain.feedback import Feedback
from food_tracker.domain.goals import DayProgress, GoalContext
from food_tracker.errors import AnalysisError, RateLimitError, ValidationError
from food_tracker.services.coach import history_dates
from food_tracker.services.goals import STATUS_COLORS, classify_day, goal_direction
from food_tracker.services.stats import week_dates


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": str(exc)},
        )

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(
        _request: Request, exc: AnalysisError
    ) -> JSONResponse:
        logger.warning("Model call failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": str(exc)},
        )

    @app.exception_handler(RateLimitError)
    async def rate_limit_error_handler(
        _request: Request, exc: RateLimitError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"error": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/users/{user_id}/entries")
    async def list_entries(
        user_id: UUID, request: Request, day: date | None = None
    ) -> dict[str, object]:
        """Return a day's entries."""
        state_container: AppContainer = request.app.state.container
        resolved_day = day or date.today()
        entries = state_container.entry_service.list_for_day(user_id, resolved_day)
        return {
            "date": resolved_day.isoformat(),
            "entries": [_serialize_entry(entry) for entry in entries],
        }

    @app.post("/users/{user_id}/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        user_id: UUID, payload: FoodEntryCreate, request: Request
    ) -> dict[str, object]:
        """Log a food entry."""
        state_container: AppContainer = request.app.state.container
        record = NutritionRecord(
            name=payload.name,
            calories=payload.calories,
            protein=payload.protein,
            occurred_on=payload.entry_date,
            image_ref=payload.image_data,
            note=payload.description,
        )
        created = state_container.entry_service.add_entry(user_id, record)
        return _serialize_entry(created)

    @app.delete(
        "/users/{user_id}/entries/{entry_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_entry(user_id: UUID, entry_id: UUID, request: Request) -> Response:
        """Delete a logged entry."""
        state_container: AppContainer = request.app.state.container
        if not state_container.entry_service.delete_entry(user_id, entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/users/{user_id}/frequent-items")
    async def frequent_items(
        user_id: UUID,
        request: Request,
        lookback_days: int | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        """Return quick-add suggestions."""
        state_container: AppContainer = request.app.state.container
        items = state_container.entry_service.frequent_items(
            user_id, today or date.today(), lookback_days
        )
        return {"items": [_serialize_cluster(item) for item in items]}

    @app.get("/users/{user_id}/week")
    async def week(
        user_id: UUID, request: Request, anchor: date | None = None
    ) -> dict[str, object]:
        """Return weekly totals, averages, deficits and per-day statuses."""
        state_container: AppContainer = request.app.state.container
        goal = state_container.goal_service.get_goal(user_id)
        stats = state_container.stats_service.get_week(
            user_id, anchor or date.today(), goal.maintenance_calories
        )
        return {
            "goal": _serialize_goal(goal),
            "daily": [
                _serialize_progress(classify_day(totals, goal))
                for totals in stats.daily
            ],
            "averages": {
                "calories": stats.average_calories,
                "protein": stats.average_protein,
            },
            "deficit": {
                "daily": stats.daily_deficit,
                "weekly": stats.weekly_deficit,
            },
            "days_logged": stats.days_logged,
        }

    @app.get("/users/{user_id}/today")
    async def today(
        user_id: UUID, request: Request, day: date | None = None
    ) -> dict[str, object]:
        """Return the running totals for a day with goal statuses."""
        state_container: AppContainer = request.app.state.container
        goal = state_container.goal_service.get_goal(user_id)
        totals = state_container.stats_service.get_day(user_id, day or date.today())
        return {
            "goal": _serialize_goal(goal),
            "progress": _serialize_progress(classify_day(totals, goal)),
            "entry_count": totals.entry_count,
        }

    @app.get("/users/{user_id}/goals")
    async def get_goals(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the user's goal settings."""
        state_container: AppContainer = request.app.state.container
        return _serialize_goal(state_container.goal_service.get_goal(user_id))

    @app.put("/users/{user_id}/goals")
    async def update_goals(
        user_id: UUID, payload: GoalUpdate, request: Request
    ) -> dict[str, object]:
        """Update the user's goal settings."""
        state_container: AppContainer = request.app.state.container
        goal = state_container.goal_service.update_goal(
            user_id,
            GoalContext(
                target_calories=payload.target_calories,
                target_protein=payload.target_protein,
                maintenance_calories=payload.maintenance_calories,
            ),
        )
        return _serialize_goal(goal)

    @app.post("/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> dict[str, object]:
        """Estimate nutrition for a described or photographed meal."""
        state_container: AppContainer = request.app.state.container
        image_bytes = _decode_image(payload.image) if payload.image else None
        result = await state_container.analysis_service.analyze(
            description=payload.description, image_bytes=image_bytes
        )
        return result.model_dump()

    @app.post("/users/{user_id}/coach")
    async def ask_coach(
        user_id: UUID, payload: CoachRequest, request: Request
    ) -> dict[str, str]:
        """Answer a question using the user's goals and recent entries."""
        state_container: AppContainer = request.app.state.container
        today = payload.today or date.today()
        goal = state_container.goal_service.get_goal(user_id)
        entries = state_container.entry_service.list_for_dates(
            user_id,
            history_dates(today, state_container.settings.coach_history_days),
        )
        reply = await state_container.coach_service.ask(
            user_id,
            payload.message,
            goal,
            entries,
            history=[ChatMessage(turn.role, turn.content) for turn in payload.history],
            today=today,
        )
        return {"response": reply}

    @app.post("/users/{user_id}/meal-coaching")
    async def meal_coaching(
        user_id: UUID, request: Request, anchor: date | None = None
    ) -> dict[str, object]:
        """Return the week's meal pattern table with suggested changes."""
        state_container: AppContainer = request.app.state.container
        goal = state_container.goal_service.get_goal(user_id)
        entries = state_container.entry_service.list_for_dates(
            user_id, week_dates(anchor or date.today())
        )
        report = await state_container.coach_service.meal_coaching(
            user_id, entries, goal
        )
        return _serialize_report(report)

    @app.get("/users/{user_id}/feedback")
    async def list_feedback(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the user's feedback history and today's remaining quota."""
        state_container: AppContainer = request.app.state.container
        service = state_container.feedback_service
        return {
            "feedback": [
                _serialize_feedback(item) for item in service.history(user_id)
            ],
            "remaining_today": service.remaining_today(user_id),
            "daily_limit": service.daily_limit,
        }

    @app.post("/users/{user_id}/feedback", status_code=status.HTTP_201_CREATED)
    async def submit_feedback(
        user_id: UUID, payload: FeedbackCreate, request: Request
    ) -> dict[str, object]:
        """Submit rated feedback."""
        state_container: AppContainer = request.app.state.container
        created = state_container.feedback_service.submit(
            user_id, payload.rating, payload.feedback_type, payload.message
        )
        return _serialize_feedback(created)

    return app


def _decode_image(image: str) -> bytes:
    """Decode a base64 image, accepting an optional data URL prefix."""
    encoded = image
    if image.startswith("data:"):
        _header, _separator, encoded = image.partition(",")
    if not encoded:
        raise ValidationError("image payload is empty")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("image must be base64 encoded") from exc


def _serialize_entry(entry: NutritionRecord) -> dict[str, object]:
    return {
        "id": str(entry.id) if entry.id else None,
        "entry_date": entry.occurred_on.isoformat(),
        "name": entry.name,
        "calories": entry.calories,
        "protein": entry.protein,
        "image_data": entry.image_ref,
        "description": entry.note,
        "created_at": entry.logged_at.isoformat() if entry.logged_at else None,
    }


def _serialize_cluster(item: FrequentItemCluster) -> dict[str, object]:
    return {
        "name": item.representative_name,
        "calories": item.average_calories,
        "protein": item.average_protein,
        "count": item.occurrence_count,
        "image_data": item.image_ref,
        "description": item.note,
    }


def _serialize_goal(goal: GoalContext) -> dict[str, object]:
    return {
        "target_calories": goal.target_calories,
        "target_protein": goal.target_protein,
        "maintenance_calories": goal.maintenance_calories,
        "direction": goal_direction(goal).value,
    }


def _serialize_progress(progress: DayProgress) -> dict[str, object]:
    return {
        "date": progress.day.isoformat(),
        "calories": progress.calories,
        "protein": progress.protein,
        "calories_status": progress.calories_status.value,
        "calories_color": STATUS_COLORS[progress.calories_status],
        "protein_status": progress.protein_status.value,
        "protein_color": STATUS_COLORS[progress.protein_status],
        "percent_of_calorie_target": progress.percent_of_calorie_target,
        "percent_of_protein_target": progress.percent_of_protein_target,
    }


def _serialize_report(report: MealCoachingReport) -> dict[str, object]:
    return {
        "meals": [
            {
                "meal": meal.meal,
                "timing": meal.timing,
                "examples": meal.examples,
                "avg_calories": meal.avg_calories,
                "avg_protein": meal.avg_protein,
                "frequency": meal.frequency,
                "change": meal.change,
            }
            for meal in report.meals
        ],
        "totals": {
            "current_calories": report.summary.average_calories,
            "current_protein": report.summary.average_protein,
            "target_calories": report.target_calories,
            "target_protein": report.target_protein,
        },
        "gaps": {
            "calories": report.summary.calorie_gap,
            "protein": report.summary.protein_gap,
        },
        "goal": report.summary.goal_label,
        "days_logged": report.summary.days_logged,
    }


def _serialize_feedback(feedback: Feedback) -> dict[str, object]:
    return {
        "id": str(feedback.id) if feedback.id else None,
        "rating": feedback.rating,
        "feedback_type": feedback.feedback_type.value,
        "message": feedback.message,
        "created_at": feedback.created_at.isoformat() if feedback.created_at else None,
    }
