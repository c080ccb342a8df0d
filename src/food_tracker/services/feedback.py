"""User feedback submission with a daily limit."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_tracker.domain.feedback import Feedback, FeedbackType
from food_tracker.errors import RateLimitError, ValidationError

_logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_DAILY_LIMIT = 3


class FeedbackRepository(Protocol):
    """Persistence interface for user feedback."""

    def create_feedback(self, user_id: UUID, feedback: Feedback) -> Feedback:
        """Persist feedback and return it with id and timestamp."""

    def list_feedback(self, user_id: UUID) -> list[Feedback]:
        """Return the user's feedback, newest first."""

    def count_today(self, user_id: UUID) -> int:
        """Return how many feedback rows the user submitted today."""


@dataclass
class FeedbackService:
    """Service for submitting and listing feedback."""

    repository: FeedbackRepository
    daily_limit: int = DEFAULT_DAILY_LIMIT

    def submit(
        self, user_id: UUID, rating: int, feedback_type: str, message: str
    ) -> Feedback:
        """Validate and store feedback, enforcing the daily limit."""
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
            )
        try:
            kind = FeedbackType(feedback_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown feedback type: {feedback_type}") from exc
        text = message.strip()
        if not text:
            raise ValidationError("message is required")
        if self.repository.count_today(user_id) >= self.daily_limit:
            raise RateLimitError(
                f"Feedback limit of {self.daily_limit} per day reached"
            )

        created = self.repository.create_feedback(
            user_id, Feedback(rating=rating, feedback_type=kind, message=text)
        )
        _logger.info(
            "Feedback submitted: user=%s type=%s rating=%s",
            user_id,
            kind.value,
            rating,
        )
        return created

    def history(self, user_id: UUID) -> list[Feedback]:
        """Return the user's past feedback."""
        return self.repository.list_feedback(user_id)

    def remaining_today(self, user_id: UUID) -> int:
        """Return how many submissions the user has left today."""
        return max(self.daily_limit - self.repository.count_today(user_id), 0)
