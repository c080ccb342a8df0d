"""Tests for the feedback service."""

from uuid import uuid4

import pytest

from food_tracker.domain.feedback import FeedbackType
from food_tracker.errors import RateLimitError, ValidationError
from food_tracker.services.feedback import FeedbackService
from tests.conftest import InMemoryFeedbackRepository


def _service(daily_limit: int = 3) -> FeedbackService:
    return FeedbackService(
        repository=InMemoryFeedbackRepository(), daily_limit=daily_limit
    )


def test_submit_stores_trimmed_message() -> None:
    service = _service()
    user_id = uuid4()

    created = service.submit(user_id, 5, "positive_feedback", "  Love the app!  ")

    assert created.id is not None
    assert created.feedback_type is FeedbackType.POSITIVE_FEEDBACK
    assert created.message == "Love the app!"
    assert service.history(user_id) == [created]


def test_history_is_newest_first() -> None:
    service = _service()
    user_id = uuid4()
    first = service.submit(user_id, 3, "bug_report", "Photo upload froze")
    second = service.submit(user_id, 4, "feature_request", "Weekly export")

    assert service.history(user_id) == [second, first]


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_submit_rejects_rating_out_of_range(rating: int) -> None:
    with pytest.raises(ValidationError):
        _service().submit(uuid4(), rating, "bug_report", "Crash on save")


def test_submit_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        _service().submit(uuid4(), 4, "rant", "Too many buttons")


def test_submit_rejects_blank_message() -> None:
    with pytest.raises(ValidationError):
        _service().submit(uuid4(), 4, "general_suggestion", "   ")


def test_daily_limit_is_enforced_per_user() -> None:
    service = _service(daily_limit=2)
    user_id = uuid4()
    for _ in range(2):
        service.submit(user_id, 4, "general_suggestion", "Dark mode please")

    assert service.remaining_today(user_id) == 0
    with pytest.raises(RateLimitError):
        service.submit(user_id, 4, "general_suggestion", "Dark mode please")
    assert len(service.history(user_id)) == 2
    assert service.remaining_today(uuid4()) == 2
