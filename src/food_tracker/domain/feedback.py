"""User feedback models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class FeedbackType(str, Enum):
    FEATURE_REQUEST = "feature_request"
    GENERAL_SUGGESTION = "general_suggestion"
    BUG_REPORT = "bug_report"
    POSITIVE_FEEDBACK = "positive_feedback"


@dataclass(frozen=True)
class Feedback:
    """A rated feedback message submitted by a user."""

    rating: int
    feedback_type: FeedbackType
    message: str
    id: UUID | None = None
    created_at: datetime | None = None
