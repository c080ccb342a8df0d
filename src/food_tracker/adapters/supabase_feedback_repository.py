"""Supabase repository for user feedback."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from food_tracker.domain.feedback import Feedback, FeedbackType
from food_tracker.services.feedback import FeedbackRepository

_COLUMNS = "id, rating, feedback_type, message, created_at"


@dataclass
class SupabaseFeedbackRepository(FeedbackRepository):
    """Supabase implementation for the user_feedback table."""

    client: Client

    def create_feedback(self, user_id: UUID, feedback: Feedback) -> Feedback:
        """Insert a feedback row."""
        response = (
            self.client.table("user_feedback")
            .insert(
                {
                    "user_id": str(user_id),
                    "rating": feedback.rating,
                    "feedback_type": feedback.feedback_type.value,
                    "message": feedback.message,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create feedback")
        return _parse_row(response.data[0])

    def list_feedback(self, user_id: UUID) -> list[Feedback]:
        """Return the user's feedback, newest first."""
        response = (
            self.client.table("user_feedback")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def count_today(self, user_id: UUID) -> int:
        """Count today's submissions using the database clock."""
        response = self.client.rpc(
            "get_feedback_count_today", {"user_uuid": str(user_id)}
        ).execute()
        return int(response.data or 0)


def _parse_row(row: dict[str, object]) -> Feedback:
    created_at = row.get("created_at")
    return Feedback(
        id=UUID(str(row["id"])),
        rating=int(row["rating"]),
        feedback_type=FeedbackType(str(row["feedback_type"])),
        message=str(row.get("message") or ""),
        created_at=datetime.fromisoformat(created_at)
        if isinstance(created_at, str) and created_at
        else None,
    )
