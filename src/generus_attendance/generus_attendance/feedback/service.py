from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from ..common.validators import require_enum, require_non_empty
from ..core.enums import FeedbackUserType
from ..core.exceptions import NotFoundError
from ..core.result import as_result
from .model import Feedback
from .repository import FeedbackRepository

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, feedback: FeedbackRepository):
        self._feedback = feedback

    @as_result("Thank you for your feedback")
    def submit(self, *, user_type: Any, user_id: int, user_name: str, message: str) -> Feedback:
        kind = require_enum(FeedbackUserType, user_type, "User type")
        name = require_non_empty(user_name, "Name")
        text = require_non_empty(message, "Message")

        feedback_id = self._feedback.create(user_type=kind, user_id=int(user_id), user_name=name, message=text)
        logger.info("feedback %s submitted by %s %s", feedback_id, kind.value, user_id)
        return self._feedback.get_by_id(feedback_id)

    def list_all(self) -> Sequence[Feedback]:
        return self._feedback.list_feedback()

    def list_by_user_type(self, user_type: Any) -> Sequence[Feedback]:
        try:
            kind = FeedbackUserType(user_type)
        except ValueError:
            return []
        return self._feedback.list_feedback(user_type=kind)

    def list_by_user(self, user_type: Any, user_id: int) -> Sequence[Feedback]:
        try:
            kind = FeedbackUserType(user_type)
        except ValueError:
            return []
        return self._feedback.list_feedback(user_type=kind, user_id=int(user_id))

    def list_by_date_range(self, start: date, end: date) -> Sequence[Feedback]:
        if start > end:
            return []
        return self._feedback.list_feedback(start=start, end=end)

    @as_result("Feedback marked as read")
    def mark_as_read(self, feedback_id: int) -> Feedback:
        # rowcount is 0 for a row that was already read
        if not self._feedback.get_by_id(int(feedback_id)):
            raise NotFoundError("Feedback not found")
        self._feedback.mark_read(int(feedback_id))
        return self._feedback.get_by_id(int(feedback_id))

    def unread_count(self) -> int:
        return self._feedback.count_unread()

    @as_result("Feedback deleted")
    def delete(self, feedback_id: int) -> None:
        if not self._feedback.delete(int(feedback_id)):
            raise NotFoundError("Feedback not found")
        logger.info("feedback %s deleted", feedback_id)
