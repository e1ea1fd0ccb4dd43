from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import FeedbackUserType
from .model import Feedback


class FeedbackRepository(Protocol):
    def create(self, *, user_type: FeedbackUserType, user_id: int, user_name: str, message: str) -> int:
        raise NotImplementedError

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def mark_read(self, feedback_id: int) -> bool:
        raise NotImplementedError

    def count_unread(self) -> int:
        raise NotImplementedError

    def delete(self, feedback_id: int) -> bool:
        raise NotImplementedError

    def list_feedback(
        self,
        *,
        user_type: Optional[FeedbackUserType] = None,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Feedback]:
        raise NotImplementedError
