from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import FeedbackUserType


@dataclass(frozen=True)
class Feedback:
    """Criticism or suggestion left by any kind of user."""

    feedback_id: int
    user_type: FeedbackUserType
    user_id: int
    user_name: str
    message: str
    created_at: Optional[datetime] = None
    is_read: bool = False
