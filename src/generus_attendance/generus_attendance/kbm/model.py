from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceMark
from ..core.enums import Level


@dataclass(frozen=True)
class KbmSession:
    """Domain entity: one KBM (class session) report."""

    session_id: int
    session_date: date
    sambung_group: str
    teacher_id: int
    teacher_name: str
    level: Level
    material: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class KbmSessionDetails:
    session: KbmSession
    attendance: Sequence[AttendanceMark] = field(default_factory=tuple)


# Session-level columns an update may touch; attendance rows are never changed through an update.
SESSION_FIELDS = (
    "session_date",
    "sambung_group",
    "teacher_id",
    "teacher_name",
    "level",
    "material",
    "notes",
)
