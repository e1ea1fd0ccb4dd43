from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..members.model import Member


@dataclass(frozen=True)
class OnlineCheckIn:
    """Domain entity: one accepted barcode scan.

    ``sambung_group`` is frozen at scan time; ``member_name`` is joined in from
    the member record when the row is read.
    """

    checkin_id: int
    member_id: int
    barcode: str
    teacher_id: Optional[int]
    sambung_group: str
    scanned_at: datetime
    checkin_date: date
    member_name: Optional[str] = None


@dataclass(frozen=True)
class ScanOutcome:
    checkin: OnlineCheckIn
    member: Member
