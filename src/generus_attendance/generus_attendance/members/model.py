from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Gender, Level


@dataclass(frozen=True)
class Member:
    """Domain entity: a generus (program participant).

    ``barcode`` stays ``None`` until one is assigned; ``is_active=False`` marks a
    soft-deleted member whose history must stay resolvable.
    """

    member_id: int
    full_name: str
    sambung_group: str
    level: Level
    gender: Optional[Gender] = None
    birth_place: Optional[str] = None
    birth_date: Optional[date] = None
    profession: Optional[str] = None
    skill: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    barcode: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Fields a profile submission may change. Barcode and active flag have their own use cases.
PROFILE_FIELDS = (
    "full_name",
    "sambung_group",
    "level",
    "gender",
    "birth_place",
    "birth_date",
    "profession",
    "skill",
    "status",
    "notes",
    "photo_url",
)
