from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher (guru pengajar) who authors KBM reports and scans barcodes."""

    teacher_id: int
    full_name: str
    email: str
    username: str
    password_hash: str
    is_active: bool = True
    created_at: Optional[datetime] = None


# Fields a teacher may edit on their own profile. Password and active flag have their own use cases.
PROFILE_FIELDS = ("full_name", "email", "username")


@dataclass(frozen=True)
class Coordinator:
    coordinator_id: int
    name: str
    access_code_hash: str
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    role: str
