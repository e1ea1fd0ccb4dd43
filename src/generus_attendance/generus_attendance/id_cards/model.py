from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ErrorCode
from ..members.model import Member


@dataclass(frozen=True)
class IdCard:
    """Data printed on a member card.

    ``payload`` is the JSON text encoded into the card's QR code; rendering the
    image itself happens on the client.
    """

    member: Member
    card_number: str
    payload: str
    issued_at: datetime


@dataclass(frozen=True)
class CardValidation:
    valid: bool
    message: str
    member: Optional[Member] = None
    error: Optional[ErrorCode] = None


@dataclass(frozen=True)
class IssuedCard:
    member_id: int
    full_name: str
    card_number: str
    issued_at: Optional[datetime]
    status: str  # "active" | "expired"


@dataclass(frozen=True)
class BulkCardReport:
    generated: int
    failed: int
