from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_BARCODE_PREFIX
from ..core.enums import ErrorCode
from ..core.exceptions import InactiveError, NotFoundError, ValidationError
from ..core.result import Result, as_result
from ..members.model import Member
from ..members.repository import MemberRepository
from ..members.service import make_barcode
from .model import BulkCardReport, CardValidation, IdCard, IssuedCard

logger = logging.getLogger(__name__)


class IdCardService:
    """Member ID cards: card data, validation at the door and the issued list.

    A card is "issued" once its member carries a barcode, so the card and the
    check-in scanner read the same code.
    """

    def __init__(
        self,
        members: MemberRepository,
        *,
        barcode_prefix: str = DEFAULT_BARCODE_PREFIX,
        clock: Callable[[], datetime] = now_local,
    ):
        self._members = members
        self._prefix = barcode_prefix
        self._clock = clock
        self._card_number = re.compile(rf"^{re.escape(barcode_prefix)}(\d{{6}})$")

    def card_number(self, member_id: int) -> str:
        return f"{self._prefix}{int(member_id):06d}"

    @as_result("ID card generated")
    def generate(self, member_id: int) -> IdCard:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")
        if not member.is_active:
            raise InactiveError("Cannot generate an ID card for an inactive member")

        now = self._clock()
        if not member.barcode:
            self._members.set_barcode(member.member_id, make_barcode(self._prefix, member.member_id, now))
            member = self._members.get_by_id(member.member_id)
            logger.info("barcode assigned to member %s for an ID card", member.member_id)

        payload = json.dumps(
            {
                "id": member.member_id,
                "name": member.full_name,
                "barcode": member.barcode,
                "level": member.level.value,
                "group": member.sambung_group,
            }
        )
        return IdCard(member=member, card_number=self.card_number(member.member_id), payload=payload, issued_at=now)

    def _lookup(self, value: str) -> Optional[Member]:
        member = self._members.get_by_barcode(value)
        if member:
            return member
        match = self._card_number.match(value)
        if match:
            return self._members.get_by_id(int(match.group(1)))
        if value.isdigit():
            return self._members.get_by_id(int(value))
        if not value.startswith(self._prefix):
            raise ValidationError("Invalid card data format")
        return None

    def validate(self, card_data: Any) -> CardValidation:
        """Accept the QR payload, a barcode, a card number or a bare member id."""

        raw = str(card_data or "").strip()
        value = raw
        try:
            parsed = json.loads(raw)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            value = str(parsed.get("barcode") or parsed.get("id") or "").strip()
        elif isinstance(parsed, int):
            value = str(parsed)

        if not value:
            return CardValidation(valid=False, message="Invalid card data format", error=ErrorCode.VALIDATION_ERROR)
        try:
            member = self._lookup(value)
        except ValidationError as e:
            return CardValidation(valid=False, message=str(e), error=e.code)

        if not member:
            return CardValidation(valid=False, message="ID card not found", error=ErrorCode.NOT_FOUND)
        if not member.is_active:
            return CardValidation(
                valid=False, message="ID card belongs to an inactive member", member=member, error=ErrorCode.INACTIVE
            )
        return CardValidation(valid=True, message="ID card is valid", member=member)

    def list_issued(self) -> Sequence[IssuedCard]:
        return [
            IssuedCard(
                member_id=m.member_id,
                full_name=m.full_name,
                card_number=m.barcode,
                issued_at=m.updated_at,
                status="active" if m.is_active else "expired",
            )
            for m in self._members.list_members(include_inactive=True)
            if m.barcode
        ]

    def bulk_generate(self, member_ids: Sequence[Any]) -> Result:
        if not member_ids:
            return Result.fail(ValidationError("No member ids provided"), data=BulkCardReport(generated=0, failed=0))

        generated = failed = 0
        for member_id in member_ids:
            try:
                ok = self.generate(int(member_id)).success
            except (TypeError, ValueError):
                ok = False
            if ok:
                generated += 1
            else:
                failed += 1

        report = BulkCardReport(generated=generated, failed=failed)
        logger.info("bulk ID cards: %d generated, %d failed", generated, failed)
        if not generated:
            return Result.fail(ValidationError("No ID card could be generated"), data=report)
        message = f"Generated {generated} ID cards" + (f", {failed} failed" if failed else "")
        return Result.ok(message, data=report)
