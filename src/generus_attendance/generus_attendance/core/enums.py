from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in the Flask session after login."""

    TEACHER = "teacher"
    COORDINATOR = "coordinator"
    GENERUS = "generus"


class AttendanceStatus(str, Enum):
    """Per-member status recorded on a KBM session."""

    PRESENT = "present"
    SICK = "sick"
    PERMITTED = "permitted"
    ABSENT = "absent"


class Level(str, Enum):
    PRE_TEEN = "pra-remaja"
    TEEN = "remaja"
    INDEPENDENT_ADULT = "usia-mandiri-kuliah"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class TestType(str, Enum):
    ALQURAN = "alquran"
    HADITS = "hadits"
    TILAWATI = "tilawati"

    # keep pytest from collecting this enum
    __test__ = False


class FeedbackUserType(str, Enum):
    GENERUS = "generus"
    TEACHER = "teacher"
    COORDINATOR = "coordinator"


class ErrorCode(str, Enum):
    """Discriminator carried by failed results."""

    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"
    MEMBER_NOT_FOUND_OR_INACTIVE = "MEMBER_NOT_FOUND_OR_INACTIVE"
    DUPLICATE_CHECKIN_TODAY = "DUPLICATE_CHECKIN_TODAY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    FORBIDDEN = "FORBIDDEN"
