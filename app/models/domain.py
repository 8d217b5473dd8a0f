# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
Records carry no behaviour; every mutation goes through a repository.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Congregation roles a member can hold."""
    ADMIN = "admin"
    LMMO = "lmmo"
    LMMO_BACKUP = "lmmo-backup"
    VIEW_MEETING_SCHEDULE = "view_meeting_schedule"


ALLOWED_ROLES: frozenset[str] = frozenset(role.value for role in Role)

GLOBAL_ROLE_VIP = "vip"
GLOBAL_ROLE_POCKET = "pocket"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CongregationMember(BaseModel):
    """Membership entry held on the congregation record."""
    user_id: str
    email: str = ""
    username: str = ""
    cong_role: list[str] = Field(default_factory=list)
    global_role: str = GLOBAL_ROLE_VIP


class Congregation(BaseModel):
    id: str
    cong_name: str
    cong_number: str
    country_code: str = ""
    cong_members: list[CongregationMember] = Field(default_factory=list)
    cong_settings: list[dict[str, Any]] = Field(default_factory=list)
    last_backup: Optional[dict[str, Any]] = None
    cong_persons: list[Any] = Field(default_factory=list)
    cong_deleted: list[Any] = Field(default_factory=list)
    cong_schedule: list[Any] = Field(default_factory=list)
    cong_source_material: list[Any] = Field(default_factory=list)
    cong_sws_pocket: list[Any] = Field(default_factory=list)

    @property
    def composite_number(self) -> str:
        return f"{self.country_code}{self.cong_number}"


class User(BaseModel):
    """A primary account or, with ``global_role == "pocket"``, a pocket user."""
    id: str
    email: str = ""
    username: str = ""
    cong_id: str = ""
    cong_name: str = ""
    cong_number: str = ""
    cong_role: list[str] = Field(default_factory=list)
    global_role: str = GLOBAL_ROLE_VIP
    mfa_enabled: bool = False
    disabled: bool = False
    pocket_oCode: str = ""
    pocket_devices: list[dict[str, Any]] = Field(default_factory=list)
    pocket_members: list[Any] = Field(default_factory=list)
    pocket_local_id: Optional[Any] = None

    @property
    def is_pocket(self) -> bool:
        return self.global_role == GLOBAL_ROLE_POCKET

    def public_view(self) -> dict[str, Any]:
        """Serialisable record without the encrypted one-time code."""
        return self.model_dump(exclude={"pocket_oCode"})


class CongregationRequest(BaseModel):
    id: str
    email: str
    cong_name: str
    cong_number: str
    cong_role: str
    request_date: datetime = Field(default_factory=utcnow)
    approved: bool = False
    request_open: bool = True
