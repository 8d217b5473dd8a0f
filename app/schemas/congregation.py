# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request schemas — payload contracts validated by the service layer.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.domain import ALLOWED_ROLES


def _check_roles(roles: list[str]) -> list[str]:
    for role in roles:
        if role not in ALLOWED_ROLES:
            raise ValueError(
                f"role '{role}' must be one of {sorted(ALLOWED_ROLES)}"
            )
    return roles


def _number_as_text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


# ── Congregation Schemas ──

class CongregationRequestPayload(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    cong_name: str = Field(..., min_length=1)
    cong_number: str = Field(..., min_length=1, pattern=r"^\d+$")
    app_requestor: str = Field(..., min_length=1)

    @field_validator("cong_number", mode="before")
    @classmethod
    def number_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)


class CongregationCreatePayload(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    country_code: str = Field(..., min_length=1)
    cong_name: str = Field(..., min_length=1)
    cong_number: str = Field(..., min_length=1, pattern=r"^\d+$")
    app_requestor: str = Field(..., min_length=1)

    @field_validator("cong_number", mode="before")
    @classmethod
    def number_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)


class CongregationInfoPayload(BaseModel):
    country_code: str = Field(..., min_length=1)
    cong_name: str = Field(..., min_length=1)
    cong_number: str = Field(..., min_length=1, pattern=r"^\d+$")

    @field_validator("cong_number", mode="before")
    @classmethod
    def number_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)


class BackupPayload(BaseModel):
    """Full backup. Clients exchange the camelCase section keys."""
    model_config = ConfigDict(populate_by_name=True)

    cong_persons: list[Any]
    cong_deleted: list[Any]
    cong_schedule: list[Any]
    cong_source_material: list[Any] = Field(..., alias="cong_sourceMaterial")
    cong_sws_pocket: list[Any] = Field(..., alias="cong_swsPocket")
    cong_settings: list[dict[str, Any]]


# ── Member Schemas ──

class MemberAddPayload(BaseModel):
    user_id: str = Field(..., min_length=1)


class MemberDetailsPayload(BaseModel):
    user_role: list[str]
    pocket_members: list[Any] = Field(default_factory=list)
    pocket_local_id: Optional[Any] = None

    @field_validator("user_role")
    @classmethod
    def roles_are_known(cls, roles: list[str]) -> list[str]:
        return _check_roles(roles)


# ── Pocket Schemas ──

class PocketCreatePayload(BaseModel):
    username: str = Field(..., min_length=1)
    pocket_local_id: Any


class PocketDetailsPayload(BaseModel):
    cong_role: list[str]
    pocket_members: list[Any] = Field(default_factory=list)

    @field_validator("cong_role")
    @classmethod
    def roles_are_known(cls, roles: list[str]) -> list[str]:
        return _check_roles(roles)


class PocketUsernamePayload(BaseModel):
    username: str = Field(..., min_length=1)


class PocketMembersPayload(BaseModel):
    members: list[Any]


class PocketDevicePayload(BaseModel):
    pocket_visitorid: str = Field(..., min_length=1)


# ── Schedule Schemas ──

class ScheduleSections(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cong_schedule: list[Any] = Field(default_factory=list)
    cong_source_material: list[Any] = Field(
        default_factory=list, alias="cong_sourceMaterial"
    )


class SchedulePayload(BaseModel):
    schedules: ScheduleSections
    cong_settings: list[dict[str, Any]]


# ── Directory Schemas ──

class CountryQuery(BaseModel):
    language: str = Field(..., min_length=1)


class CongregationQuery(BaseModel):
    language: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    name: str = ""
