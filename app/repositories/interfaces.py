# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store contracts required by the service layer.
Services depend on these protocols; the in-memory repositories implement them.
Compound read-modify-write methods must be atomic per record id.
"""

from typing import Any, Optional, Protocol

from app.models.domain import (
    Congregation,
    CongregationMember,
    CongregationRequest,
    User,
)


class IdentityStore(Protocol):
    async def find_by_id(self, user_id: str) -> Optional[User]: ...

    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def find_pocket_user(self, user_id: str) -> Optional[User]: ...

    async def claim_congregation(
        self, user_id: str, cong: Congregation, roles: list[str]
    ) -> Optional[User]:
        """Affiliate an unaffiliated primary account.
        Returns None if already affiliated or if the user is a pocket user."""
        ...

    async def release_congregation(self, user_id: str) -> Optional[User]: ...

    async def refresh_congregation_details(
        self, user_id: str, cong: Congregation
    ) -> Optional[User]: ...

    async def update_role(self, user_id: str, roles: list[str]) -> None: ...

    async def update_pocket_members(self, user_id: str, members: list[Any]) -> None: ...

    async def update_pocket_local_id(self, user_id: str, local_id: Any) -> None: ...

    async def update_username(self, user_id: str, username: str) -> None: ...

    async def set_pocket_code(self, user_id: str, encrypted_code: str) -> None: ...

    async def create_pocket_user(
        self, cong: Congregation, username: str, pocket_local_id: Any
    ) -> User: ...

    async def delete_pocket_user(self, user_id: str) -> bool:
        """Delete a pocket user outright. Returns False for primary accounts."""
        ...

    async def remove_code_and_maybe_delete(self, user_id: str) -> bool:
        """Clear the one-time code; delete the pocket user if it has no devices.
        Returns True when the user was deleted."""
        ...

    async def remove_device_and_maybe_delete(
        self, user_id: str, visitor_id: str
    ) -> list[dict[str, Any]]:
        """Drop a device; delete the pocket user if none remain.
        Returns the remaining devices (empty means deleted)."""
        ...


class CongregationStore(Protocol):
    async def find_by_id(self, cong_id: str) -> Optional[Congregation]: ...

    async def find_by_number(self, composite_number: str) -> Optional[Congregation]: ...

    async def create(
        self, cong_name: str, cong_number: str, country_code: str = ""
    ) -> Optional[Congregation]:
        """Create a congregation. Returns None if the composite number is taken."""
        ...

    async def delete(self, cong_id: str) -> None: ...

    async def is_member(self, cong_id: str, email: Optional[str]) -> bool: ...

    async def add_member(self, cong_id: str, member: CongregationMember) -> None: ...

    async def remove_member(self, cong_id: str, user_id: str) -> None: ...

    async def update_member_role(
        self, cong_id: str, user_id: str, roles: list[str]
    ) -> None: ...

    async def replace_members(
        self, cong_id: str, members: list[CongregationMember]
    ) -> None: ...

    async def update_info(
        self, cong_id: str, cong_name: str, cong_number: str, country_code: str
    ) -> Optional[Congregation]: ...

    async def save_backup(
        self, cong_id: str, sections: dict[str, Any], last_backup: dict[str, Any]
    ) -> None: ...

    async def save_schedule(
        self,
        cong_id: str,
        cong_schedule: list[Any],
        cong_source_material: list[Any],
        cong_settings: list[dict[str, Any]],
    ) -> None: ...


class RequestLedger(Protocol):
    async def find_open_by_email(self, email: str) -> Optional[CongregationRequest]: ...

    async def create_if_absent(
        self, email: str, cong_name: str, cong_number: str, cong_role: str
    ) -> Optional[CongregationRequest]:
        """Open a request. Returns None if the email already has an open one."""
        ...

    async def approve(self, request_id: str) -> Optional[CongregationRequest]: ...

    async def close(self, request_id: str) -> None:
        """Close a request without approving it."""
        ...
