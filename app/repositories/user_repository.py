# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Identity store — users and pocket sub-accounts.
In-memory implementation of IdentityStore. NO business rules here.
Methods never suspend between their read and their write, so each
compound call is atomic on the event loop.
"""

import uuid
from typing import Any, Optional

from app.models.domain import GLOBAL_ROLE_POCKET, Congregation, User, Role


class UserRepository:
    """In-memory user storage keyed by user id."""

    def __init__(self) -> None:
        self._store: dict[str, User] = {}

    # ── Read ──

    async def find_by_id(self, user_id: str) -> Optional[User]:
        user = self._store.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def find_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        wanted = email.strip().lower()
        for user in self._store.values():
            if user.email and user.email.lower() == wanted:
                return user.model_copy(deep=True)
        return None

    async def find_pocket_user(self, user_id: str) -> Optional[User]:
        user = self._store.get(user_id)
        if user is None or not user.is_pocket:
            return None
        return user.model_copy(deep=True)

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    async def claim_congregation(
        self, user_id: str, cong: Congregation, roles: list[str]
    ) -> Optional[User]:
        user = self._store.get(user_id)
        if user is None or user.cong_id != "" or user.is_pocket:
            return None
        user.cong_id = cong.id
        user.cong_name = cong.cong_name
        user.cong_number = cong.cong_number
        user.cong_role = list(roles)
        return user.model_copy(deep=True)

    async def release_congregation(self, user_id: str) -> Optional[User]:
        user = self._store.get(user_id)
        if user is None:
            return None
        user.cong_id = ""
        user.cong_name = ""
        user.cong_number = ""
        user.cong_role = []
        return user.model_copy(deep=True)

    async def refresh_congregation_details(
        self, user_id: str, cong: Congregation
    ) -> Optional[User]:
        user = self._store.get(user_id)
        if user is None or user.cong_id != cong.id:
            return None
        user.cong_name = cong.cong_name
        user.cong_number = cong.cong_number
        return user.model_copy(deep=True)

    async def update_role(self, user_id: str, roles: list[str]) -> None:
        self._require(user_id).cong_role = list(roles)

    async def update_pocket_members(self, user_id: str, members: list[Any]) -> None:
        self._require(user_id).pocket_members = list(members)

    async def update_pocket_local_id(self, user_id: str, local_id: Any) -> None:
        self._require(user_id).pocket_local_id = local_id

    async def update_username(self, user_id: str, username: str) -> None:
        self._require(user_id).username = username

    async def set_pocket_code(self, user_id: str, encrypted_code: str) -> None:
        self._require(user_id).pocket_oCode = encrypted_code

    async def create_pocket_user(
        self, cong: Congregation, username: str, pocket_local_id: Any
    ) -> User:
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            cong_id=cong.id,
            cong_name=cong.cong_name,
            cong_number=cong.cong_number,
            cong_role=[Role.VIEW_MEETING_SCHEDULE.value],
            global_role=GLOBAL_ROLE_POCKET,
            pocket_local_id=pocket_local_id,
        )
        self._store[user.id] = user
        return user.model_copy(deep=True)

    async def delete_pocket_user(self, user_id: str) -> bool:
        user = self._store.get(user_id)
        if user is None or not user.is_pocket:
            return False
        del self._store[user_id]
        return True

    async def remove_code_and_maybe_delete(self, user_id: str) -> bool:
        user = self._require(user_id)
        user.pocket_oCode = ""
        if not user.pocket_devices:
            del self._store[user_id]
            return True
        return False

    async def remove_device_and_maybe_delete(
        self, user_id: str, visitor_id: str
    ) -> list[dict[str, Any]]:
        user = self._require(user_id)
        remaining = [
            device for device in user.pocket_devices
            if device.get("visitorid") != visitor_id
        ]
        if not remaining:
            del self._store[user_id]
            return []
        user.pocket_devices = remaining
        return [dict(device) for device in remaining]

    # ── Bulk / internal ──

    def _require(self, user_id: str) -> User:
        user = self._store.get(user_id)
        if user is None:
            raise KeyError(f"No user found with id '{user_id}'")
        return user

    def clear(self) -> None:
        self._store.clear()

    @property
    def store(self) -> dict[str, User]:
        """Direct access for seeding and tests."""
        return self._store
