# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Pocket users — sub-accounts without email that view the schedule
from registered devices.

A pocket user lives while it has a one-time code or at least one device.
Removing the last of the two deletes it and drops its membership entry.
"""

from typing import Any, Optional

from app.core.errors import OperationError
from app.core.logging import get_logger
from app.core.outcome import Outcome, info
from app.core.validation import validate_payload
from app.metrics.prometheus import POCKET_USERS_DELETED
from app.models.domain import Congregation, User
from app.repositories.interfaces import CongregationStore, IdentityStore
from app.schemas.congregation import (
    PocketCreatePayload,
    PocketDetailsPayload,
    PocketDevicePayload,
    PocketMembersPayload,
    PocketUsernamePayload,
)
from app.services.access_gate import AccessGate, member_entry
from app.services.code_cipher import CodeCipher

logger = get_logger(__name__)


class PocketService:
    def __init__(
        self,
        user_repo: IdentityStore,
        congregation_repo: CongregationStore,
        gate: AccessGate,
        cipher: CodeCipher,
    ) -> None:
        self._users = user_repo
        self._congregations = congregation_repo
        self._gate = gate
        self._cipher = cipher

    async def get_pocket_user(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)

        body = pocket.model_dump()
        body["pocket_oCode"] = (
            self._cipher.decrypt(pocket.pocket_oCode) if pocket.pocket_oCode else ""
        )
        return info("pocket user details fetched", body)

    async def create_pocket_user(
        self, cong_id: Optional[str], email: Optional[str], payload: Any
    ) -> Outcome:
        cong = await self._gate.admit(cong_id, email)
        data = validate_payload(PocketCreatePayload, payload)

        pocket = await self._users.create_pocket_user(
            cong, data.username, data.pocket_local_id
        )
        await self._congregations.add_member(cong.id, member_entry(pocket))

        logger.info("Pocket user created: cong=%s, user=%s", cong.id, pocket.id)
        return info("pocket user created", {"message": "POCKET_CREATED"})

    async def update_pocket_details(
        self,
        cong_id: Optional[str],
        user_id: Optional[str],
        email: Optional[str],
        payload: Any,
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)
        data = validate_payload(PocketDetailsPayload, payload)

        await self._users.update_role(pocket.id, data.cong_role)
        await self._users.update_pocket_members(pocket.id, data.pocket_members)
        await self._congregations.update_member_role(cong.id, pocket.id, data.cong_role)
        return info("pocket user details updated", {"message": "POCKET_USER_UPDATED"})

    async def update_pocket_username(
        self,
        cong_id: Optional[str],
        user_id: Optional[str],
        email: Optional[str],
        payload: Any,
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)
        data = validate_payload(PocketUsernamePayload, payload)

        await self._users.update_username(pocket.id, data.username)
        renamed = await self._users.find_by_id(pocket.id)
        await self._congregations.add_member(cong.id, member_entry(renamed))
        return info("pocket username updated", {"username": data.username})

    async def update_pocket_members(
        self,
        cong_id: Optional[str],
        user_id: Optional[str],
        email: Optional[str],
        payload: Any,
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)
        data = validate_payload(PocketMembersPayload, payload)

        await self._users.update_pocket_members(pocket.id, data.members)
        return info("pocket members updated", {"pocket_members": data.members})

    # ── One-time code & devices ──

    async def generate_code(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Outcome:
        """Issue a fresh one-time code. Only its ciphertext is stored."""
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)

        code = self._cipher.generate_code()
        await self._users.set_pocket_code(pocket.id, self._cipher.encrypt(code))
        return info("pocket code generated", {"code": code})

    async def delete_code(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)

        if await self._users.remove_code_and_maybe_delete(pocket.id):
            await self._forget(cong, pocket, trigger="code")
            return info(
                "pocket code removed, and pocket user deleted",
                {"message": "POCKET_USER_DELETED"},
            )
        return info("pocket code removed", {"message": "POCKET_CODE_REMOVED"})

    async def delete_device(
        self,
        cong_id: Optional[str],
        user_id: Optional[str],
        email: Optional[str],
        payload: Any,
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        pocket = await self._pocket_of(cong, user_id)
        data = validate_payload(PocketDevicePayload, payload)

        remaining = await self._users.remove_device_and_maybe_delete(
            pocket.id, data.pocket_visitorid
        )
        if remaining:
            return info("pocket device successfully removed", {"devices": remaining})

        await self._forget(cong, pocket, trigger="device")
        return info(
            "pocket device removed, and pocket user deleted",
            {"message": "POCKET_USER_DELETED"},
        )

    # ── Helpers ──

    async def _pocket_of(self, cong: Congregation, user_id: str) -> User:
        pocket = await self._users.find_pocket_user(user_id)
        if pocket is None or pocket.cong_id != cong.id:
            raise OperationError.coded(
                404, "POCKET_NOT_FOUND", "pocket user could not be found"
            )
        return pocket

    async def _forget(self, cong: Congregation, pocket: User, trigger: str) -> None:
        await self._congregations.remove_member(cong.id, pocket.id)
        POCKET_USERS_DELETED.labels(trigger=trigger).inc()
        logger.info("Pocket user deleted: cong=%s, user=%s", cong.id, pocket.id)
