# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member management — listing, lookup, affiliation and role changes.
Every method goes through the access gate first; targets are resolved only
inside the congregation the caller was admitted to.
"""

from typing import Any, Optional

from app.core.errors import OperationError
from app.core.logging import get_logger
from app.core.outcome import Outcome, info
from app.core.validation import validate_payload
from app.metrics.prometheus import MEMBERSHIP_CHANGES, POCKET_USERS_DELETED
from app.models.domain import Congregation, User
from app.repositories.interfaces import CongregationStore, IdentityStore
from app.schemas.congregation import MemberAddPayload, MemberDetailsPayload
from app.services.access_gate import AccessGate, member_entry

logger = get_logger(__name__)


class MemberService:
    """Business logic for congregation membership."""

    def __init__(
        self,
        user_repo: IdentityStore,
        congregation_repo: CongregationStore,
        gate: AccessGate,
    ) -> None:
        self._users = user_repo
        self._congregations = congregation_repo
        self._gate = gate

    async def list_members(self, cong_id: Optional[str], email: Optional[str]) -> Outcome:
        cong = await self._gate.admit(cong_id, email)
        return info(
            "user fetched congregation members",
            [member.model_dump() for member in cong.cong_members],
        )

    async def find_user(
        self, cong_id: Optional[str], email: Optional[str], search: Optional[str]
    ) -> Outcome:
        """
        Look up a primary account by email so it can be added.

        Only enabled accounts with MFA turned on are visible. Accounts that
        belong to another congregation are reported as not found.
        """
        cong = await self._gate.admit(cong_id, email)
        if not search or not search.strip():
            raise OperationError.coded(
                400, "SEARCH_INVALID", "the search parameter is not correct"
            )

        candidate = await self._users.find_by_email(search)
        if candidate is None or candidate.disabled or not candidate.mfa_enabled:
            raise OperationError.coded(404, "ACCOUNT_NOT_FOUND", "user could not be found")
        if candidate.cong_id == cong.id:
            return info(
                "user is already member of the congregation", {"message": "ALREADY_MEMBER"}
            )
        if candidate.cong_id:
            raise OperationError.coded(404, "ACCOUNT_NOT_FOUND", "user could not be found")
        return info("user details fetched successfully", candidate.public_view())

    async def add_member(
        self, cong_id: Optional[str], email: Optional[str], payload: Any
    ) -> Outcome:
        cong = await self._gate.admit(cong_id, email)
        data = validate_payload(MemberAddPayload, payload)

        # pocket users are bound to the congregation that created them
        target = await self._users.find_by_id(data.user_id)
        if target is None or target.is_pocket:
            raise OperationError.coded(404, "ACCOUNT_NOT_FOUND", "user could not be found")

        member = await self._users.claim_congregation(target.id, cong, [])
        if member is None:
            raise OperationError.coded(
                400, "ALREADY_MEMBER", "user already belongs to a congregation"
            )
        await self._congregations.add_member(cong.id, member_entry(member))

        MEMBERSHIP_CHANGES.labels(action="added").inc()
        logger.info("Member added: cong=%s, user=%s", cong.id, member.id)
        return info("member added to the congregation", {"message": "MEMBER_ADDED"})

    async def get_member(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Outcome:
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        target = await self._member_of(cong, user_id)
        if target is None:
            raise OperationError.coded(404, "ACCOUNT_NOT_FOUND", "user could not be found")
        return info("user details fetched", target.public_view())

    async def update_member_details(
        self,
        cong_id: Optional[str],
        user_id: Optional[str],
        email: Optional[str],
        payload: Any,
    ) -> Outcome:
        """Replace roles, pocket members and local id; nothing changes on a bad role."""
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        target = await self._member_of(cong, user_id)
        if target is None:
            raise _member_not_found()
        data = validate_payload(MemberDetailsPayload, payload)

        await self._congregations.update_member_role(cong.id, target.id, data.user_role)
        await self._users.update_role(target.id, data.user_role)
        await self._users.update_pocket_members(target.id, data.pocket_members)
        await self._users.update_pocket_local_id(target.id, data.pocket_local_id)

        MEMBERSHIP_CHANGES.labels(action="updated").inc()
        return info("member details updated", {"message": "MEMBER_UPDATED"})

    async def remove_member(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Outcome:
        """Release a primary account; a pocket user is deleted with its devices."""
        cong = await self._gate.admit_with_user(cong_id, user_id, email)
        target = await self._member_of(cong, user_id)
        if target is None:
            raise _member_not_found()

        if target.is_pocket:
            await self._users.delete_pocket_user(target.id)
            POCKET_USERS_DELETED.labels(trigger="member").inc()
        else:
            await self._users.release_congregation(target.id)
        await self._congregations.remove_member(cong.id, target.id)

        MEMBERSHIP_CHANGES.labels(action="removed").inc()
        logger.info("Member removed: cong=%s, user=%s", cong.id, target.id)
        return info("member removed from the congregation", {"message": "OK"})

    async def _member_of(self, cong: Congregation, user_id: str) -> Optional[User]:
        target = await self._users.find_by_id(user_id)
        if target is None or target.cong_id != cong.id:
            return None
        return target


def _member_not_found() -> OperationError:
    return OperationError.coded(
        404, "MEMBER_NOT_FOUND", "member is no longer found in the congregation"
    )
