# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Access gate — the fixed entry pipeline of every congregation-scoped
operation.

    identifier presence (400) -> congregation exists (404) -> caller is a member (403)

Each step runs only after the previous one passed, so a missing id never
touches a store and a missing congregation is never reported as forbidden.
"""

from typing import Optional

from app.core.errors import OperationError
from app.models.domain import Congregation, CongregationMember, User
from app.repositories.interfaces import CongregationStore

# Clients serialise an unset path parameter as the literal "undefined".
_UNSET_IDS = frozenset({"", "undefined"})


def is_present(identifier: Optional[str]) -> bool:
    return identifier is not None and identifier.strip() not in _UNSET_IDS


def member_entry(user: User) -> CongregationMember:
    """Membership entry mirroring a user's current record."""
    return CongregationMember(
        user_id=user.id,
        email=user.email,
        username=user.username,
        cong_role=list(user.cong_role),
        global_role=user.global_role,
    )


class AccessGate:
    """Resolves the target congregation and authorizes the caller."""

    def __init__(self, congregation_repo: CongregationStore) -> None:
        self._congregations = congregation_repo

    async def admit(
        self,
        cong_id: Optional[str],
        email: Optional[str],
        missing_code: str = "CONG_ID_INVALID",
    ) -> Congregation:
        """``missing_code`` is the 400 code reported when the id is absent."""
        if not is_present(cong_id):
            raise OperationError.coded(
                400, missing_code, "the congregation id params is undefined"
            )
        return await self._resolve(cong_id, email)

    async def admit_with_user(
        self, cong_id: Optional[str], user_id: Optional[str], email: Optional[str]
    ) -> Congregation:
        if not (is_present(cong_id) and is_present(user_id)):
            raise OperationError.coded(
                400,
                "CONG_USER_ID_INVALID",
                "the congregation and user ids params are undefined",
            )
        return await self._resolve(cong_id, email)

    async def _resolve(self, cong_id: str, email: Optional[str]) -> Congregation:
        cong = await self._congregations.find_by_id(cong_id)
        if cong is None:
            raise OperationError.coded(
                404,
                "CONGREGATION_NOT_FOUND",
                "no congregation could be found with the provided id",
            )
        if not await self._congregations.is_member(cong_id, email):
            raise OperationError.coded(
                403,
                "UNAUTHORIZED_REQUEST",
                "user not authorized to access the provided congregation",
            )
        return cong
