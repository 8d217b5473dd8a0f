# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Congregation store.
In-memory implementation of CongregationStore — pure data access.
Membership, settings, backup and schedule sections change only here.
"""

import uuid
from typing import Any, Optional

from app.models.domain import Congregation, CongregationMember


class CongregationRepository:
    """In-memory congregation storage keyed by congregation id."""

    def __init__(self) -> None:
        self._store: dict[str, Congregation] = {}

    # ── Read ──

    async def find_by_id(self, cong_id: str) -> Optional[Congregation]:
        cong = self._store.get(cong_id)
        return cong.model_copy(deep=True) if cong else None

    async def find_by_number(self, composite_number: str) -> Optional[Congregation]:
        cong = self._find_by_number(composite_number)
        return cong.model_copy(deep=True) if cong else None

    async def is_member(self, cong_id: str, email: Optional[str]) -> bool:
        cong = self._store.get(cong_id)
        if cong is None or not email:
            return False
        wanted = email.strip().lower()
        return any(
            member.email and member.email.lower() == wanted
            for member in cong.cong_members
        )

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    async def create(
        self, cong_name: str, cong_number: str, country_code: str = ""
    ) -> Optional[Congregation]:
        if self._find_by_number(f"{country_code}{cong_number}") is not None:
            return None
        cong = Congregation(
            id=str(uuid.uuid4()),
            cong_name=cong_name,
            cong_number=cong_number,
            country_code=country_code,
        )
        self._store[cong.id] = cong
        return cong.model_copy(deep=True)

    async def delete(self, cong_id: str) -> None:
        self._store.pop(cong_id, None)

    async def add_member(self, cong_id: str, member: CongregationMember) -> None:
        cong = self._require(cong_id)
        cong.cong_members = [
            m for m in cong.cong_members if m.user_id != member.user_id
        ]
        cong.cong_members.append(member.model_copy(deep=True))

    async def remove_member(self, cong_id: str, user_id: str) -> None:
        cong = self._require(cong_id)
        cong.cong_members = [m for m in cong.cong_members if m.user_id != user_id]

    async def update_member_role(
        self, cong_id: str, user_id: str, roles: list[str]
    ) -> None:
        for member in self._require(cong_id).cong_members:
            if member.user_id == user_id:
                member.cong_role = list(roles)

    async def replace_members(
        self, cong_id: str, members: list[CongregationMember]
    ) -> None:
        self._require(cong_id).cong_members = [
            m.model_copy(deep=True) for m in members
        ]

    async def update_info(
        self, cong_id: str, cong_name: str, cong_number: str, country_code: str
    ) -> Optional[Congregation]:
        cong = self._store.get(cong_id)
        if cong is None:
            return None
        cong.cong_name = cong_name
        cong.cong_number = cong_number
        cong.country_code = country_code
        return cong.model_copy(deep=True)

    async def save_backup(
        self, cong_id: str, sections: dict[str, Any], last_backup: dict[str, Any]
    ) -> None:
        cong = self._require(cong_id)
        for name, value in sections.items():
            setattr(cong, name, value)
        cong.last_backup = dict(last_backup)

    async def save_schedule(
        self,
        cong_id: str,
        cong_schedule: list[Any],
        cong_source_material: list[Any],
        cong_settings: list[dict[str, Any]],
    ) -> None:
        cong = self._require(cong_id)
        cong.cong_schedule = list(cong_schedule)
        cong.cong_source_material = list(cong_source_material)
        cong.cong_settings = list(cong_settings)

    # ── Bulk / internal ──

    def _find_by_number(self, composite_number: str) -> Optional[Congregation]:
        for cong in self._store.values():
            if cong.composite_number == composite_number:
                return cong
        return None

    def _require(self, cong_id: str) -> Congregation:
        cong = self._store.get(cong_id)
        if cong is None:
            raise KeyError(f"No congregation found with id '{cong_id}'")
        return cong

    def clear(self) -> None:
        self._store.clear()

    @property
    def store(self) -> dict[str, Congregation]:
        """Direct access for seeding and tests."""
        return self._store
