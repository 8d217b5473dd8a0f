# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Congregation request intake ledger.
At most one open request per email.
"""

import uuid
from typing import Optional

from app.models.domain import CongregationRequest


class RequestRepository:
    """In-memory congregation request storage."""

    def __init__(self) -> None:
        self._store: dict[str, CongregationRequest] = {}

    # ── Read ──

    async def find_open_by_email(self, email: str) -> Optional[CongregationRequest]:
        req = self._find_open(email)
        return req.model_copy() if req else None

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    async def create_if_absent(
        self, email: str, cong_name: str, cong_number: str, cong_role: str
    ) -> Optional[CongregationRequest]:
        if self._find_open(email) is not None:
            return None
        req = CongregationRequest(
            id=str(uuid.uuid4()),
            email=email,
            cong_name=cong_name,
            cong_number=cong_number,
            cong_role=cong_role,
        )
        self._store[req.id] = req
        return req.model_copy()

    async def approve(self, request_id: str) -> Optional[CongregationRequest]:
        req = self._store.get(request_id)
        if req is None:
            return None
        req.approved = True
        req.request_open = False
        return req.model_copy()

    async def close(self, request_id: str) -> None:
        req = self._store.get(request_id)
        if req is not None:
            req.request_open = False

    # ── Bulk / internal ──

    def _find_open(self, email: str) -> Optional[CongregationRequest]:
        wanted = email.strip().lower()
        for req in self._store.values():
            if req.request_open and req.email.lower() == wanted:
                return req
        return None

    def clear(self) -> None:
        self._store.clear()

    @property
    def store(self) -> dict[str, CongregationRequest]:
        """Direct access for tests."""
        return self._store
