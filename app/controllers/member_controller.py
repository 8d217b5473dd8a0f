# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Congregation member endpoints.
Thin HTTP layer — delegates ALL logic to MemberService.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Query, Request

from app.core.dependencies import get_member_service
from app.core.outcome import reporter
from app.services.member_service import MemberService

router = APIRouter(prefix="/api/congregations/{cong_id}/members", tags=["Members"])


@router.get("")
async def list_members(
    cong_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    return reporter.render(request, await service.list_members(cong_id, email))


# Declared before /{user_id} so "find" is never taken for a user id.
@router.get("/find")
async def find_user(
    cong_id: str,
    request: Request,
    search: Optional[str] = Query(default=None),
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    """Look up an account by email before adding it."""
    return reporter.render(request, await service.find_user(cong_id, email, search))


@router.put("")
async def add_member(
    cong_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    return reporter.render(request, await service.add_member(cong_id, email, payload))


@router.get("/{user_id}")
async def get_member(
    cong_id: str,
    user_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    return reporter.render(request, await service.get_member(cong_id, user_id, email))


@router.patch("/{user_id}")
async def update_member_details(
    cong_id: str,
    user_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    return reporter.render(
        request,
        await service.update_member_details(cong_id, user_id, email, payload),
    )


@router.delete("/{user_id}")
async def remove_member(
    cong_id: str,
    user_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: MemberService = Depends(get_member_service),
):
    return reporter.render(request, await service.remove_member(cong_id, user_id, email))
