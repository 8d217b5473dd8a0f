# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Pocket user endpoints — details, one-time codes, devices.
Thin HTTP layer — delegates ALL logic to PocketService.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Request

from app.core.dependencies import get_pocket_service
from app.core.outcome import reporter
from app.services.pocket_service import PocketService

router = APIRouter(prefix="/api/congregations/{cong_id}/pockets", tags=["Pocket Users"])


@router.post("")
async def create_pocket_user(
    cong_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(
        request, await service.create_pocket_user(cong_id, email, payload)
    )


@router.get("/{user_id}")
async def get_pocket_user(
    cong_id: str,
    user_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    """Pocket user record with its one-time code in clear text."""
    return reporter.render(
        request, await service.get_pocket_user(cong_id, user_id, email)
    )


@router.patch("/{user_id}")
async def update_pocket_details(
    cong_id: str,
    user_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(
        request,
        await service.update_pocket_details(cong_id, user_id, email, payload),
    )


@router.patch("/{user_id}/username")
async def update_pocket_username(
    cong_id: str,
    user_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(
        request,
        await service.update_pocket_username(cong_id, user_id, email, payload),
    )


@router.patch("/{user_id}/members")
async def update_pocket_members(
    cong_id: str,
    user_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(
        request,
        await service.update_pocket_members(cong_id, user_id, email, payload),
    )


# ── One-time code ──

@router.post("/{user_id}/code")
async def generate_code(
    cong_id: str,
    user_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(request, await service.generate_code(cong_id, user_id, email))


@router.delete("/{user_id}/code")
async def delete_code(
    cong_id: str,
    user_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(request, await service.delete_code(cong_id, user_id, email))


# ── Devices ──

@router.delete("/{user_id}/devices")
async def delete_device(
    cong_id: str,
    user_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: PocketService = Depends(get_pocket_service),
):
    return reporter.render(
        request, await service.delete_device(cong_id, user_id, email, payload)
    )
