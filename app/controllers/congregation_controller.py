# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Congregation intake, identity, backup and schedule endpoints.
Thin HTTP layer — delegates ALL logic to CongregationService.
The caller is identified by the ``email`` header.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Request

from app.core.dependencies import get_congregation_service
from app.core.outcome import reporter
from app.services.congregation_service import CongregationService

router = APIRouter(prefix="/api/congregations", tags=["Congregations"])


# ── Intake & creation ──

@router.post("/request")
async def request_congregation(
    request: Request,
    payload: Any = Body(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    """Ask for a new congregation; approved on intake when auto-approval is on."""
    return reporter.render(request, await service.request_congregation(payload))


@router.post("")
async def create_congregation(
    request: Request,
    payload: Any = Body(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.create_congregation(payload))


@router.patch("/{cong_id}")
async def update_congregation_info(
    cong_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(
        request, await service.update_congregation_info(cong_id, email, payload)
    )


# ── Backups ──

@router.get("/{cong_id}/backup/last")
async def get_last_backup(
    cong_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.get_last_backup(cong_id, email))


@router.post("/{cong_id}/backup")
async def save_backup(
    cong_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.save_backup(cong_id, email, payload))


@router.get("/{cong_id}/backup")
async def retrieve_backup(
    cong_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.retrieve_backup(cong_id, email))


# ── Pocket schedule ──

@router.post("/{cong_id}/schedules")
async def send_schedule(
    cong_id: str,
    request: Request,
    payload: Any = Body(default=None),
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.send_schedule(cong_id, email, payload))


@router.get("/{cong_id}/schedules")
async def get_schedule(
    cong_id: str,
    request: Request,
    email: Optional[str] = Header(default=None),
    service: CongregationService = Depends(get_congregation_service),
):
    return reporter.render(request, await service.get_schedule(cong_id, email))
