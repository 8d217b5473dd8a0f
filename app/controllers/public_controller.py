# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Public endpoints — directory lookups and source material.
No caller identity required. Thin HTTP layer.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from app.core.dependencies import get_directory_service, get_source_material_service
from app.core.outcome import reporter
from app.services.directory_service import DirectoryService
from app.services.source_material_service import SourceMaterialService

router = APIRouter(prefix="/api", tags=["Public"])


# ── Directory ──

@router.get("/directory/countries")
async def list_countries(
    request: Request,
    language: Optional[str] = Header(default=None),
    service: DirectoryService = Depends(get_directory_service),
):
    return reporter.render(request, await service.get_countries(language))


@router.get("/directory/congregations")
async def list_congregations(
    request: Request,
    language: Optional[str] = Header(default=None),
    country: Optional[str] = Header(default=None),
    name: Optional[str] = Header(default=None),
    service: DirectoryService = Depends(get_directory_service),
):
    return reporter.render(
        request, await service.get_congregations(language, country, name)
    )


# ── Source material ──

@router.get("/public/source-material/{language}")
async def get_source_material(
    language: str,
    request: Request,
    service: SourceMaterialService = Depends(get_source_material_service),
):
    """Upcoming meeting workbook issues for a language."""
    return reporter.render(request, await service.get_source_material(language))
