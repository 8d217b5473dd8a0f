# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Public source material — upcoming workbook issues for a language.
"""

from typing import Optional

from app.core.errors import OperationError
from app.core.outcome import Outcome, info
from app.services.source_material_client import SourceMaterialClient


class SourceMaterialService:
    def __init__(self, client: SourceMaterialClient) -> None:
        self._client = client

    async def get_source_material(self, language: Optional[str]) -> Outcome:
        code = (language or "").strip().upper()
        issues = await self._client.fetch_schedules(code) if code else []
        if not issues:
            raise OperationError.coded(
                404,
                "FETCHING_FAILED",
                "source material could not be fetched because the language is "
                "invalid or not available yet",
            )
        return info("updated source material fetched", issues)
