# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Directory client — pass-through to the external country and
congregation lookup. No retry; transport errors propagate to the caller.
"""

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics.prometheus import UPSTREAM_FETCHES

logger = get_logger(__name__)


class DirectoryClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        country_api: str | None = None,
        congregation_api: str | None = None,
    ) -> None:
        self._client = http_client
        self._country_api = settings.DIRECTORY_COUNTRY_API if country_api is None else country_api
        self._congregation_api = (
            settings.DIRECTORY_CONGREGATION_API if congregation_api is None else congregation_api
        )

    async def get_countries(self, language: str) -> httpx.Response:
        if not self._country_api:
            raise RuntimeError("DIRECTORY_COUNTRY_API is not configured")
        resp = await self._client.get(
            self._country_api, params={"languageCode": language}
        )
        UPSTREAM_FETCHES.labels(target="countries", status=str(resp.status_code)).inc()
        return resp

    async def get_congregations(
        self, country: str, language: str, name: str
    ) -> httpx.Response:
        if not self._congregation_api:
            raise RuntimeError("DIRECTORY_CONGREGATION_API is not configured")
        resp = await self._client.get(
            f"{self._congregation_api.rstrip('/')}/{country}",
            params={"languageCode": language, "name": name},
        )
        UPSTREAM_FETCHES.labels(target="congregations", status=str(resp.status_code)).inc()
        if not resp.is_success:
            logger.warning(
                "Directory returned %s for country=%s", resp.status_code, country
            )
        return resp
