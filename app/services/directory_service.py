# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Public directory — countries and congregations from the upstream
lookup, limited to the supported languages.
"""

from typing import Optional

from app.core.config import settings
from app.core.errors import OperationError
from app.core.outcome import Outcome, info, warn
from app.core.validation import validate_payload
from app.schemas.congregation import CongregationQuery, CountryQuery
from app.services.directory_client import DirectoryClient


class DirectoryService:
    def __init__(
        self,
        directory_client: DirectoryClient,
        languages: Optional[tuple[str, ...]] = None,
    ) -> None:
        self._client = directory_client
        self._languages = settings.DIRECTORY_LANGUAGES if languages is None else languages

    def _supported(self, language: str) -> str:
        code = language.strip().upper()
        if code not in self._languages:
            raise OperationError.bad_request(f"invalid language: {language}")
        return code

    async def get_countries(self, language: Optional[str]) -> Outcome:
        query = validate_payload(CountryQuery, {"language": language})
        code = self._supported(query.language)

        resp = await self._client.get_countries(code)
        if not resp.is_success:
            raise OperationError(warn(
                "an error occurred while getting list of all countries",
                resp.status_code,
                {"message": "FETCH_FAILED"},
            ))
        return info("client fetched all countries", resp.json())

    async def get_congregations(
        self,
        language: Optional[str],
        country: Optional[str],
        name: Optional[str] = None,
    ) -> Outcome:
        query = validate_payload(
            CongregationQuery,
            {"language": language, "country": country, "name": name or ""},
        )
        code = self._supported(query.language)

        resp = await self._client.get_congregations(
            query.country.strip().upper(), code, query.name
        )
        if not resp.is_success:
            raise OperationError(warn(
                "an error occurred while getting list of congregations",
                resp.status_code,
                {"message": "FETCH_FAILED"},
            ))
        return info("client fetched congregations by country", resp.json())
