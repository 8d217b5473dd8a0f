# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Source material client — meeting workbook issues from the content CDN.

Issues are bi-monthly. Discovery walks forward one issue at a time until the
CDN answers 404 (bounded by MAX_ISSUE_LOOKAHEAD); the first issues found are
then detailed in parallel. A failed detail fetch contributes nothing and
never aborts its siblings.
"""

import asyncio
from datetime import date, timedelta
from typing import Any, Callable

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics.prometheus import UPSTREAM_FETCHES
from app.services.epub_reader import EpubReader

logger = get_logger(__name__)


def first_issue(today: date) -> tuple[int, int]:
    """(year, month) of the issue covering the Monday of ``today``'s week."""
    monday = today - timedelta(days=today.weekday())
    month = monday.month if monday.month % 2 == 1 else monday.month - 1
    return monday.year, month


def next_issue(year: int, month: int) -> tuple[int, int]:
    month += 2
    if month > 12:
        return year + 1, month - 12
    return year, month


class SourceMaterialClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        epub_reader: EpubReader,
        cdn_url: str | None = None,
        max_lookahead: int | None = None,
        max_parallel: int | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = http_client
        self._reader = epub_reader
        self._cdn_url = settings.SOURCE_MATERIAL_CDN if cdn_url is None else cdn_url
        self._max_lookahead = max_lookahead or settings.MAX_ISSUE_LOOKAHEAD
        self._max_parallel = max_parallel or settings.MAX_PARALLEL_ISSUES
        self._today = today

    async def discover_issues(self, language: str) -> list[dict[str, Any]]:
        if not self._cdn_url:
            raise RuntimeError("SOURCE_MATERIAL_CDN is not configured")

        year, month = first_issue(self._today())
        issues: list[dict[str, Any]] = []
        for _ in range(self._max_lookahead):
            issue_date = f"{year}{month:02d}"
            resp = await self._client.get(
                self._cdn_url,
                params={
                    "langwritten": language,
                    "pub": "mwb",
                    "fileformat": "epub",
                    "output": "json",
                    "issue": issue_date,
                },
            )
            UPSTREAM_FETCHES.labels(target="source_material", status=str(resp.status_code)).inc()
            if resp.status_code == 404:
                break
            if resp.status_code == 200:
                files = resp.json().get("files", {}).get(language, {})
                issues.append({
                    "issueDate": issue_date,
                    "language": language,
                    "epub": files.get("EPUB"),
                })
            year, month = next_issue(year, month)
        return issues

    async def fetch_issue(self, issue: dict[str, Any]) -> dict[str, Any]:
        if not issue.get("epub"):
            return {}
        epub_file = issue["epub"][0]["file"]
        data = await self._reader.load(epub_file["url"])
        return {
            "issueDate": issue["issueDate"],
            "modifiedDateTime": epub_file.get("modifiedDatetime"),
            **data,
        }

    async def fetch_schedules(self, language: str) -> list[dict[str, Any]]:
        issues = (await self.discover_issues(language))[: self._max_parallel]
        results = await asyncio.gather(
            *(self.fetch_issue(issue) for issue in issues),
            return_exceptions=True,
        )

        merged: list[dict[str, Any]] = []
        for issue, result in zip(issues, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Issue %s could not be loaded: %s", issue["issueDate"], result
                )
                continue
            if result.get("issueDate"):
                merged.append(result)
        return merged
