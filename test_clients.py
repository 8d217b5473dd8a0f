# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the outbound collaborators — directory, source material, EPUB,
mail and the one-time code cipher. Upstreams are httpx.MockTransport doubles.
Run: pytest test_clients.py -v
"""

import io
import re
import zipfile
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.code_cipher import CodeCipher
from app.services.directory_client import DirectoryClient
from app.services.epub_reader import EpubReader, read_epub_workbook
from app.services.mail_client import MailClient
from app.services.source_material_client import (
    SourceMaterialClient,
    first_issue,
    next_issue,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


CDN = "https://cdn.test/GETPUBMEDIALINKS"

CONTAINER_XML = """<?xml version="1.0"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

PACKAGE_OPF = """<?xml version="1.0"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>{title}</dc:title>
    <dc:language>{language}</dc:language>
  </metadata>
  <manifest>
    <item id="w1" href="week1.xhtml" media-type="application/xhtml+xml"/>
    <item id="w2" href="week2.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine>
    <itemref idref="w2"/>
    <itemref idref="w1"/>
    <itemref idref="missing"/>
  </spine>
</package>"""


WEEK_XHTML = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<body>
  <header>
    <h1>OCTOBER 19-25</h1>
    <h2><a href="#">PROVERBS 1</a></h2>
  </header>
  <h3>Song 88 and Prayer | Opening Comments (1 min.)</h3>
  <h2>TREASURES FROM GOD&#8217;S WORD</h2>
  <h3>1. Get Wisdom (10 min.)</h3>
  <h3>2. Spiritual Gems (10 min.)</h3>
  <h3>3. Bible Reading (4 min.)</h3>
  <h2>APPLY YOURSELF TO THE FIELD MINISTRY</h2>
  <h3>4. Starting a Conversation (3 min.)</h3>
  <h2>LIVING AS CHRISTIANS</h2>
  <h3>Song 140</h3>
  <h3>5. Congregation Bible Study (30 min.)</h3>
  <h3>Concluding Comments (3 min.) | Song 2 and Prayer</h3>
</body>
</html>"""

COVER_XHTML = """<html xmlns="http://www.w3.org/1999/xhtml"><body>
<h1>Our Christian Life and Ministry</h1><p>Meeting Workbook</p>
</body></html>"""


def _epub(title="Meeting Workbook", language="en", documents=None):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip")
        archive.writestr("META-INF/container.xml", CONTAINER_XML)
        archive.writestr("OEBPS/content.opf", PACKAGE_OPF.format(title=title, language=language))
        for name, markup in (documents or {}).items():
            archive.writestr(f"OEBPS/{name}", markup)
    return buffer.getvalue()


def _issue_listing(issue, language="E"):
    return {
        "files": {
            language: {
                "EPUB": [{
                    "file": {
                        "url": f"https://files.test/mwb_{issue}.epub",
                        "modifiedDatetime": "2026-08-01 10:00:00",
                    }
                }]
            }
        }
    }


def _source_client(handler, **kwargs):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("today", lambda: date(2026, 10, 19))
    return SourceMaterialClient(http_client, EpubReader(http_client), cdn_url=CDN, **kwargs)


# ============================================
# Issue calendar
# ============================================
class TestIssueCalendar:
    @pytest.mark.parametrize("today, expected", [
        (date(2026, 10, 19), (2026, 9)),
        (date(2026, 11, 1), (2026, 9)),   # Sunday: week starts in October
        (date(2027, 1, 1), (2026, 11)),   # Friday: week starts in December
        (date(2026, 3, 4), (2026, 3)),
    ])
    def test_first_issue(self, today, expected):
        assert first_issue(today) == expected

    def test_next_issue_wraps_year(self):
        assert next_issue(2026, 9) == (2026, 11)
        assert next_issue(2026, 11) == (2027, 1)


# ============================================
# Source material client
# ============================================
class TestSourceMaterialClient:
    @pytest.mark.anyio
    async def test_discovery_stops_at_first_404(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            issue = request.url.params["issue"]
            if issue in ("202609", "202611"):
                return httpx.Response(200, json=_issue_listing(issue))
            return httpx.Response(404)

        issues = await _source_client(handler).discover_issues("E")
        assert [i["issueDate"] for i in issues] == ["202609", "202611"]
        assert [p["issue"] for p in seen] == ["202609", "202611", "202701"]
        assert seen[0] == {
            "langwritten": "E",
            "pub": "mwb",
            "fileformat": "epub",
            "output": "json",
            "issue": "202609",
        }

    @pytest.mark.anyio
    async def test_other_statuses_continue_until_cap(self):
        calls = []

        def handler(request):
            calls.append(request.url.params["issue"])
            return httpx.Response(500)

        issues = await _source_client(handler, max_lookahead=3).discover_issues("E")
        assert issues == []
        assert calls == ["202609", "202611", "202701"]

    @pytest.mark.anyio
    async def test_failed_issue_does_not_abort_siblings(self):
        def handler(request):
            if request.url.host == "cdn.test":
                issue = request.url.params["issue"]
                if issue in ("202609", "202611"):
                    return httpx.Response(200, json=_issue_listing(issue))
                return httpx.Response(404)
            if request.url.path == "/mwb_202611.epub":
                return httpx.Response(500)
            return httpx.Response(200, content=_epub(documents={"week1.xhtml": WEEK_XHTML}))

        merged = await _source_client(handler).fetch_schedules("E")
        assert len(merged) == 1
        assert merged[0]["issueDate"] == "202609"
        assert merged[0]["modifiedDateTime"] == "2026-08-01 10:00:00"
        assert merged[0]["title"] == "Meeting Workbook"
        assert merged[0]["documents"] == ["week2.xhtml", "week1.xhtml"]
        assert merged[0]["weeks"][0]["bibleReading"] == "PROVERBS 1"

    @pytest.mark.anyio
    async def test_issue_without_epub_contributes_nothing(self):
        def handler(request):
            if request.url.params["issue"] == "202609":
                return httpx.Response(200, json={"files": {}})
            return httpx.Response(404)

        assert await _source_client(handler).fetch_schedules("E") == []

    @pytest.mark.anyio
    async def test_parallel_fetch_is_bounded(self):
        downloads = []

        def handler(request):
            if request.url.host == "cdn.test":
                return httpx.Response(200, json=_issue_listing(request.url.params["issue"]))
            downloads.append(request.url.path)
            return httpx.Response(200, content=_epub())

        merged = await _source_client(handler, max_lookahead=5, max_parallel=2).fetch_schedules("E")
        assert len(merged) == 2
        assert len(downloads) == 2

    @pytest.mark.anyio
    async def test_unconfigured_cdn_raises(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = SourceMaterialClient(http_client, EpubReader(http_client), cdn_url="")
        with pytest.raises(RuntimeError):
            await client.discover_issues("E")


# ============================================
# EPUB reader
# ============================================
class TestEpubReader:
    def test_reads_package_metadata(self):
        data = read_epub_workbook(_epub(title="Life and Ministry", language="mg"))
        assert data == {
            "title": "Life and Ministry",
            "language": "mg",
            "documents": ["week2.xhtml", "week1.xhtml"],
            "weeks": [],
        }

    def test_extracts_week_content(self):
        data = read_epub_workbook(_epub(documents={
            "week2.xhtml": COVER_XHTML,
            "week1.xhtml": WEEK_XHTML,
        }))
        assert len(data["weeks"]) == 1
        week = data["weeks"][0]
        assert week["weekDate"] == "OCTOBER 19-25"
        assert week["bibleReading"] == "PROVERBS 1"
        assert week["songs"] == [88, 140, 2]
        assert [p["minutes"] for p in week["parts"]] == [1, 10, 10, 4, 3, 30, 3]
        assert week["parts"][0]["section"] == ""
        assert week["parts"][3] == {
            "section": "TREASURES FROM GOD’S WORD",
            "title": "3. Bible Reading (4 min.)",
            "minutes": 4,
        }
        assert week["parts"][4]["section"] == "APPLY YOURSELF TO THE FIELD MINISTRY"
        assert week["parts"][5]["section"] == "LIVING AS CHRISTIANS"

    def test_weeks_follow_reading_order(self):
        second = WEEK_XHTML.replace("OCTOBER 19-25", "OCTOBER 26-NOVEMBER 1")
        data = read_epub_workbook(_epub(documents={
            "week1.xhtml": WEEK_XHTML,
            "week2.xhtml": second,
        }))
        assert [w["weekDate"] for w in data["weeks"]] == [
            "OCTOBER 26-NOVEMBER 1",
            "OCTOBER 19-25",
        ]

    def test_missing_container_is_an_error(self):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("mimetype", "application/epub+zip")
        with pytest.raises(KeyError):
            read_epub_workbook(buffer.getvalue())


# ============================================
# Directory client
# ============================================
class TestDirectoryClient:
    @pytest.mark.anyio
    async def test_congregation_lookup_url(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json=[])

        client = DirectoryClient(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            country_api="https://directory.test/countries",
            congregation_api="https://directory.test/congregations/",
        )
        resp = await client.get_congregations("FR", "E", "Alpha")
        assert resp.status_code == 200
        assert seen["url"].path == "/congregations/FR"
        assert seen["url"].params["languageCode"] == "E"
        assert seen["url"].params["name"] == "Alpha"

    @pytest.mark.anyio
    async def test_transport_errors_propagate(self):
        def handler(request):
            raise httpx.ConnectError("directory unreachable")

        client = DirectoryClient(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            country_api="https://directory.test/countries",
            congregation_api="https://directory.test/congregations",
        )
        with pytest.raises(httpx.ConnectError):
            await client.get_countries("E")

    @pytest.mark.anyio
    async def test_unconfigured_upstream_raises(self):
        client = DirectoryClient(MagicMock(), country_api="", congregation_api="")
        with pytest.raises(RuntimeError):
            await client.get_countries("E")
        with pytest.raises(RuntimeError):
            await client.get_congregations("FR", "E", "")


# ============================================
# Mail client
# ============================================
def _mock_http_client(**post_kwargs):
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(**post_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestMailClient:
    @pytest.mark.anyio
    async def test_mock_delivery_without_url(self):
        mail = MailClient(base_url="", reviewer_email="reviewer@example.com")
        with patch("app.services.mail_client.httpx.AsyncClient") as http_client:
            await mail.send_congregation_created("x@example.com", "x", "Alpha", "1234")
        http_client.assert_not_called()

    @pytest.mark.anyio
    async def test_delivery_through_notification_service(self):
        mock_client = _mock_http_client(return_value=MagicMock(status_code=201))
        mail = MailClient(base_url="http://notify.test", reviewer_email="reviewer@example.com")
        with patch("app.services.mail_client.httpx.AsyncClient", return_value=mock_client):
            await mail.send_congregation_request("Alpha", "1234", "bob")

        mock_client.post.assert_awaited_once()
        args, kwargs = mock_client.post.call_args
        assert args[0] == "http://notify.test/api/v1/notify"
        assert kwargs["json"]["channel"] == "email"
        assert kwargs["json"]["recipient"] == "reviewer@example.com"
        assert "Alpha" in kwargs["json"]["message"]

    @pytest.mark.anyio
    async def test_delivery_failure_is_swallowed(self):
        mock_client = _mock_http_client(side_effect=httpx.ConnectError("down"))
        mail = MailClient(base_url="http://notify.test", reviewer_email="reviewer@example.com")
        with patch("app.services.mail_client.httpx.AsyncClient", return_value=mock_client):
            await mail.send_congregation_created("x@example.com", "x", "Alpha", "1234")

    @pytest.mark.anyio
    async def test_request_without_reviewer_is_not_sent(self):
        mail = MailClient(base_url="http://notify.test", reviewer_email="")
        with patch.object(mail, "send", new=AsyncMock()) as send:
            await mail.send_congregation_request("Alpha", "1234", "bob")
        send.assert_not_awaited()


# ============================================
# One-time code cipher
# ============================================
class TestCodeCipher:
    def test_generated_code_format(self):
        assert re.fullmatch(r"[A-Z0-9]{10}", CodeCipher.generate_code())

    def test_codes_differ(self):
        assert CodeCipher.generate_code() != CodeCipher.generate_code()

    def test_ciphertext_is_not_the_code(self):
        cipher = CodeCipher()
        token = cipher.encrypt("ABCDE12345")
        assert token != "ABCDE12345"
        assert cipher.decrypt(token) == "ABCDE12345"

    def test_other_key_cannot_decrypt(self):
        from cryptography.fernet import Fernet, InvalidToken

        token = CodeCipher(Fernet.generate_key()).encrypt("ABCDE12345")
        with pytest.raises(InvalidToken):
            CodeCipher(Fernet.generate_key()).decrypt(token)
