# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: EPUB reader — downloads a workbook issue and extracts its weeks.

The package document gives title, language and reading order. Every spine
document that carries a week heading and timed parts becomes one week:

    h1  week date          ("OCTOBER 19-25")
    h2  Bible reading       (first h2), then section titles
    h3  numbered parts     ("3. Bible Reading (4 min.)"), songs included
"""

import io
import posixpath
import re
import zipfile
from typing import Any, Optional
from xml.etree import ElementTree

import httpx
from bs4 import BeautifulSoup

CONTAINER_PATH = "META-INF/container.xml"
NAMESPACES = {
    "c": "urn:oasis:names:tc:opendocument:xmlns:container",
    "opf": "http://www.idpf.org/2007/opf",
    "dc": "http://purl.org/dc/elements/1.1/",
}

SONG_PATTERN = re.compile(r"\bsong\s+(\d+)", re.IGNORECASE)
MINUTES_PATTERN = re.compile(r"\((\d+)\s*min", re.IGNORECASE)


def _heading_text(tag) -> str:
    return " ".join(tag.get_text(" ", strip=True).split())


def read_week(markup: bytes | str) -> Optional[dict[str, Any]]:
    """One week of meeting parts, or None for non-week documents (cover, toc)."""
    soup = BeautifulSoup(markup, "html.parser")
    week_date = ""
    bible_reading = ""
    section = ""
    songs: list[int] = []
    parts: list[dict[str, Any]] = []

    for heading in soup.find_all(["h1", "h2", "h3"]):
        text = _heading_text(heading)
        if not text:
            continue
        if heading.name == "h1":
            week_date = week_date or text
        elif heading.name == "h2":
            if bible_reading:
                section = text
            else:
                bible_reading = text
        else:
            songs.extend(int(number) for number in SONG_PATTERN.findall(text))
            minutes = MINUTES_PATTERN.search(text)
            if minutes:
                parts.append({
                    "section": section,
                    "title": text,
                    "minutes": int(minutes.group(1)),
                })

    if not week_date or not parts:
        return None
    return {
        "weekDate": week_date,
        "bibleReading": bible_reading,
        "songs": songs,
        "parts": parts,
    }


def read_epub_workbook(data: bytes) -> dict[str, Any]:
    """Title, language, reading-order documents and weeks of an EPUB archive."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        container = ElementTree.fromstring(archive.read(CONTAINER_PATH))
        rootfile = container.find("c:rootfiles/c:rootfile", NAMESPACES)
        if rootfile is None or not rootfile.get("full-path"):
            raise ValueError("EPUB container does not declare a package document")
        package_path = rootfile.get("full-path")
        package = ElementTree.fromstring(archive.read(package_path))

        metadata = package.find("opf:metadata", NAMESPACES)
        manifest = {
            item.get("id"): item.get("href")
            for item in package.iterfind("opf:manifest/opf:item", NAMESPACES)
        }
        documents = [
            manifest[ref.get("idref")]
            for ref in package.iterfind("opf:spine/opf:itemref", NAMESPACES)
            if ref.get("idref") in manifest
        ]

        # hrefs are relative to the package document
        base = posixpath.dirname(package_path)
        stored = set(archive.namelist())
        weeks = []
        for href in documents:
            path = posixpath.normpath(posixpath.join(base, href))
            if path not in stored:
                continue
            week = read_week(archive.read(path))
            if week is not None:
                weeks.append(week)

    return {
        "title": metadata.findtext("dc:title", default="", namespaces=NAMESPACES)
        if metadata is not None else "",
        "language": metadata.findtext("dc:language", default="", namespaces=NAMESPACES)
        if metadata is not None else "",
        "documents": documents,
        "weeks": weeks,
    }


class EpubReader:
    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def load(self, url: str) -> dict[str, Any]:
        resp = await self._client.get(url)
        resp.raise_for_status()
        return read_epub_workbook(resp.content)
