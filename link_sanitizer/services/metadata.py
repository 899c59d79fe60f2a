"""Link preview extraction.

`MetadataService.extract` fetches a sanitized URL once and turns the response
into a `PreviewResult`: a `PreviewRecord` built from Open Graph, Twitter Card
and plain meta tags, plus an optional message describing why the preview is
missing or partial. Faults are reported in the result, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

import aiohttp
from bs4 import BeautifulSoup
from pydantic import BaseModel

from link_sanitizer.config import PREVIEW_TIMEOUT_CEILING, settings

logger = logging.getLogger(__name__)

ACCEPT_HEADER = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
)
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")

NOT_HTML_ERROR = "Content is not HTML, cannot generate rich preview."
NO_METADATA_ERROR = "No metadata found for preview."
TIMEOUT_ERROR = "Fetching preview timed out."
NETWORK_ERROR = (
    "Could not fetch link preview. "
    "The website might be inaccessible or block requests."
)


def status_error(status: int) -> str:
    return f"Failed to fetch URL: Status {status}"


class PreviewRecord(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    site_name: Optional[str] = None
    image_url: Optional[str] = None
    icon_url: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class PreviewResult(BaseModel):
    data: Optional[PreviewRecord] = None
    error: Optional[str] = None


def _meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    # Plain meta name first, then Open Graph, then Twitter Card.
    lookups = (
        {"name": name},
        {"property": f"og:{name}"},
        {"name": f"og:{name}"},
        {"property": f"twitter:{name}"},
        {"name": f"twitter:{name}"},
    )
    for attrs in lookups:
        tag = soup.find("meta", attrs=attrs)
        if tag is None:
            continue
        content = (tag.get("content") or "").strip()
        if content:
            return content
    return None


def _title_text(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.find("title")
    if tag is None:
        return None
    return tag.get_text().strip() or None


def _icon_href(soup: BeautifulSoup) -> Optional[str]:
    for wanted in ("shortcut icon", "icon"):
        for link in soup.find_all("link"):
            rel = link.get("rel") or ""
            if isinstance(rel, list):
                rel = " ".join(rel)
            if rel.strip().lower() != wanted:
                continue
            href = (link.get("href") or "").strip()
            if href:
                return href
    return None


def _resolve(base_url: str, href: str) -> Optional[str]:
    try:
        resolved = urljoin(base_url, href)
        if not urlsplit(resolved).scheme:
            return None
    except ValueError:
        return None
    return resolved


def _last_path_segment(url: str) -> Optional[str]:
    return urlsplit(url).path.rsplit("/", 1)[-1] or None


def parse_preview(html: str, url: str) -> PreviewRecord:
    """Extract a preview record from an HTML document fetched from `url`.

    Image and icon hrefs are resolved against `url`; an href that cannot be
    resolved is dropped. Without an icon link, ``/favicon.ico`` on the same
    origin is assumed.
    """
    soup = BeautifulSoup(html, "html.parser")
    hostname = urlsplit(url).hostname

    image = _meta_content(soup, "image")
    icon = _icon_href(soup)
    return PreviewRecord(
        title=_meta_content(soup, "title") or _title_text(soup),
        description=_meta_content(soup, "description"),
        site_name=_meta_content(soup, "site_name") or hostname or None,
        image_url=_resolve(url, image) if image else None,
        icon_url=_resolve(url, icon or "/favicon.ico"),
    )


class MetadataService:
    """Fetches a page and builds its link preview."""

    def __init__(
        self, timeout: float | None = None, user_agent: str | None = None
    ) -> None:
        if timeout is None:
            timeout = settings.preview_timeout_seconds
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = min(timeout, PREVIEW_TIMEOUT_CEILING)
        self.user_agent = user_agent or settings.preview_user_agent

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": ACCEPT_HEADER}

    async def extract(
        self, url: str, session: aiohttp.ClientSession | None = None
    ) -> PreviewResult:
        """Fetch `url` once and return its preview.

        Cancellation by the caller propagates; every other failure is turned
        into a `PreviewResult` carrying an error message.
        """
        try:
            if session is None:
                async with aiohttp.ClientSession() as own_session:
                    return await self._fetch(own_session, url)
            return await self._fetch(session, url)
        except asyncio.TimeoutError:
            logger.warning("Preview fetch timed out after %ss: %s", self.timeout, url)
            return PreviewResult(error=TIMEOUT_ERROR)
        except Exception as exc:
            logger.warning("Preview fetch failed for %s: %s", url, exc)
            return PreviewResult(error=NETWORK_ERROR)

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> PreviewResult:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with session.get(
            url, headers=self._headers(), timeout=timeout, allow_redirects=True
        ) as response:
            if not 200 <= response.status < 300:
                return PreviewResult(error=status_error(response.status))

            content_type = response.headers.get("Content-Type", "").lower()
            if content_type.startswith("image/"):
                record = PreviewRecord(image_url=url, title=_last_path_segment(url))
                return PreviewResult(data=record)
            if not any(ct in content_type for ct in HTML_CONTENT_TYPES):
                return PreviewResult(error=NOT_HTML_ERROR)

            html = await response.text(errors="replace")

        record = parse_preview(html, url)
        if record.is_empty():
            fallback = PreviewRecord(title=urlsplit(url).hostname)
            return PreviewResult(data=fallback, error=NO_METADATA_ERROR)
        return PreviewResult(data=record)


async def fetch_preview(url: str, timeout: float | None = None) -> PreviewResult:
    """Convenience wrapper: one preview fetch with a fresh service."""
    return await MetadataService(timeout=timeout).extract(url)
