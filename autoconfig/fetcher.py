"""
Fetching and normalizing of the HTML to analyze.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlparse

import httpx
from selectolax.lexbor import LexborHTMLParser

from .errors import InputError

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1"
}


@dataclass
class FetchResult:
    html: str
    url: str
    status_code: int = 200
    content_type: str = "text/html"


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult:
        ...


class HttpFetcher:
    """Fetches static pages with httpx."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> FetchResult:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=HEADERS,
            transport=self.transport
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise InputError(f"failed to fetch page: {e}", url) from e
            return FetchResult(
                html=response.text,
                url=str(response.url),
                status_code=response.status_code,
                content_type=response.headers.get("content-type", "")
            )


class FileFetcher:
    """Reads pages from file:// URLs."""

    async def fetch(self, url: str) -> FetchResult:
        path = Path(unquote(urlparse(url).path))
        try:
            html = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise InputError(f"failed to read page: {e}", url) from e
        return FetchResult(html=html, url=url)


def fetcher_for_url(url: str) -> Fetcher:
    if url.startswith("file://"):
        return FileFetcher()
    return HttpFetcher()


def normalize_html(html: str) -> str:
    """
    Parse and re-serialize the HTML. The item parser reads the same normalized
    markup (e.g. with inserted <tbody> elements), so selectors found by the
    analyzer keep matching.
    """
    tree = LexborHTMLParser(html)
    normalized = tree.html
    if not normalized:
        raise InputError("could not parse HTML")
    return normalized


def slugify(url: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', url.lower()).strip('-')


def write_html(html: str, output_dir: Path, url: str) -> Path:
    """Write normalized HTML for debugging and return the file path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{slugify(url) or 'page'}.html"
    path.write_text(html, encoding="utf-8")
    logger.debug("wrote html to %s", path)
    return path
