import asyncio

import httpx
import pytest

from autoconfig.errors import InputError
from autoconfig.fetcher import (
    FileFetcher,
    HttpFetcher,
    fetcher_for_url,
    normalize_html,
    slugify,
    write_html,
)


def test_file_fetcher(tmp_path):
    page = tmp_path / "page.html"
    page.write_text("<html><body><p>Hi</p></body></html>", encoding="utf-8")
    res = asyncio.run(FileFetcher().fetch(page.as_uri()))
    assert "<p>Hi</p>" in res.html
    assert res.url == page.as_uri()


def test_file_fetcher_missing(tmp_path):
    with pytest.raises(InputError) as exc_info:
        asyncio.run(FileFetcher().fetch((tmp_path / "missing.html").as_uri()))
    assert exc_info.value.url.endswith("missing.html")


def test_http_fetcher():
    def handler(request):
        assert "Mozilla" in request.headers["user-agent"]
        return httpx.Response(200, html="<html><body>ok</body></html>")

    fetcher = HttpFetcher(transport=httpx.MockTransport(handler))
    res = asyncio.run(fetcher.fetch("https://example.com/"))
    assert res.status_code == 200
    assert "ok" in res.html
    assert res.content_type.startswith("text/html")


def test_http_fetcher_error_status():
    fetcher = HttpFetcher(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    with pytest.raises(InputError):
        asyncio.run(fetcher.fetch("https://example.com/missing"))


def test_fetcher_for_url():
    assert isinstance(fetcher_for_url("file:///tmp/x.html"), FileFetcher)
    assert isinstance(fetcher_for_url("https://example.com"), HttpFetcher)


def test_normalize_html():
    html = normalize_html("<table><tr><td>x</td></tr></table>")
    assert "<body>" in html
    assert "<tbody>" in html


def test_slugify_and_write_html(tmp_path):
    assert slugify("https://Example.com/events?page=2") == "https-example-com-events-page-2"
    path = write_html("<html></html>", tmp_path / "out", "https://example.com/a")
    assert path.name == "https-example-com-a.html"
    assert path.read_text(encoding="utf-8") == "<html></html>"
