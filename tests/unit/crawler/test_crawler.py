"""Unit tests for the WebCrawler class."""
import asyncio

import pytest

from smartcrawler.crawler.crawler import WebCrawler
from smartcrawler.exceptions import InvalidSeedUrlError
from smartcrawler.models.options import CrawlOptions

HOME_HTML = """<html><body>
<nav><a href="/about">About</a></nav>
<main>
  <h1>Home</h1>
  <p>Welcome</p>
  <a href="/docs/">Docs</a>
  <a href="/docs#install">Install</a>
  <a href="https://other.test/">Elsewhere</a>
  <a href="https://x.test:8443/admin">Admin</a>
  <a href="mailto:team@x.test">Mail</a>
  <a href="javascript:void(0)">Noop</a>
</main>
</body></html>"""

ABOUT_HTML = """<html><body><main><p>About page</p>
<a href="/">Home</a><a href="/shared">Shared</a><a href="/deeper">Deeper</a>
</main></body></html>"""

DOCS_HTML = """<html><body><main><p>Docs page</p>
<a href="/shared/">Shared</a>
</main></body></html>"""

SHARED_HTML = "<html><body><main><p>Shared page</p></main></body></html>"


def html_response(mock, url, body, **kwargs):
    mock.get(url, status=200, body=body, content_type="text/html", **kwargs)


@pytest.mark.asyncio
async def test_crawl_single_page_depth_zero(mock_aioresponse):
    """A page without links at depth 0 yields exactly one fragment."""
    html_response(mock_aioresponse, "https://x.test/", "<html><body><p>Hello</p></body></html>")

    async with WebCrawler(CrawlOptions(max_depth=0, request_delay=0)) as crawler:
        result = await crawler.crawl("https://x.test/")

    assert result.start_url == "https://x.test/"
    assert len(result.pages) == 1
    assert result.pages[0].markdown == "Hello"
    assert result.visited == {"https://x.test/"}
    assert result.failed == []


@pytest.mark.asyncio
async def test_crawl_follows_in_scope_links_breadth_first(mock_aioresponse, crawl_options):
    html_response(mock_aioresponse, "https://x.test/", HOME_HTML)
    html_response(mock_aioresponse, "https://x.test/about", ABOUT_HTML)
    html_response(mock_aioresponse, "https://x.test/docs", DOCS_HTML)

    async with WebCrawler(crawl_options) as crawler:
        result = await crawler.crawl("https://x.test")

    # Navigation links are followed even though nav text is not captured
    assert [page.url for page in result.pages] == [
        "https://x.test/",
        "https://x.test/about",
        "https://x.test/docs",
    ]
    assert [page.depth for page in result.pages] == [0, 1, 1]
    assert "About" not in result.pages[0].markdown
    assert result.visited == {
        "https://x.test/",
        "https://x.test/about",
        "https://x.test/docs",
    }
    assert result.failed == []


@pytest.mark.asyncio
async def test_crawl_enqueues_each_url_once(mock_aioresponse):
    """A URL linked from several pages of one level is fetched only once."""
    html_response(mock_aioresponse, "https://x.test/", HOME_HTML)
    html_response(mock_aioresponse, "https://x.test/about", ABOUT_HTML)
    html_response(mock_aioresponse, "https://x.test/docs", DOCS_HTML)
    html_response(mock_aioresponse, "https://x.test/shared", SHARED_HTML)
    html_response(mock_aioresponse, "https://x.test/deeper", SHARED_HTML)

    async with WebCrawler(CrawlOptions(max_depth=2, request_delay=0)) as crawler:
        result = await crawler.crawl("https://x.test/")

    urls = [page.url for page in result.pages]
    assert urls.count("https://x.test/shared") == 1
    assert len(result.visited) == 5
    assert len(urls) == 5
    assert result.failed == []


@pytest.mark.asyncio
async def test_crawl_page_failures_are_not_fatal(mock_aioresponse, crawl_options):
    html_response(mock_aioresponse, "https://x.test/", HOME_HTML)
    mock_aioresponse.get("https://x.test/about", status=404, body="Not Found", content_type="text/html")
    mock_aioresponse.get("https://x.test/docs", exception=asyncio.TimeoutError())

    async with WebCrawler(crawl_options) as crawler:
        result = await crawler.crawl("https://x.test/")

    assert [page.url for page in result.pages] == ["https://x.test/"]
    assert sorted(result.failed) == ["https://x.test/about", "https://x.test/docs"]
    assert len(result.visited) == 3


@pytest.mark.asyncio
async def test_crawl_skips_non_html(mock_aioresponse, crawl_options):
    mock_aioresponse.get(
        "https://x.test/report",
        status=200,
        body="%PDF-1.4 <a href='/hidden'>",
        content_type="application/pdf",
    )

    async with WebCrawler(crawl_options) as crawler:
        result = await crawler.crawl("https://x.test/report")

    assert result.pages == []
    assert result.failed == []
    assert result.visited == {"https://x.test/report"}


@pytest.mark.asyncio
async def test_crawl_sends_user_agent(mock_aioresponse, http_session):
    html_response(mock_aioresponse, "https://x.test/", "<p>Hi</p>")
    options = CrawlOptions(max_depth=0, request_delay=0, user_agent="TestAgent/2.0")

    crawler = WebCrawler(options, session=http_session)
    await crawler.crawl("https://x.test/")
    await crawler.close()

    # An injected session is left open for its owner
    assert not http_session.closed
    (request,) = [call for calls in mock_aioresponse.requests.values() for call in calls]
    assert request.kwargs["headers"]["User-Agent"] == "TestAgent/2.0"


@pytest.mark.asyncio
async def test_crawl_invalid_seed_is_fatal():
    async with WebCrawler(CrawlOptions(request_delay=0)) as crawler:
        with pytest.raises(InvalidSeedUrlError):
            await crawler.crawl("not a url")
        with pytest.raises(InvalidSeedUrlError):
            await crawler.crawl("mailto:team@x.test")


@pytest.mark.asyncio
async def test_crawl_state_is_scoped_to_one_invocation(mock_aioresponse):
    html_response(mock_aioresponse, "https://x.test/", "<p>Hi</p>", repeat=True)

    async with WebCrawler(CrawlOptions(max_depth=0, request_delay=0)) as crawler:
        first = await crawler.crawl("https://x.test/")
        second = await crawler.crawl("https://x.test/")

    assert len(first.pages) == 1
    assert len(second.pages) == 1
    assert first.visited is not second.visited


@pytest.mark.asyncio
async def test_crawl_accepts_3xx_status(mock_aioresponse):
    mock_aioresponse.get(
        "https://x.test/",
        status=300,
        body="<main><p>Choices</p></main>",
        content_type="text/html",
    )

    async with WebCrawler(CrawlOptions(max_depth=0, request_delay=0)) as crawler:
        result = await crawler.crawl("https://x.test/")

    assert [page.markdown for page in result.pages] == ["Choices"]
    assert result.failed == []


@pytest.mark.asyncio
async def test_crawl_follows_redirect(mock_aioresponse):
    mock_aioresponse.get("https://x.test/", status=301, headers={"Location": "https://x.test/home"})
    html_response(mock_aioresponse, "https://x.test/home", "<main><p>Home</p></main>")

    async with WebCrawler(CrawlOptions(max_depth=0, request_delay=0)) as crawler:
        result = await crawler.crawl("https://x.test/")

    assert [page.markdown for page in result.pages] == ["Home"]
    assert result.pages[0].url == "https://x.test/"
    assert result.failed == []


@pytest.mark.asyncio
async def test_crawl_applies_request_timeout(mock_aioresponse):
    html_response(mock_aioresponse, "https://x.test/", "<p>Hi</p>")
    options = CrawlOptions(max_depth=0, request_delay=0, request_timeout=3.5)

    async with WebCrawler(options) as crawler:
        await crawler.crawl("https://x.test/")

    (request,) = [call for calls in mock_aioresponse.requests.values() for call in calls]
    assert request.kwargs["timeout"].total == 3.5
