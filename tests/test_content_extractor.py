import httpx

from newsagent.ingestion import ContentExtractor, extract_from_html

LONG = "Claude Code now supports background tasks and hooks. " * 10


def _page(body: str) -> str:
    return f"<html><head><title>t</title><script>var x = 1;</script></head><body>{body}</body></html>"


def test_prefers_article_element():
    html = _page(f"<nav>Home About</nav><article>{LONG}</article><main>{'other ' * 100}</main>")

    text = extract_from_html(html)

    assert text.startswith("Claude Code now supports")
    assert "other" not in text
    assert "Home" not in text


def test_short_article_falls_through_to_main():
    html = _page(f"<article>Too short</article><main>{LONG}</main>")

    text = extract_from_html(html)

    assert "Too short" not in text
    assert text.startswith("Claude Code")


def test_role_main_counts_as_main():
    html = _page(f"<div role='main'>{LONG}</div><footer>Copyright</footer>")

    text = extract_from_html(html)

    assert text.startswith("Claude Code")
    assert "Copyright" not in text


def test_body_used_when_no_region_is_long_enough():
    html = _page("<p>Tiny page</p><footer>Footer text</footer>")

    assert extract_from_html(html) == "Tiny page"


def test_truncates_to_max_chars():
    html = _page(f"<article>{LONG * 20}</article>")

    assert len(extract_from_html(html)) == 3000
    assert len(extract_from_html(html, max_chars=500)) == 500


def test_failed_fetches_return_empty_text():
    def handler(request):
        if request.url.path == "/ok":
            return httpx.Response(200, html=_page(f"<article>{LONG}</article>"))
        if request.url.path == "/timeout":
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(503)

    extractor = ContentExtractor(transport=httpx.MockTransport(handler))

    texts = extractor.extract_all_sync(
        ["https://x.example/ok", "https://x.example/timeout", "https://x.example/down"]
    )

    assert texts["https://x.example/ok"].startswith("Claude Code")
    assert texts["https://x.example/timeout"] == ""
    assert texts["https://x.example/down"] == ""


def test_duplicate_urls_fetched_once():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, html=_page(f"<article>{LONG}</article>"))

    extractor = ContentExtractor(transport=httpx.MockTransport(handler))

    texts = extractor.extract_all_sync(["https://x.example/a", "https://x.example/a"])

    assert list(texts) == ["https://x.example/a"]
    assert calls == ["/a"]
