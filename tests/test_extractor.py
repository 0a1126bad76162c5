"""Tests for the main-content extractor."""

from unittest.mock import Mock

import requests

from rss_digest.extractor import (
    BROWSER_USER_AGENT,
    NO_CONTENT_SENTINEL,
    UNFETCHABLE_SENTINEL,
    Extraction,
    ExtractionError,
    extract,
    fetch_article,
    is_sentinel,
    select_main_content,
)


def _session(text="", error=None, status_error=None):
    session = Mock()
    if error is not None:
        session.get.side_effect = error
        return session
    resp = Mock()
    resp.text = text
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    session.get.return_value = resp
    return session


class TestSelectMainContent:
    def test_article_wins_over_longer_div(self):
        html = (
            "<html><body>"
            "<div>" + "navigation and footer text " * 20 + "</div>"
            "<article><h1>Title</h1><p>Short body</p></article>"
            "</body></html>"
        )

        assert select_main_content(html) == "TitleShort body"

    def test_main_used_when_no_article(self):
        html = "<div>a much longer div that should not be chosen</div><main><p>Main text</p></main>"

        assert select_main_content(html) == "Main text"

    def test_article_beats_main(self):
        html = "<main>main region</main><article>article region</article>"

        assert select_main_content(html) == "article region"

    def test_longest_div_selected(self):
        html = "<div>{}</div><div>{}</div><div>{}</div>".format("a" * 10, "b" * 50, "c" * 30)

        assert select_main_content(html) == "b" * 50

    def test_longest_div_measured_after_stripping_tags(self):
        html = '<div><span class="very-long-class-name-here">short</span></div><div>longer plain text</div>'

        assert select_main_content(html) == "longer plain text"

    def test_tie_keeps_first_div(self):
        html = "<div>first</div><div>other</div>"

        assert select_main_content(html) == "first"

    def test_tags_match_case_insensitively_across_lines(self):
        html = '<ARTICLE class="post">\n<P>Line one</P>\n<p>Line two</p>\n</ARTICLE>'

        assert select_main_content(html) == "Line one\nLine two"

    def test_entities_are_decoded(self):
        html = "<article><p>AT&amp;T &amp; Azure&nbsp;news &#8217;s</p></article>"

        assert select_main_content(html) == "AT&T & Azure\u00a0news \u2019s"

    def test_div_length_measured_after_decoding_entities(self):
        html = "<div>&amp;&amp;&amp;&amp;</div><div>plain text</div>"

        assert select_main_content(html) == "plain text"

    def test_empty_or_regionless_pages(self):
        assert select_main_content("") is None
        assert select_main_content("<html><body><p>No regions</p></body></html>") is None
        assert select_main_content("<article>   </article>") is None


class TestFetchArticle:
    def test_successful_fetch(self):
        session = _session("<article><p>Body</p></article>")

        result = fetch_article("https://example.com/post", session=session)

        assert result == Extraction(text="Body")
        assert result.ok
        session.get.assert_called_once_with(
            "https://example.com/post",
            headers={"User-Agent": BROWSER_USER_AGENT},
            timeout=20,
        )

    def test_non_http_link_is_never_fetched(self):
        session = _session("<article>x</article>")

        for link in ("", "/relative/path", "ftp://example.com/file", "mailto:a@example.com"):
            result = fetch_article(link, session=session)
            assert result.error is ExtractionError.SKIPPED
            assert result.as_text() == NO_CONTENT_SENTINEL

        session.get.assert_not_called()

    def test_timeout_is_unfetchable(self):
        session = _session(error=requests.Timeout("timed out"))

        result = fetch_article("https://example.com/slow", session=session)

        assert result.error is ExtractionError.UNFETCHABLE
        assert result.as_text() == UNFETCHABLE_SENTINEL

    def test_http_error_is_unfetchable(self):
        session = _session(status_error=requests.HTTPError("404 Client Error"))

        result = fetch_article("https://example.com/missing", session=session)

        assert result.error is ExtractionError.UNFETCHABLE

    def test_empty_body_is_no_content(self):
        result = fetch_article("https://example.com/empty", session=_session(""))

        assert result.error is ExtractionError.NO_CONTENT
        assert result.as_text() == NO_CONTENT_SENTINEL

    def test_missing_charset_uses_detected_encoding(self):
        session = _session("<main>caf\u00e9</main>")
        resp = session.get.return_value
        resp.encoding = "ISO-8859-1"
        resp.headers = {"Content-Type": "text/html"}
        resp.apparent_encoding = "utf-8"

        fetch_article("https://example.com/fr", session=session)

        assert resp.encoding == "utf-8"

    def test_declared_charset_is_kept(self):
        session = _session("<main>x</main>")
        resp = session.get.return_value
        resp.encoding = "ISO-8859-1"
        resp.headers = {"Content-Type": "text/html; charset=ISO-8859-1"}
        resp.apparent_encoding = "utf-8"

        fetch_article("https://example.com/latin", session=session)

        assert resp.encoding == "ISO-8859-1"

    def test_custom_timeout_and_user_agent(self):
        session = _session("<main>x</main>")

        fetch_article("http://example.com", timeout=5, user_agent="TestAgent/1.0", session=session)

        session.get.assert_called_once_with(
            "http://example.com", headers={"User-Agent": "TestAgent/1.0"}, timeout=5
        )


class TestExtract:
    def test_returns_text(self):
        assert extract("https://example.com", session=_session("<main>Hello</main>")) == "Hello"

    def test_returns_sentinel_on_failure(self):
        session = _session(error=requests.ConnectionError("refused"))

        assert extract("https://example.com", session=session) == UNFETCHABLE_SENTINEL

    def test_is_sentinel(self):
        assert is_sentinel(NO_CONTENT_SENTINEL)
        assert is_sentinel(UNFETCHABLE_SENTINEL)
        assert not is_sentinel("Real text")
        assert not is_sentinel(None)
