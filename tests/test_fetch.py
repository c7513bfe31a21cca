from unittest.mock import MagicMock, patch

import httpx
import pytest

from chordgrab.config import FetchConfig
from chordgrab.exceptions import FetchError, FetchErrorKind
from chordgrab.extractors.jtotal import JTotalExtractor
from chordgrab.fetch import fetch_page

TEST_URL = "https://music.j-total.net/data/a/b.html"


def _response(status_code=200, text="<pre>C  G\n歌詞</pre>") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------


def test_fetch_returns_body():
    with patch("chordgrab.fetch.httpx.get", return_value=_response()) as get:
        assert fetch_page(TEST_URL) == "<pre>C  G\n歌詞</pre>"
    _, kwargs = get.call_args
    assert kwargs["follow_redirects"] is True
    assert kwargs["timeout"] == 30.0
    assert "Mozilla" in kwargs["headers"]["User-Agent"]
    assert kwargs["headers"]["Accept-Language"].startswith("ja")


def test_fetch_uses_config():
    config = FetchConfig(timeout=5.0, user_agent="chordgrab-test")
    with patch("chordgrab.fetch.httpx.get", return_value=_response()) as get:
        fetch_page(TEST_URL, config)
    _, kwargs = get.call_args
    assert kwargs["timeout"] == 5.0
    assert kwargs["headers"]["User-Agent"] == "chordgrab-test"


def test_fetch_status_error():
    with patch("chordgrab.fetch.httpx.get", return_value=_response(status_code=404)):
        with pytest.raises(FetchError) as excinfo:
            fetch_page(TEST_URL)
    assert excinfo.value.kind is FetchErrorKind.STATUS
    assert excinfo.value.status_code == 404
    assert "404" in str(excinfo.value)


def test_fetch_timeout():
    with patch("chordgrab.fetch.httpx.get", side_effect=httpx.ReadTimeout("slow")):
        with pytest.raises(FetchError) as excinfo:
            fetch_page(TEST_URL)
    assert excinfo.value.kind is FetchErrorKind.TIMEOUT


def test_fetch_network_error():
    with patch("chordgrab.fetch.httpx.get", side_effect=httpx.ConnectError("refused")):
        with pytest.raises(FetchError) as excinfo:
            fetch_page(TEST_URL)
    assert excinfo.value.kind is FetchErrorKind.NETWORK
    assert excinfo.value.url == TEST_URL


# ---------------------------------------------------------------------------
# Extractor.scrape
# ---------------------------------------------------------------------------


def test_scrape_tags_sheet_with_url():
    with patch("chordgrab.fetch.httpx.get", return_value=_response()):
        sheet = JTotalExtractor().scrape(TEST_URL)
    assert sheet.source_url == TEST_URL
    assert sheet.sections[0].lines[0].lyrics == "歌詞"
