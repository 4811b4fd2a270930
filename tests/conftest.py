"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary files and directories
- Fake HTTP responses and sessions
- Fake lyrics clients, morphological analyzer and dictionary provider
- Genius and Jisho response payloads
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from kashibotto.core.models import (
    AnalyzerToken,
    DictionaryEntry,
    LyricsSearchResult,
    TokenStatus,
)
from kashibotto.exceptions import RateLimitedError


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def no_sleep(monkeypatch):
    """Record sleeps instead of waiting."""
    sleeps: List[float] = []
    monkeypatch.setattr("time.sleep", lambda seconds: sleeps.append(seconds))
    return sleeps


# =============================================================================
# HTTP Fakes
# =============================================================================


class FakeResponse:
    def __init__(self, text="", json_data=None, status_code=200):
        self.text = text
        self._json_data = json_data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if not self._responses:
            raise requests.exceptions.ConnectionError("no response queued")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


# =============================================================================
# Lyrics Fakes
# =============================================================================


class FakeLyricsClient:
    """In-memory lyrics client that counts calls.

    ``search_results`` and ``lyrics`` may contain exceptions, which are raised
    on the corresponding call in order.
    """

    name = "fake"

    def __init__(self, search_results=None, lyrics=None):
        self.search_results = list(search_results or [])
        self.lyrics = list(lyrics or [])
        self.search_calls: List[str] = []
        self.search_limits: List[Optional[int]] = []
        self.fetch_calls: List[LyricsSearchResult] = []

    def search(self, query, limit=None):
        self.search_calls.append(query)
        self.search_limits.append(limit)
        if not self.search_results:
            return []
        result = self.search_results.pop(0) if len(self.search_results) > 1 else self.search_results[0]
        if isinstance(result, Exception):
            raise result
        return result

    def fetch_lyrics_text(self, result):
        self.fetch_calls.append(result)
        if not self.lyrics:
            raise requests.exceptions.ConnectionError("no lyrics queued")
        text = self.lyrics.pop(0) if len(self.lyrics) > 1 else self.lyrics[0]
        if isinstance(text, Exception):
            raise text
        return text


class FakeWebClient(FakeLyricsClient):
    """Fallback client serving raw pages."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, error: Exception = None):
        super().__init__()
        self.pages = pages or {}
        self.error = error
        self.page_calls: List[str] = []

    def fetch_page(self, url):
        self.page_calls.append(url)
        if self.error:
            raise self.error
        return self.pages[url]


def make_result(title="Lemon", artist="Kenshi Yonezu", url=None):
    return LyricsSearchResult(
        title=title,
        artist=artist,
        source_url=url or "https://genius.com/Kenshi-yonezu-lemon-lyrics",
    )


@pytest.fixture
def lemon_result():
    return make_result()


@pytest.fixture
def romanized_result():
    return make_result(
        title="Lemon (Romanized)",
        artist="Genius Romanizations",
        url="https://genius.com/Genius-romanizations-kenshi-yonezu-lemon-romanized-lyrics",
    )


@pytest.fixture
def lyrics_page_html():
    """A Genius-style song page with two lyrics containers and page chrome."""
    return """
    <html><head><script>var x = 1;</script></head>
    <body>
      <div data-lyrics-container="true">
        <div class="LyricsHeader__Container">12 Contributors</div>
        [Verse 1]<br>夢ならばどれほどよかったでしょう<br>未だにあなたのことを夢にみる
      </div>
      <div data-lyrics-container="true">[Chorus]<br>今でもあなたはわたしの光</div>
    </body></html>
    """


# =============================================================================
# Segmentation / Dictionary Fakes
# =============================================================================


class FakeAnalyzer:
    """Analyzer returning canned tokens per line; unknown lines split per character."""

    def __init__(self, tokens: Optional[Dict[str, List[AnalyzerToken]]] = None, error=None):
        self.tokens = tokens or {}
        self.error = error
        self.calls: List[str] = []

    def __call__(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        if text in self.tokens:
            return self.tokens[text]
        return [AnalyzerToken(surface=c, status=TokenStatus.NORMAL, pos_tag="名詞") for c in text if not c.isspace()]


def token(surface, pos_tag="名詞", reading=None, status=TokenStatus.NORMAL):
    return AnalyzerToken(surface=surface, status=status, pos_tag=pos_tag, reading=reading)


class FakeDictionaryProvider:
    """Dictionary provider with canned entries and optional scripted failures.

    ``failures`` maps a word to a list of exceptions raised on successive calls
    before the canned entry is returned.
    """

    def __init__(self, entries: Optional[Dict[str, List[str]]] = None, failures=None):
        self.entries = entries or {}
        self.failures = {word: list(errors) for word, errors in (failures or {}).items()}
        self.calls: List[str] = []

    def search(self, word):
        self.calls.append(word)
        pending = self.failures.get(word)
        if pending:
            raise pending.pop(0)
        definitions = self.entries.get(word)
        if definitions is None:
            return None
        return DictionaryEntry(
            word=word,
            definitions=list(definitions),
            parts_of_speech=["Noun"],
            readings=[word],
        )


@pytest.fixture
def fake_provider():
    return FakeDictionaryProvider(
        {
            "猫": ["cat", "feline", "shamisen"],
            "犬": ["dog"],
            "引っ": ["to pull"],
        }
    )


@pytest.fixture
def rate_limited():
    return RateLimitedError("Rate limited by jisho")


@pytest.fixture
def jisho_payload():
    """Jisho search response for 猫 (trimmed)."""
    return {
        "meta": {"status": 200},
        "data": [
            {
                "slug": "猫",
                "japanese": [{"word": "猫", "reading": "ねこ"}],
                "senses": [
                    {
                        "english_definitions": ["cat"],
                        "parts_of_speech": ["Noun"],
                    },
                    {
                        "english_definitions": ["shamisen"],
                        "parts_of_speech": ["Noun"],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def genius_search_payload():
    """Genius public search response with a song and a non-lyrics hit."""
    return {
        "response": {
            "sections": [
                {
                    "type": "song",
                    "hits": [
                        {
                            "result": {
                                "id": 3346617,
                                "title": "Lemon",
                                "url": "https://genius.com/Kenshi-yonezu-lemon-lyrics",
                                "full_title": "Lemon by Kenshi Yonezu",
                                "primary_artist": {"name": "Kenshi Yonezu"},
                            }
                        },
                        {
                            "result": {
                                "id": 1,
                                "title": "Kenshi Yonezu",
                                "url": "https://genius.com/artists/Kenshi-yonezu",
                                "primary_artist": {"name": "Kenshi Yonezu"},
                            }
                        },
                    ],
                },
                {"type": "artist", "hits": []},
            ]
        }
    }
