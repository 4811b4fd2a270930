"""Tests for the Genius lyrics clients."""

from unittest.mock import MagicMock

import pytest

from conftest import FakeResponse, FakeSession, make_result
from kashibotto.core import genius
from kashibotto.core.genius import (
    GeniusApiClient,
    GeniusWebClient,
    LyricsClient,
    create_lyrics_client,
)
from kashibotto.exceptions import LyricsUnavailableError


class TestGeniusWebClient:
    def test_search_keeps_song_pages(self, genius_search_payload):
        session = FakeSession([FakeResponse(json_data=genius_search_payload)])
        client = GeniusWebClient(session=session, per_page=5)

        results = client.search("Lemon Kenshi Yonezu")

        assert len(results) == 1
        assert results[0].title == "Lemon"
        assert results[0].artist == "Kenshi Yonezu"
        assert results[0].song_id == 3346617
        assert session.calls[0]["url"] == genius.GENIUS_SEARCH_URL
        assert session.calls[0]["params"] == {"per_page": 5, "q": "Lemon Kenshi Yonezu"}

    def test_search_limit_overrides_page_size(self, genius_search_payload):
        session = FakeSession([FakeResponse(json_data=genius_search_payload)])
        results = GeniusWebClient(session=session, per_page=5).search("Lemon", limit=8)

        assert session.calls[0]["params"] == {"per_page": 8, "q": "Lemon"}
        assert results[0].full_title == "Lemon by Kenshi Yonezu"

    def test_search_empty_response(self):
        session = FakeSession([FakeResponse(json_data={"response": {}})])
        assert GeniusWebClient(session=session).search("nothing") == []

    def test_fetch_lyrics_text(self, lyrics_page_html):
        session = FakeSession([FakeResponse(text=lyrics_page_html)])
        text = GeniusWebClient(session=session).fetch_lyrics_text(make_result())
        assert "今でもあなたはわたしの光" in text

    def test_fetch_lyrics_text_without_lyrics(self):
        session = FakeSession([FakeResponse(text="<html><body>404</body></html>")])
        with pytest.raises(LyricsUnavailableError):
            GeniusWebClient(session=session).fetch_lyrics_text(make_result())


class TestGeniusApiClient:
    def test_search_maps_hits(self):
        api = MagicMock()
        api.search_songs.return_value = {
            "hits": [
                {
                    "result": {
                        "id": 7,
                        "title": "Lemon",
                        "url": "https://genius.com/Kenshi-yonezu-lemon-lyrics",
                        "artist_names": "Kenshi Yonezu",
                    }
                },
                {"result": {"title": "no url"}},
            ]
        }
        client = GeniusApiClient("token", per_page=3, genius=api)

        results = client.search("Lemon")

        api.search_songs.assert_called_once_with("Lemon", per_page=3)
        assert [r.artist for r in results] == ["Kenshi Yonezu"]

    def test_search_limit_overrides_page_size(self):
        api = MagicMock()
        api.search_songs.return_value = None
        assert GeniusApiClient("token", per_page=3, genius=api).search("Lemon", limit=8) == []
        api.search_songs.assert_called_once_with("Lemon", per_page=8)

    def test_fetch_lyrics_text(self):
        api = MagicMock()
        api.lyrics.return_value = "歌詞"
        result = make_result()

        assert GeniusApiClient("token", genius=api).fetch_lyrics_text(result) == "歌詞"
        api.lyrics.assert_called_once_with(song_url=result.source_url)

    def test_fetch_lyrics_text_empty(self):
        api = MagicMock()
        api.lyrics.return_value = None
        with pytest.raises(LyricsUnavailableError):
            GeniusApiClient("token", genius=api).fetch_lyrics_text(make_result())


def test_create_lyrics_client_without_token():
    assert isinstance(create_lyrics_client(None), GeniusWebClient)


def test_create_lyrics_client_with_token(monkeypatch):
    created = {}

    class FakeGenius:
        def __init__(self, token, **kwargs):
            created["token"] = token
            created.update(kwargs)

    monkeypatch.setattr(genius.lyricsgenius, "Genius", FakeGenius)
    client = create_lyrics_client("secret")

    assert isinstance(client, GeniusApiClient)
    assert created["token"] == "secret"
    assert created["retries"] == 0


class TestLyricsClient:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            LyricsClient()

    def test_subclass_must_implement_fetch(self):
        class SearchOnly(LyricsClient):
            def search(self, query, limit=None):
                return []

        with pytest.raises(TypeError):
            SearchOnly()

    def test_complete_subclass(self):
        class Complete(LyricsClient):
            def search(self, query, limit=None):
                return [make_result()]

            def fetch_lyrics_text(self, result):
                return "歌詞"

        client = Complete()
        assert client.fetch_lyrics_text(client.search("Lemon")[0]) == "歌詞"
