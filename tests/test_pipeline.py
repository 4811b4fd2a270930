"""Tests for pipeline wiring."""

import pytest

from conftest import FakeAnalyzer, FakeDictionaryProvider, FakeResponse, FakeSession
from kashibotto.core import genius
from kashibotto.core.genius import GeniusApiClient, GeniusWebClient
from kashibotto.pipeline import Pipeline, create_pipeline
from kashibotto.utils.cache import JsonFileStorage, MemoryStorage


def test_web_client_without_token(temp_dir):
    pipeline = create_pipeline(
        access_token="", storage_mode="memory", cache_path=temp_dir / "c.json"
    )

    assert isinstance(pipeline, Pipeline)
    assert isinstance(pipeline.retriever.client, GeniusWebClient)
    assert pipeline.retriever.fallback_client is pipeline.retriever.client
    assert isinstance(pipeline.dictionary.storage, MemoryStorage)
    assert pipeline.processor.segmenter is pipeline.segmenter
    assert pipeline.processor.dictionary is pipeline.dictionary


def test_api_client_with_token(monkeypatch, temp_dir):
    monkeypatch.setattr(genius.lyricsgenius, "Genius", lambda *a, **kw: object())
    pipeline = create_pipeline(
        access_token="token", storage_mode="file", cache_path=temp_dir / "c.json"
    )

    assert isinstance(pipeline.retriever.client, GeniusApiClient)
    assert isinstance(pipeline.retriever.fallback_client, GeniusWebClient)
    assert isinstance(pipeline.dictionary.storage, JsonFileStorage)


def test_token_read_from_environment(monkeypatch, temp_dir):
    monkeypatch.setenv("GENIUS_ACCESS_TOKEN", "from-env")
    monkeypatch.setattr(genius.lyricsgenius, "Genius", lambda *a, **kw: object())
    pipeline = create_pipeline(storage_mode="memory", cache_path=temp_dir / "c.json")
    assert isinstance(pipeline.retriever.client, GeniusApiClient)


def test_fetch_and_process(
    genius_search_payload, lyrics_page_html, temp_dir, no_sleep
):
    session = FakeSession(
        [
            FakeResponse(json_data=genius_search_payload),
            FakeResponse(text=lyrics_page_html),
        ]
    )
    pipeline = create_pipeline(
        access_token="",
        storage_mode="memory",
        cache_path=temp_dir / "c.json",
        session=session,
        analyzer=FakeAnalyzer(),
    )
    pipeline.dictionary.provider = FakeDictionaryProvider({"光": ["light"]})

    lyrics = pipeline.fetch_lyrics("Lemon", "Kenshi Yonezu")
    assert lyrics.splitlines()[-1] == "今でもあなたはわたしの光"

    result = pipeline.process_lyrics(lyrics)
    last_line = result.lines[-1]
    assert last_line[-1].text == "光"
    assert last_line[-1].translation == "light"

    segmented = pipeline.segment_lyrics("光\n\nlight")
    assert [len(line) for line in segmented] == [1, 0, 1]

    assert pipeline.lookup_batch(["光", "light"])[1] is None


def test_search_songs(genius_search_payload, temp_dir):
    session = FakeSession([FakeResponse(json_data=genius_search_payload)])
    pipeline = create_pipeline(
        access_token="",
        storage_mode="memory",
        cache_path=temp_dir / "c.json",
        session=session,
        analyzer=FakeAnalyzer(),
    )

    results = pipeline.search_songs("Lemon")

    assert [r.to_suggestion() for r in results] == [
        {
            "id": 3346617,
            "title": "Lemon",
            "artist": "Kenshi Yonezu",
            "full_title": "Lemon by Kenshi Yonezu",
        }
    ]
    assert session.calls[0]["params"] == {"per_page": 8, "q": "Lemon"}
    assert pipeline.search_songs("L") == []
    assert len(session.calls) == 1


@pytest.mark.network
def test_live_lookup(temp_dir):
    pipeline = create_pipeline(storage_mode="memory", cache_path=temp_dir / "c.json")
    entry = pipeline.lookup_batch(["猫"])[0]
    assert "cat" in entry.definitions
