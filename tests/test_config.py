from pathlib import Path

import pytest

from kashibotto import config
from kashibotto.exceptions import ConfigError


def test_cache_dir_from_env(monkeypatch, temp_dir):
    monkeypatch.setenv("KASHIBOTTO_CACHE_DIR", str(temp_dir))
    assert config.get_cache_dir() == temp_dir
    assert config.get_dictionary_cache_path() == temp_dir / "dictionary-cache.json"


def test_cache_dir_default(monkeypatch):
    monkeypatch.delenv("KASHIBOTTO_CACHE_DIR", raising=False)
    assert config.get_cache_dir() == Path.home() / ".cache" / "kashibotto"


def test_genius_token(monkeypatch):
    monkeypatch.delenv("KASHIBOTTO_GENIUS_ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("GENIUS_ACCESS_TOKEN", " abc ")
    assert config.get_genius_access_token() == "abc"

    monkeypatch.setenv("GENIUS_ACCESS_TOKEN", "  ")
    assert config.get_genius_access_token() is None


def test_invalid_storage_mode(monkeypatch):
    monkeypatch.setenv("KASHIBOTTO_DICTIONARY_STORAGE", "s3")
    with pytest.raises(ConfigError):
        config.validate_config()


def test_storage_mode_normalized(monkeypatch):
    monkeypatch.setenv("KASHIBOTTO_DICTIONARY_STORAGE", " Memory ")
    assert config.get_dictionary_storage_mode() == "memory"
    config.validate_config()


def test_defaults():
    assert config.DICTIONARY_BATCH_SIZE == 8
    assert config.DICTIONARY_MIN_REQUEST_INTERVAL == 0.2
    assert config.LYRICS_MAX_ATTEMPTS == 3
