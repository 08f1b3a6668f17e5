from __future__ import annotations

from pathlib import Path

import pytest

from emojimash._constants import DEFAULT_PORT, METADATA_URL
from emojimash.config import EmojiMashConfig
from emojimash.exceptions import EmojiMashConfigError


def test_defaults() -> None:
    config = EmojiMashConfig()

    assert config.metadata_url == METADATA_URL
    assert config.port == DEFAULT_PORT
    assert config.archive_path == Path(".") / "metadata.json"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EMOJIMASH_METADATA_URL", "https://example.invalid/m.json")
    monkeypatch.setenv("EMOJIMASH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("EMOJIMASH_PORT", "8080")
    monkeypatch.setenv("EMOJIMASH_FETCH_TIMEOUT", "12.5")
    monkeypatch.setenv("EMOJIMASH_BOOTSTRAP_ON_STARTUP", "off")

    config = EmojiMashConfig.from_env()

    assert config.metadata_url == "https://example.invalid/m.json"
    assert config.archive_path == tmp_path / "metadata.json"
    assert config.port == 8080
    assert config.fetch_timeout == 12.5
    assert config.bootstrap_on_startup is False


def test_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMOJIMASH_PORT", "8080")
    monkeypatch.setenv("EMOJIMASH_HOST", "127.0.0.1")

    config = EmojiMashConfig.from_env(port=9000, host="::1")

    assert config.port == 9000
    assert config.host == "::1"


def test_invalid_number_in_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMOJIMASH_PORT", "eighty")

    with pytest.raises(EmojiMashConfigError):
        EmojiMashConfig.from_env()


def test_non_positive_timeout_rejected() -> None:
    with pytest.raises(EmojiMashConfigError):
        EmojiMashConfig(fetch_timeout=0)
