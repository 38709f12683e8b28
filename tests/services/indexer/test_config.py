import logging
from pathlib import Path

import pytest
import yaml

from account_indexer.indexer.config import IndexerProfile


def _write_yaml(path: Path, payload: dict) -> Path:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_defaults_apply_for_missing_sections(tmp_path: Path) -> None:
    profile = IndexerProfile.load(_write_yaml(tmp_path / "profile.yaml", {"profile_id": "bare"}))
    assert profile.profile_id == "bare"
    assert profile.feed_path is None
    assert (profile.min_arrival_delay_ms, profile.max_arrival_delay_ms) == (0, 1000)
    assert profile.delay_scale == 1.0
    assert profile.metrics_flush_seconds == 30
    assert profile.logging_level() == logging.INFO
    assert profile.log_paths is None


def test_env_references_are_resolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("INDEXER_FEED", str(tmp_path / "feed.json"))
    path = _write_yaml(
        tmp_path / "profile.yaml",
        {
            "profile_id": "local",
            "feed": {"path": "${INDEXER_FEED}", "min_arrival_delay_ms": 5, "max_arrival_delay_ms": 50},
            "indexer": {"delay_scale": 0.01, "metrics_flush_seconds": 1},
            "logging": {"level": "${LOG_LEVEL}", "log_paths": [str(tmp_path / "logs" / "indexer.log")]},
        },
    )
    profile = IndexerProfile.load(path)
    assert profile.feed_path == str(tmp_path / "feed.json")
    assert (profile.min_arrival_delay_ms, profile.max_arrival_delay_ms) == (5, 50)
    assert profile.delay_scale == 0.01
    assert profile.logging_level() == logging.DEBUG
    assert profile.log_paths == [str(tmp_path / "logs" / "indexer.log")]


def test_unset_log_level_falls_back_to_info(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    path = _write_yaml(tmp_path / "profile.yaml", {"profile_id": "p", "logging": {"level": "${LOG_LEVEL}"}})
    assert IndexerProfile.load(path).log_level == "INFO"


def test_bundled_profile_loads() -> None:
    root = Path(__file__).resolve().parents[3]
    profile = IndexerProfile.load(root / "config" / "indexer" / "local.yaml")
    assert profile.profile_id == "local"
    assert profile.feed_path == "data/account_updates.json"


@pytest.mark.parametrize(
    "section",
    [
        {"feed": {"min_arrival_delay_ms": 10, "max_arrival_delay_ms": 5}},
        {"feed": {"min_arrival_delay_ms": -1}},
        {"indexer": {"delay_scale": -0.5}},
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, section: dict) -> None:
    path = _write_yaml(tmp_path / "profile.yaml", {"profile_id": "p", **section})
    with pytest.raises(ValueError):
        IndexerProfile.load(path)


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="LOG_LEVEL_INVALID"):
        IndexerProfile(profile_id="p", log_level="CHATTY").logging_level()
