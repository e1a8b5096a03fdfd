"""Tests for the JSONL build log."""

import json
from pathlib import Path

import pytest

from portfolio_site.config import AppConfig, LoggingConfig
from portfolio_site.runner import run_build
from portfolio_site.utils.logging import build_stage, log_event, setup_logging


def _read_log(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def file_logger(tmp_path: Path):
    logger = setup_logging(LoggingConfig(console=False, file=True), tmp_path)
    yield logger
    setup_logging(LoggingConfig(console=False), None)


def test_stage_events_carry_results_and_errors(tmp_path: Path, file_logger):
    with build_stage(file_logger, "pages") as stage:
        stage["pages"] = 3
    with pytest.raises(RuntimeError):
        with build_stage(file_logger, "feeds"):
            raise RuntimeError("disk full")

    complete, failed = _read_log(tmp_path / "build.jsonl")

    assert complete["event"] == "stage_complete"
    assert complete["stage"] == "pages"
    assert complete["pages"] == 3
    assert isinstance(complete["duration_ms"], int)
    assert failed["event"] == "stage_failed"
    assert failed["level"] == "ERROR"
    assert failed["error"] == "RuntimeError"
    assert failed["message"] == "Stage feeds failed: disk full"


def test_extra_fields_are_serialised(tmp_path: Path, file_logger):
    log_event(file_logger, "Feeds generated", event="feeds_generated", path=tmp_path, tags={"b", "a"})

    (record,) = _read_log(tmp_path / "build.jsonl")

    assert record["event"] == "feeds_generated"
    assert record["path"] == str(tmp_path)
    assert record["tags"] == ["a", "b"]
    assert record["logger"] == "portfolio_site"


def test_build_writes_event_log_next_to_output(tmp_path: Path):
    articles_dir = tmp_path / "articles"
    articles_dir.mkdir()
    (articles_dir / "a.md").write_text("---\ntitle: A\ndate: 2024-06-15\n---\nBody\n", encoding="utf-8")
    cfg = AppConfig()
    cfg.build.articles_dir = str(articles_dir)
    cfg.logging.console = False
    cfg.logging.file = True

    try:
        run_build(cfg, tmp_path / "public", production=True, show_progress=False)
    finally:
        setup_logging(LoggingConfig(console=False), None)

    events = [record.get("event") for record in _read_log(tmp_path / "build.jsonl")]

    assert events[0] == "build_start"
    assert events[-1] == "build_complete"
    assert [record["stage"] for record in _read_log(tmp_path / "build.jsonl") if "stage" in record] == [
        "load",
        "pages",
        "feeds",
    ]
