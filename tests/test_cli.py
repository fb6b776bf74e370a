# tests/test_cli.py

from __future__ import annotations

import logging
import random
from dataclasses import replace

import pytest

from taskrunner.cli.main import SimulatedFailure, build_parser, main, make_worker
from taskrunner.config import Settings


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_main_runs_payloads_and_prints_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("TASKRUNNER_LOG_DIR", raising=False)

    rc = main(["--concurrency", "2", "--delay-ms", "0", "--work-ms", "0", "a", "b", "c"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "added=3 succeeded=3 failed=0 dropped=0"


def test_main_rejects_invalid_concurrency(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TASKRUNNER_LOG_DIR", raising=False)

    assert main(["--concurrency", "0", "x"]) == 2


def test_main_writes_log_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TASKRUNNER_LOG_DIR", str(tmp_path))

    assert main(["--delay-ms", "0", "--work-ms", "0", "x"]) == 0
    for h in logging.getLogger().handlers:
        h.flush()

    assert "task 0 ok: X" in (tmp_path / "taskrunner.log").read_text("utf-8")


@pytest.mark.asyncio
async def test_simulated_worker_fails_at_requested_rate() -> None:
    always = make_worker(work_ms=0, fail_rate=1.0, rng=random.Random(1))
    never = make_worker(work_ms=0, fail_rate=0.0, rng=random.Random(1))

    with pytest.raises(SimulatedFailure):
        await always("p")
    assert await never("p") == "P"


def test_retry_from_env_can_be_turned_off(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("TASKRUNNER_LOG_DIR", raising=False)
    monkeypatch.setenv("TASKRUNNER_RETRY_ON_FAILURE", "true")

    rc = main(["--no-retry", "--fail-rate", "1", "--delay-ms", "0", "--work-ms", "0", "a"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "added=1 succeeded=0 failed=1 dropped=0"


def test_retry_flag_defaults_to_settings() -> None:
    settings = Settings.from_env(dotenv=False)
    on = replace(settings, retry_on_failure=True)

    assert build_parser(on).parse_args([]).retry is True
    assert build_parser(on).parse_args(["--no-retry"]).retry is False
    assert build_parser(settings).parse_args(["--retry"]).retry is True
