# src/taskrunner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds a TaskRunner around a simulated worker, feeds it the
payloads given on the command line (or stdin lines), and waits for the queue to drain.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from collections import Counter
from collections.abc import Sequence

from ..config import RunnerConfig, Settings, get_settings
from ..logging_setup import setup_logging
from ..tasks.task_api import run_until_empty, submit_many
from ..tasks.task_models import EventKind, RunnerEvent, TaskFailed, TaskSucceeded
from ..tasks.task_runner import TaskRunner

logger = logging.getLogger(__name__)


class SimulatedFailure(RuntimeError):
    pass


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="taskrunner", description="Run payloads through a batched task runner.")
    p.add_argument("payloads", nargs="*", help="Payloads to submit (default: read lines from stdin).")
    p.add_argument("--concurrency", type=int, default=settings.concurrency)
    p.add_argument("--delay-ms", type=int, default=settings.inter_batch_delay_ms, dest="delay_ms")
    p.add_argument("--retry", action=argparse.BooleanOptionalAction, default=settings.retry_on_failure)
    p.add_argument("--fail-rate", type=float, default=0.0, dest="fail_rate", help="Probability a task fails (0..1).")
    p.add_argument("--work-ms", type=int, default=50, dest="work_ms", help="Simulated work time per task.")
    p.add_argument("--timeout", type=float, default=None, help="Give up after this many seconds.")
    return p


def make_worker(*, work_ms: int, fail_rate: float, rng: random.Random | None = None):
    rng = rng or random.Random()

    async def _work(payload):
        await asyncio.sleep(max(0, work_ms) / 1000.0)
        if rng.random() < fail_rate:
            raise SimulatedFailure(f"simulated failure for {payload!r}")
        return str(payload).upper()

    return _work


def _read_payloads(args: argparse.Namespace) -> list[str]:
    if args.payloads:
        return list(args.payloads)
    if sys.stdin.isatty():
        return []
    return [line.strip() for line in sys.stdin if line.strip()]


async def run(args: argparse.Namespace, payloads: Sequence[str]) -> Counter[str]:
    config = RunnerConfig(
        concurrency=args.concurrency,
        inter_batch_delay_ms=args.delay_ms,
        auto_start=False,
        retry_on_failure=args.retry,
    )
    runner = TaskRunner(make_worker(work_ms=args.work_ms, fail_rate=args.fail_rate), config)

    counts: Counter[str] = Counter()

    def _log_event(event: RunnerEvent) -> None:
        counts[event.kind.value] += 1
        if isinstance(event, TaskSucceeded):
            logger.info("task %s ok: %s", event.record.id, event.value)
        elif isinstance(event, TaskFailed):
            logger.info("task %s failed: %s", event.record.id, event.error)

    runner.on(_log_event)

    submit_many(runner, payloads)
    try:
        await run_until_empty(runner, timeout=args.timeout)
    finally:
        await runner.aclose()

    return counts


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    try:
        args = build_parser(settings).parse_args(argv)
        payloads = _read_payloads(args)
        if not payloads:
            logger.info("Nothing to do.")
            return 0

        logger.info("Starting %s with %d payloads...", settings.app_name, len(payloads))
        counts = asyncio.run(run(args, payloads))
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except asyncio.TimeoutError:
        logger.error("Timed out before the queue emptied.")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130

    print(
        f"added={counts[EventKind.TASK_ADDED.value]} "
        f"succeeded={counts[EventKind.TASK_SUCCEEDED.value]} "
        f"failed={counts[EventKind.TASK_FAILED.value]} "
        f"dropped={counts[EventKind.TASK_DROPPED.value]}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
