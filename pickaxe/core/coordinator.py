"""Bounded-concurrency driver for the transform pipeline."""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Iterable

from pickaxe.core.models import PipelineResult, RunReport

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10

Process = Callable[[Path], Awaitable[PipelineResult]]


class Coordinator:
    """Applies a pipeline to many paths with a bounded number in flight.

    Paths are pulled from the input iterable only when a slot is free, so a
    lazy discovery walk is never consumed ahead of the bound. Every path
    yields exactly one result; results arrive in completion order.
    """

    def __init__(self, process: Process, concurrency: int = DEFAULT_CONCURRENCY):
        """Initialize Coordinator.

        Args:
            process: Coroutine function mapping a path to a PipelineResult
            concurrency: Maximum number of unresolved invocations at once
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.process = process
        self.concurrency = concurrency

    async def run(self, paths: Iterable[Path]) -> RunReport:
        """Process every path and collect one report.

        Document failures are part of the report. Exceptions raised by
        ``process`` itself, or by the paths iterable, abort the run.
        """
        report = RunReport()
        slots = asyncio.Semaphore(self.concurrency)
        tasks = []

        async def run_one(path: Path) -> None:
            try:
                result = await self.process(path)
                report.results.append(result)
            finally:
                slots.release()

        try:
            for path in paths:
                await slots.acquire()
                tasks.append(asyncio.create_task(run_one(Path(path))))
            logger.info("Queued %d notes (concurrency %d)", len(tasks), self.concurrency)
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info(
            "Processed %d notes: %d succeeded, %d failed",
            len(report.results), len(report.successes), len(report.failures),
        )
        return report


async def run_all(paths: Iterable[Path], process: Process, concurrency: int = DEFAULT_CONCURRENCY) -> RunReport:
    """Convenience wrapper: run ``process`` over ``paths`` and return the report."""
    return await Coordinator(process, concurrency).run(paths)
