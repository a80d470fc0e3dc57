# Drive a codepoint index through the fetch pipeline with a bounded worker pool

import asyncio
import logging
from typing import Iterable, List

import attr

from emojifetch import codepoints, fetcher

logger = logging.getLogger(__name__)

FAILURE_PREVIEW = 30


@attr.define
class BatchStats:
    total: int = 0
    success: int = 0
    skipped: int = 0
    failed: int = 0
    scraped: int = 0
    failures: List[str] = attr.Factory(list)

    def record(self, outcome: fetcher.Outcome):
        if isinstance(outcome, fetcher.Fetched):
            self.success += 1
            self.scraped += outcome.via == "scraped"
        elif isinstance(outcome, fetcher.Skipped):
            self.skipped += 1
        else:
            self.failed += 1
            self.failures.append(outcome.key)

    @property
    def done(self) -> int:
        return self.success + self.skipped + self.failed

    def summary(self) -> str:
        lines = [
            f"Success: {self.success} ({self.scraped} via page scraping)",
            f"Skipped (cached/components): {self.skipped}",
            f"Failed: {self.failed}",
        ]
        if self.failures:
            lines.append(f"Failed keys (first {FAILURE_PREVIEW}):")
            lines.extend(f"  - {k}" for k in self.failures[:FAILURE_PREVIEW])
            extra = len(self.failures) - FAILURE_PREVIEW
            if extra > 0:
                lines.append(f"  ... and {extra} more")
        return "\n".join(lines)


async def run_batch(
    keys: Iterable[str],
    pipeline: fetcher.FetchPipeline,
    *,
    workers: int = 20,
    progress_every: int = 100,
    flush_every: int = 100,
    request_delay: float = 0.0,
    force: bool = False,
    scrape_only: bool = False,
) -> BatchStats:
    if workers < 1:
        raise ValueError(f"Need at least one worker (got {workers})")

    keys = list(keys)
    stats = BatchStats(total=len(keys))
    queue: asyncio.Queue = asyncio.Queue()
    for raw in keys:
        try:
            key = codepoints.normalize(raw)
        except codepoints.MalformedCodepointError as exc:
            logger.warning(f"{exc}")
            stats.record(fetcher.Failed(str(raw), "malformed"))
            continue

        reason = pipeline.skip_reason(key, force=force)
        if reason:
            stats.record(fetcher.Skipped(key, reason))
        else:
            queue.put_nowait(key)

    dispatched = queue.qsize()
    logger.info(
        f"{len(keys)} keys: {stats.skipped} skipped, {stats.failed} malformed, "
        f"fetching {dispatched} with {min(workers, dispatched)} workers..."
    )

    results = 0

    def report(outcome: fetcher.Outcome):
        nonlocal results
        stats.record(outcome)
        results += 1
        if isinstance(outcome, fetcher.Fetched):
            if stats.success % flush_every == 0:
                try:
                    pipeline.cache.flush()
                except OSError as exc:
                    logger.warning(f"Cache flush failed, continuing: {exc}")
        elif isinstance(outcome, fetcher.Failed):
            logger.debug(f"[{outcome.key}] Failed ({outcome.reason})")
        if results % progress_every == 0:
            logger.info(
                f"[{results}/{dispatched}] {stats.success} fetched "
                f"({stats.scraped} scraped), {stats.failed} failed..."
            )

    async def worker():
        while True:
            try:
                key = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                outcome = await pipeline.fetch(
                    key, force=force, scrape_only=scrape_only
                )
            except Exception:
                logger.error(f"[{key}] Fetch crashed", exc_info=True)
                outcome = fetcher.Failed(key, "error")
            report(outcome)
            if request_delay:
                await asyncio.sleep(request_delay)

    try:
        await asyncio.gather(*(worker() for _ in range(min(workers, dispatched))))
    finally:
        pipeline.cache.flush()

    return stats
