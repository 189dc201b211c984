"""Pipeline orchestration: one line source, a worker pool, one sink.

Records reach the sink in whatever order the workers finish them unless
``preserve_order`` is set, in which case the sink re-sequences them.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from account_merge.common.config_loader import PipelineSettings
from account_merge.common.errors import PipelineAborted
from account_merge.common.logging import log_event
from account_merge.common.time_utils import elapsed_ms
from account_merge.enrichment.port import EnrichmentPort
from account_merge.pipeline.channels import BoundedChannel
from account_merge.pipeline.sink import SinkStats, run_sink
from account_merge.pipeline.source import run_line_source
from account_merge.pipeline.worker import WorkerStats, run_worker


@dataclass(frozen=True)
class PipelineResult:
    lines_read: int
    records_written: int
    lines_dropped: int
    records_flagged: int
    duration_ms: int

    @property
    def status(self) -> str:
        if self.lines_dropped or self.records_flagged:
            return "partial"
        return "success"

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status
        return payload


def _root_cause(futures: list[Future]) -> BaseException | None:
    aborted: BaseException | None = None
    for future in futures:
        exc = future.exception()
        if exc is None:
            continue
        if isinstance(exc, PipelineAborted):
            aborted = aborted or exc
            continue
        return exc
    return aborted


class AccountMergePipeline:
    def __init__(
        self,
        settings: PipelineSettings,
        enricher: EnrichmentPort,
        logger: logging.Logger | None = None,
    ) -> None:
        if settings.worker_count < 1:
            raise ValueError("worker_count must be at least 1")
        self.settings = settings
        self.enricher = enricher
        self.logger = logger or logging.getLogger("account_merge")

    def run(self, input_path: Path, output_path: Path) -> PipelineResult:
        """Process ``input_path`` into ``output_path``.

        A stage failure sets the shared abort event so every blocked queue
        call unwinds, then the first real failure is re-raised.
        """
        settings = self.settings
        worker_count = settings.worker_count
        started_at = time.monotonic()
        abort = threading.Event()
        lines = BoundedChannel(settings.queue_capacity, abort, settings.poll_interval_seconds)
        records = BoundedChannel(settings.queue_capacity, abort, settings.poll_interval_seconds)

        log_event(
            self.logger,
            f"pipeline start with {worker_count} workers",
            event="STAGE_START",
            stage="pipeline",
            status="ok",
        )

        with ThreadPoolExecutor(max_workers=worker_count + 2, thread_name_prefix="account-merge") as executor:
            source_future = executor.submit(
                run_line_source, input_path, settings.encoding, lines, worker_count, self.logger
            )
            worker_futures = [
                executor.submit(
                    run_worker,
                    worker_id,
                    lines,
                    records,
                    self.enricher,
                    self.logger,
                    forward_dropped=settings.preserve_order,
                )
                for worker_id in range(1, worker_count + 1)
            ]
            sink_future = executor.submit(
                run_sink,
                output_path,
                settings.encoding,
                records,
                worker_count,
                self.logger,
                preserve_order=settings.preserve_order,
            )
            futures: list[Future] = [source_future, *worker_futures, sink_future]

            try:
                done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            except BaseException:
                abort.set()
                raise
            if any(future.exception() is not None for future in done):
                abort.set()

        failure = _root_cause(futures)
        if failure is not None:
            log_event(
                self.logger,
                f"pipeline aborted: {failure}",
                level=logging.ERROR,
                stage="pipeline",
                event="PIPELINE_ABORT",
                status="error",
                error_code=getattr(failure, "error_code", "UNEXPECTED_ERROR"),
            )
            raise failure

        worker_stats: list[WorkerStats] = [future.result() for future in worker_futures]
        sink_stats: SinkStats = sink_future.result()
        result = PipelineResult(
            lines_read=source_future.result(),
            records_written=sink_stats.records_written,
            lines_dropped=sum(stats.lines_dropped for stats in worker_stats),
            records_flagged=sink_stats.records_flagged,
            duration_ms=elapsed_ms(started_at),
        )
        log_event(
            self.logger,
            "pipeline end",
            stage="pipeline",
            event="STAGE_END",
            status=result.status,
            rows_in=result.lines_read,
            rows_out=result.records_written,
            duration_ms=result.duration_ms,
        )
        return result
