"""Parsing and enrichment workers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from account_merge.common.errors import EnrichmentError, MalformedLineError
from account_merge.common.logging import log_event
from account_merge.common.models import END_OF_STREAM, AccountRecord, SequencedRecord, SourceLine
from account_merge.enrichment.port import EnrichmentPort
from account_merge.pipeline.assembler import parse_record
from account_merge.pipeline.channels import BoundedChannel


@dataclass(frozen=True)
class WorkerStats:
    lines_in: int = 0
    records_out: int = 0
    lines_dropped: int = 0


def enrich_record(record: AccountRecord, enricher: EnrichmentPort) -> AccountRecord:
    """Look up status; any failure becomes the record's diagnostic."""
    try:
        return enricher.enrich(record)
    except EnrichmentError as exc:
        return record.with_diagnostic(str(exc))
    except Exception as exc:
        return record.with_diagnostic(str(exc) or type(exc).__name__)


def process_line(
    source_line: SourceLine,
    enricher: EnrichmentPort,
    logger: logging.Logger,
    worker_id: int | None = None,
) -> AccountRecord | None:
    """Parse and enrich one line. Returns None when the line is dropped."""
    try:
        record = parse_record(source_line.text)
    except MalformedLineError as exc:
        log_event(
            logger,
            f"line dropped: {exc}",
            level=logging.WARNING,
            stage="worker",
            worker=worker_id,
            event="LINE_DROPPED",
            status="skipped",
            line_number=source_line.line_number,
            error_code=exc.error_code,
        )
        return None

    if record.diagnostic is None:
        record = enrich_record(record, enricher)

    if record.diagnostic is not None:
        log_event(
            logger,
            f"record flagged: {record.diagnostic}",
            level=logging.WARNING,
            stage="worker",
            worker=worker_id,
            event="RECORD_FLAGGED",
            status="partial",
            line_number=source_line.line_number,
        )
    return record


def run_worker(
    worker_id: int,
    lines: BoundedChannel,
    records: BoundedChannel,
    enricher: EnrichmentPort,
    logger: logging.Logger,
    *,
    forward_dropped: bool = False,
) -> WorkerStats:
    """Consume lines until an end-of-stream marker, then forward exactly one marker.

    With ``forward_dropped`` a dropped line still forwards an empty
    ``SequencedRecord`` so an ordering sink can advance past it.
    """
    lines_in = records_out = dropped = 0
    while True:
        item = lines.get()
        if item is END_OF_STREAM:
            records.put(END_OF_STREAM)
            break

        lines_in += 1
        logger.debug("worker %s took line %s", worker_id, item.line_number)
        record = process_line(item, enricher, logger, worker_id)
        if record is None:
            dropped += 1
            if forward_dropped:
                records.put(SequencedRecord(sequence=item.sequence, record=None))
            continue

        records.put(SequencedRecord(sequence=item.sequence, record=record))
        records_out += 1

    log_event(
        logger,
        f"worker {worker_id} done",
        level=logging.DEBUG,
        stage="worker",
        worker=worker_id,
        event="STAGE_END",
        status="ok",
        rows_in=lines_in,
        rows_out=records_out,
    )
    return WorkerStats(lines_in=lines_in, records_out=records_out, lines_dropped=dropped)
