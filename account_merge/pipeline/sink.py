"""Sink stage: record channel to the outbound file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, TextIO

from account_merge.common.errors import FatalIOError
from account_merge.common.fs import ensure_dir
from account_merge.common.logging import log_event
from account_merge.common.models import END_OF_STREAM, AccountRecord, SequencedRecord
from account_merge.pipeline.channels import BoundedChannel
from account_merge.pipeline.formatting import format_record, outbound_header


@dataclass(frozen=True)
class SinkStats:
    records_written: int = 0
    records_flagged: int = 0


class OrderedBuffer:
    """Releases records in sequence order, holding back anything that arrives early."""

    def __init__(self) -> None:
        self.pending: dict[int, AccountRecord | None] = {}
        self.next_sequence = 0

    def push(self, item: SequencedRecord) -> list[AccountRecord]:
        self.pending[item.sequence] = item.record
        ready: list[AccountRecord] = []
        while self.next_sequence in self.pending:
            record = self.pending.pop(self.next_sequence)
            self.next_sequence += 1
            if record is not None:
                ready.append(record)
        return ready

    def drain(self) -> list[AccountRecord]:
        ready = [self.pending[seq] for seq in sorted(self.pending)]
        self.pending.clear()
        return [record for record in ready if record is not None]


class _RecordWriter:
    def __init__(self, writer: TextIO) -> None:
        self.writer = writer
        self.written = 0
        self.flagged = 0

    def write_line(self, line: str) -> None:
        self.writer.write(line)
        self.writer.write("\n")

    def write_records(self, records: Iterable[AccountRecord | None]) -> None:
        for record in records:
            if record is None:
                continue
            self.write_line(format_record(record))
            self.written += 1
            if record.diagnostic:
                self.flagged += 1


def run_sink(
    path: Path,
    encoding: str,
    records: BoundedChannel,
    worker_count: int,
    logger: logging.Logger,
    *,
    preserve_order: bool = False,
) -> SinkStats:
    """Write the header, then every record, until all ``worker_count`` markers are seen."""
    log_event(logger, "sink start", stage="sink", event="STAGE_START", status="ok")
    markers_seen = 0
    ordered = OrderedBuffer() if preserve_order else None

    try:
        ensure_dir(path.parent)
        with path.open("w", encoding=encoding, newline="") as f:
            out = _RecordWriter(f)
            out.write_line(outbound_header())

            while markers_seen < worker_count:
                item = records.get()
                if item is END_OF_STREAM:
                    markers_seen += 1
                    logger.debug("sink saw end-of-stream marker %s of %s", markers_seen, worker_count)
                    continue
                out.write_records(ordered.push(item) if ordered is not None else [item.record])

            if ordered is not None:
                out.write_records(ordered.drain())
    except (OSError, UnicodeEncodeError) as exc:
        raise FatalIOError(f"Failed to write outbound file {path}: {exc}") from exc

    log_event(logger, "sink end", stage="sink", event="STAGE_END", status="ok", rows_out=out.written)
    return SinkStats(records_written=out.written, records_flagged=out.flagged)
