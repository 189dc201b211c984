"""Line source stage: inbound file to the line channel."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from account_merge.common.errors import FatalIOError
from account_merge.common.logging import log_event
from account_merge.common.models import END_OF_STREAM, SourceLine
from account_merge.pipeline.channels import BoundedChannel
from account_merge.pipeline.formatting import is_inbound_header


def iter_source_lines(path: Path, encoding: str) -> Iterator[SourceLine]:
    """Yield non-blank, non-header lines with their sequence and 1-based line number."""
    sequence = 0
    try:
        with path.open("r", encoding=encoding) as f:
            for line_number, raw in enumerate(f, start=1):
                line = raw.rstrip("\n")
                if not line.strip() or is_inbound_header(line):
                    continue
                yield SourceLine(sequence=sequence, line_number=line_number, text=line)
                sequence += 1
    except (OSError, UnicodeDecodeError) as exc:
        raise FatalIOError(f"Failed to read inbound file {path}: {exc}") from exc


def run_line_source(
    path: Path,
    encoding: str,
    lines: BoundedChannel,
    worker_count: int,
    logger: logging.Logger,
) -> int:
    """Push every data line, then one end-of-stream marker per worker. Returns lines read."""
    log_event(logger, "line source start", stage="source", event="STAGE_START", status="ok")
    count = 0
    for source_line in iter_source_lines(path, encoding):
        lines.put(source_line)
        count += 1

    for _ in range(worker_count):
        lines.put(END_OF_STREAM)

    log_event(logger, "line source end", stage="source", event="STAGE_END", status="ok", rows_out=count)
    return count
