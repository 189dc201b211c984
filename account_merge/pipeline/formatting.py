"""Inbound header detection and outbound row formatting."""

from __future__ import annotations

from account_merge.common.constants import DELIMITER, INBOUND_HEADER_PREFIX, OUTBOUND_HEADER
from account_merge.common.models import AccountRecord
from account_merge.pipeline.tokenizer import LINE_BREAK_RE


def is_inbound_header(line: str) -> bool:
    return line.strip().lower().startswith(INBOUND_HEADER_PREFIX)


def outbound_header() -> str:
    return OUTBOUND_HEADER


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def format_record(record: AccountRecord) -> str:
    """Serialise a record as ``id,first name,created on,status,status set on[,diagnostic]``."""
    row = DELIMITER.join(
        [
            _text(record.account_id),
            _text(record.first_name),
            _text(record.created_on),
            _text(record.status),
            _text(record.status_set_on),
        ]
    )
    if record.diagnostic:
        row += DELIMITER + LINE_BREAK_RE.sub(" ", record.diagnostic)
    return row
