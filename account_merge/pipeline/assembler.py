"""Token-to-record assembly."""

from __future__ import annotations

import re

from account_merge.common.constants import DELIMITER, MIN_RECORD_FIELDS
from account_merge.common.errors import InvalidIdentifierError, MalformedLineError
from account_merge.common.models import AccountRecord
from account_merge.pipeline.tokenizer import tokenize

IDENTIFIER_RE = re.compile(r"-?\d+")


def parse_identifier(token: str) -> int:
    """Parse a positive integer account id or raise ``InvalidIdentifierError``."""
    text = token.strip()
    if not IDENTIFIER_RE.fullmatch(text):
        raise InvalidIdentifierError(f"Account does not have a valid ID={token}")
    value = int(text)
    if value < 1:
        raise InvalidIdentifierError(f"Account does not have a valid ID={value}")
    return value


def assemble(tokens: list[str]) -> AccountRecord:
    """Build a record from positional tokens: id, name, first name, created on.

    Extra tokens are ignored. An unusable id does not raise; the record comes
    back with ``diagnostic`` set so it is written out but never looked up.
    """
    if len(tokens) < MIN_RECORD_FIELDS:
        raise MalformedLineError(f"Expected at least {MIN_RECORD_FIELDS} fields, found {len(tokens)}")

    id_token, name, first_name, created_on = tokens[:MIN_RECORD_FIELDS]
    diagnostic = None
    try:
        account_id: int | None = parse_identifier(id_token)
    except InvalidIdentifierError as exc:
        diagnostic = str(exc)
        stripped = id_token.strip()
        account_id = int(stripped) if IDENTIFIER_RE.fullmatch(stripped) else None

    return AccountRecord(
        account_id=account_id,
        name=name,
        first_name=first_name,
        created_on=created_on,
        diagnostic=diagnostic,
    )


def parse_record(raw_line: str) -> AccountRecord:
    """Tokenize and assemble one raw line.

    Raises ``MalformedLineError`` when the line holds no delimiter at all or
    too few fields; such lines are dropped by the caller.
    """
    if not raw_line or DELIMITER not in raw_line:
        raise MalformedLineError("No delimiter found in line")
    return assemble(tokenize(raw_line))
