"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class AccountRecord:
    account_id: int | None
    name: str
    first_name: str
    created_on: str
    status: str | None = None
    status_set_on: str | None = None
    diagnostic: str | None = None

    def with_status(self, status: str | None, status_set_on: str | None) -> "AccountRecord":
        return replace(self, status=status, status_set_on=status_set_on)

    def with_diagnostic(self, diagnostic: str) -> "AccountRecord":
        return replace(self, diagnostic=diagnostic)


@dataclass(frozen=True)
class SourceLine:
    """One inbound row, newline-stripped, tagged with its position in the stream."""

    sequence: int
    line_number: int
    text: str


@dataclass(frozen=True)
class SequencedRecord:
    """A worker result. ``record`` is None only for a dropped line in ordered mode."""

    sequence: int
    record: AccountRecord | None


class EndOfStream:
    """Queue marker signalling that no further items follow from one producer."""

    _instance: "EndOfStream | None" = None

    def __new__(cls) -> "EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM = EndOfStream()
