"""Status lookup capability consumed by the pipeline workers."""

from __future__ import annotations

from typing import Protocol

from account_merge.common.models import AccountRecord


class EnrichmentPort(Protocol):
    def enrich(self, record: AccountRecord) -> AccountRecord:
        """Return ``record`` with ``status``/``status_set_on`` populated.

        Raises ``InvalidInputError`` when the record has no usable id and
        ``RemoteFailureError`` for transport or remote failures.
        """
        ...
