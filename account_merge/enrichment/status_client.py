"""Account status REST client."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from account_merge.common.config_loader import AppConfig
from account_merge.common.errors import InvalidInputError, RemoteFailureError
from account_merge.common.http import HttpClient, HttpRequestError
from account_merge.common.models import AccountRecord

STATUS_KEY = "status"
CREATED_ON_KEY = "created_on"
GET_ACCOUNT_STATUS_PATH = "{base_url}/v1/accounts/{account_id}"

_LOGGER = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def apply_status_payload(record: AccountRecord, payload: dict[str, Any]) -> AccountRecord:
    status = record.status
    status_set_on = record.status_set_on
    if payload.get(STATUS_KEY) is not None:
        status = _as_text(payload[STATUS_KEY])
    if payload.get(CREATED_ON_KEY) is not None:
        status_set_on = _as_text(payload[CREATED_ON_KEY])
    return record.with_status(status, status_set_on)


class AccountStatusClient:
    """Looks up ``GET <base_url>/v1/accounts/<id>`` for each record."""

    def __init__(self, base_url: str, http_client: HttpClient | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http_client or HttpClient()

    @classmethod
    def from_config(cls, config: AppConfig) -> "AccountStatusClient":
        http_client = HttpClient(
            timeout=config.http.timeout,
            retry=config.http.retry,
            rate_per_sec=config.http.rate_per_sec,
        )
        return cls(config.status_api_url, http_client)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "AccountStatusClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def formulate_url(self, account_id: int) -> str:
        return GET_ACCOUNT_STATUS_PATH.format(base_url=self.base_url, account_id=account_id)

    def enrich(self, record: AccountRecord | None) -> AccountRecord:
        if record is None or record.account_id is None:
            raise InvalidInputError("Account passed to enrich is either missing or has no id.")
        if record.account_id < 1:
            raise InvalidInputError(f"Account does not have a valid ID={record.account_id}")

        url = self.formulate_url(record.account_id)
        _LOGGER.debug("status lookup url=%s", url)
        try:
            payload = self.http.get_json(url)
        except HttpRequestError as exc:
            raise RemoteFailureError(str(exc)) from exc

        if not isinstance(payload, dict) or not payload:
            raise RemoteFailureError(f"No body from API request received for account={record}")

        return apply_status_payload(record, payload)
