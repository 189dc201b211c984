from __future__ import annotations

import pytest

from account_merge.common.config_loader import load_config
from account_merge.common.errors import InvalidInputError, RemoteFailureError
from account_merge.common.http import HttpRequestError
from account_merge.common.models import AccountRecord
from account_merge.enrichment.status_client import AccountStatusClient, apply_status_payload

STARK = AccountRecord(
    account_id=23232,
    name="stark industries",
    first_name="Tony",
    created_on="5-12-2015",
)


class FakeHttpClient:
    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls: list[str] = []

    def get_json(self, url: str, **_kwargs):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.payload

    def close(self):
        return None


def test_formulate_url():
    client = AccountStatusClient("http://localhost:8080", FakeHttpClient())
    assert client.formulate_url(12345) == "http://localhost:8080/v1/accounts/12345"


def test_formulate_url_trims_trailing_slash():
    client = AccountStatusClient("http://localhost:8080/", FakeHttpClient())
    assert client.formulate_url(7) == "http://localhost:8080/v1/accounts/7"


def test_apply_status_payload_clean():
    payload = {"account_id": 23232, "status": "poor", "created_on": "2015-06-07"}
    enriched = apply_status_payload(STARK, payload)
    assert enriched.status == "poor"
    assert enriched.status_set_on == "2015-06-07"
    assert enriched.first_name == "Tony"


def test_apply_status_payload_without_status():
    enriched = apply_status_payload(STARK, {"account_id": 23232, "created_on": "2015-06-07"})
    assert enriched.status is None
    assert enriched.status_set_on == "2015-06-07"


def test_apply_status_payload_without_created_on():
    enriched = apply_status_payload(STARK, {"account_id": 23232, "status": "poor", "created_on": None})
    assert enriched.status == "poor"
    assert enriched.status_set_on is None


def test_enrich_clean():
    http = FakeHttpClient({"account_id": 23232, "status": "poor", "created_on": "2015-06-07"})
    client = AccountStatusClient("http://localhost:8080", http)

    enriched = client.enrich(STARK)

    assert enriched == AccountRecord(
        account_id=23232,
        name="stark industries",
        first_name="Tony",
        created_on="5-12-2015",
        status="poor",
        status_set_on="2015-06-07",
    )
    assert http.calls == ["http://localhost:8080/v1/accounts/23232"]
    assert STARK.status is None


def test_enrich_remote_error_becomes_remote_failure():
    body = '{"account_id":23232,"status":"poor","created_on":"2015-06-07"}'
    client = AccountStatusClient("http://localhost:8080", FakeHttpClient(error=HttpRequestError(f"503 {body}")))

    with pytest.raises(RemoteFailureError) as excinfo:
        client.enrich(STARK)
    assert str(excinfo.value) == f"503 {body}"


def test_enrich_without_record_or_id_is_invalid_input():
    client = AccountStatusClient("http://localhost:8080", FakeHttpClient())

    with pytest.raises(InvalidInputError) as excinfo:
        client.enrich(None)
    assert str(excinfo.value) == "Account passed to enrich is either missing or has no id."

    with pytest.raises(InvalidInputError):
        client.enrich(AccountRecord(account_id=None, name="", first_name="", created_on=""))

    with pytest.raises(InvalidInputError):
        client.enrich(AccountRecord(account_id=0, name="", first_name="", created_on=""))


def test_enrich_empty_body_is_remote_failure():
    client = AccountStatusClient("http://localhost:8080", FakeHttpClient({}))

    with pytest.raises(RemoteFailureError) as excinfo:
        client.enrich(STARK)
    assert str(excinfo.value).startswith("No body from API request received for account=")


def test_from_config_uses_http_settings():
    config = load_config()
    client = AccountStatusClient.from_config(config)
    try:
        assert client.base_url == "http://localhost:8080"
        assert client.http.retry == config.http.retry
        assert client.http.timeout == config.http.timeout
    finally:
        client.close()
