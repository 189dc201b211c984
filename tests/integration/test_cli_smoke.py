import json
from pathlib import Path

import pytest

from account_merge import cli
from account_merge.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from account_merge.common.errors import RemoteFailureError
from account_merge.common.models import AccountRecord


class FakeStatusClient:
    fail_ids: set[int] = set()

    @classmethod
    def from_config(cls, _config):
        return cls()

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return None

    def enrich(self, record: AccountRecord) -> AccountRecord:
        if record.account_id in self.fail_ids:
            raise RemoteFailureError("503 unavailable")
        return record.with_status("dead", "2019-04-26")


@pytest.fixture
def fake_status_client(monkeypatch):
    FakeStatusClient.fail_ids = set()
    monkeypatch.setattr(cli, "AccountStatusClient", FakeStatusClient)
    return FakeStatusClient


def _write_input(path: Path) -> None:
    path.write_text(
        "account id,account name,first name,created on\n100,Avengers,Tony,2019-03-07\n101,Avengers,Steve,2019-03-08\n",
        encoding="utf-8",
    )


@pytest.mark.integration
def test_cli_run_writes_output_and_summary(tmp_path: Path, fake_status_client):
    input_path = tmp_path / "in.csv"
    output_path = tmp_path / "out" / "merged.csv"
    summary_path = tmp_path / "reports" / "summary.json"
    _write_input(input_path)

    exit_code = cli.main(
        [
            str(input_path),
            str(output_path),
            "--workers",
            "2",
            "--preserve-order",
            "--run-id",
            "run-test",
            "--log-dir",
            str(tmp_path / "logs"),
            "--summary",
            str(summary_path),
        ]
    )

    assert exit_code == EXIT_SUCCESS
    assert output_path.read_text(encoding="utf-8").splitlines() == [
        "Account ID,First Name,Created On,Status,Status Set On",
        "100,Tony,2019-03-07,dead,2019-04-26",
        "101,Steve,2019-03-08,dead,2019-04-26",
    ]
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["run_id"] == "run-test"
    assert summary["status"] == "success"
    assert summary["records_written"] == 2
    assert (tmp_path / "logs" / "run-test.log.jsonl").exists()


@pytest.mark.integration
def test_cli_strict_mode_reports_partial_run(tmp_path: Path, fake_status_client):
    input_path = tmp_path / "in.csv"
    output_path = tmp_path / "out.csv"
    _write_input(input_path)
    fake_status_client.fail_ids = {101}

    assert cli.main([str(input_path), str(output_path)]) == EXIT_SUCCESS
    assert cli.main([str(input_path), str(output_path), "--strict"]) == EXIT_PARTIAL
    assert "101,Steve,2019-03-08,,,503 unavailable" in output_path.read_text(encoding="utf-8")


@pytest.mark.integration
def test_cli_missing_input_is_hard_failure(tmp_path: Path, fake_status_client):
    exit_code = cli.main([str(tmp_path / "absent.csv"), str(tmp_path / "out.csv")])

    assert exit_code == EXIT_HARD_FAIL
    assert not (tmp_path / "out.csv").exists()


@pytest.mark.integration
def test_cli_bad_config_is_hard_failure(tmp_path: Path, fake_status_client):
    input_path = tmp_path / "in.csv"
    _write_input(input_path)
    config_path = tmp_path / "config.yml"
    config_path.write_text("pipeline:\n  worker_count: 0\n", encoding="utf-8")

    exit_code = cli.main([str(input_path), str(tmp_path / "out.csv"), "--config", str(config_path)])

    assert exit_code == EXIT_HARD_FAIL
