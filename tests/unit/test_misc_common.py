import json
import logging
from pathlib import Path

import pytest

from account_merge.common.errors import InputFileError
from account_merge.common.fs import validate_input_file
from account_merge.common.ids import generate_run_id
from account_merge.common.logging import JsonLineFormatter, build_logger, log_event
from account_merge.common.models import END_OF_STREAM, EndOfStream


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_end_of_stream_is_a_distinct_singleton():
    assert EndOfStream() is END_OF_STREAM
    assert END_OF_STREAM != "--[EOF MARKER]--"
    assert repr(END_OF_STREAM) == "END_OF_STREAM"


def test_validate_input_file_rejects_missing_name():
    with pytest.raises(InputFileError, match="Filename is null"):
        validate_input_file(None, 10)


@pytest.mark.parametrize("limit", [None, 0])
def test_validate_input_file_requires_size_limit(tmp_path: Path, limit):
    path = tmp_path / "in.csv"
    path.write_text("1,a,b,c\n", encoding="utf-8")
    with pytest.raises(InputFileError, match="max_inbound_file_size_mb"):
        validate_input_file(path, limit)


def test_validate_input_file_rejects_missing_file(tmp_path: Path):
    with pytest.raises(InputFileError, match="could not be located"):
        validate_input_file(tmp_path / "absent.csv", 10)


def test_validate_input_file_rejects_empty_file(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(InputFileError, match="empty"):
        validate_input_file(path, 10)


def test_validate_input_file_rejects_large_file(tmp_path: Path):
    path = tmp_path / "large.csv"
    path.write_bytes(b"x" * (1024 * 1024 + 1))
    with pytest.raises(InputFileError, match="size limit"):
        validate_input_file(path, 1)


def test_validate_input_file_accepts_readable_file(tmp_path: Path):
    path = tmp_path / "in.csv"
    path.write_text("1,a,b,c\n", encoding="utf-8")
    assert validate_input_file(str(path), 1) == path


def test_json_line_formatter_emits_stable_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.event = "RUN_START"
    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["event"] == "RUN_START"
    assert payload["worker"] is None
    assert "timestamp" in payload


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-test", log_dir=tmp_path / "logs", level="INFO")
    log_event(logger, "run start", run_id="run-test", event="RUN_START", status="ok")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "run-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["event"] == "RUN_START"

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
