"""Filesystem helpers and inbound file checks."""

from __future__ import annotations

import json
import os
from pathlib import Path

from account_merge.common.constants import BYTES_PER_MEGABYTE
from account_merge.common.errors import InputFileError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def validate_input_file(path: Path | str | None, max_size_mb: int | None) -> Path:
    """Check that the inbound file exists, is non-empty, within limits and readable."""
    if path is None or str(path) == "":
        raise InputFileError("Filename is null. Please provide filename.")

    if not max_size_mb:
        raise InputFileError(
            "max_inbound_file_size_mb has not been set in the config. Please provide a valid configuration value."
        )

    file_path = Path(path)
    if not file_path.is_file():
        raise InputFileError(
            f"Inbound file {file_path} could not be located. "
            "Please ensure that the file exists and is correctly named."
        )

    size = file_path.stat().st_size
    if size == 0:
        raise InputFileError("Inbound file exists but is empty. Please check the file and verify that it is complete.")

    limit = max_size_mb * BYTES_PER_MEGABYTE
    if size > limit:
        raise InputFileError(f"Inbound file exceeds size limit of {max_size_mb} MB. Please use a smaller file.")

    if not os.access(file_path, os.R_OK):
        raise InputFileError(
            f"Inbound file {file_path} was found but is not readable. "
            "Please ensure that the file has correct permission."
        )

    return file_path
