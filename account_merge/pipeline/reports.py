"""Run report output."""

from __future__ import annotations

from pathlib import Path

from account_merge.common.fs import write_json
from account_merge.pipeline.runner import PipelineResult


def write_run_summary(
    path: Path,
    run_id: str,
    result: PipelineResult,
    input_path: Path,
    output_path: Path,
) -> Path:
    payload = {
        "run_id": run_id,
        "input_path": str(input_path),
        "output_path": str(output_path),
        **result.to_dict(),
    }
    write_json(path, payload)
    return path
