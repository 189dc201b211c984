"""CLI entrypoint: enrich an account CSV with remote status information."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from account_merge.common.config_loader import AppConfig, load_config
from account_merge.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, EXIT_USAGE
from account_merge.common.errors import PipelineError
from account_merge.common.fs import validate_input_file
from account_merge.common.ids import generate_run_id
from account_merge.common.logging import build_logger, log_event
from account_merge.enrichment.status_client import AccountStatusClient
from account_merge.pipeline.reports import write_run_summary
from account_merge.pipeline.runner import AccountMergePipeline

USAGE_BANNER = """\
********************************************************************************

[Usage]
\taccount-merge <input_file> <output_file>

\tFor example:

\t\taccount-merge data/input.csv output.csv

Note: The input and output file names need to be different

********************************************************************************"""


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__,
        epilog=USAGE_BANNER,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input_path")
    parser.add_argument("output_path")
    parser.add_argument("--config", default=None)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--queue-capacity", type=int, default=None)
    parser.add_argument("--preserve-order", action="store_true")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--summary", default=None)
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def arguments_are_valid(args: argparse.Namespace) -> bool:
    """Input and output must name different files."""
    return Path(args.input_path).resolve() != Path(args.output_path).resolve()


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    pipeline = config.pipeline
    if args.workers is not None:
        pipeline = replace(pipeline, worker_count=args.workers)
    if args.queue_capacity is not None:
        pipeline = replace(pipeline, queue_capacity=args.queue_capacity)
    if args.preserve_order:
        pipeline = replace(pipeline, preserve_order=True)
    return replace(config, pipeline=pipeline)


def run_command(args: argparse.Namespace) -> int:
    if not arguments_are_valid(args):
        print("The input and output files can not be the same.", file=sys.stderr)
        print(USAGE_BANNER)
        return EXIT_USAGE

    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)
    input_path = Path(args.input_path)
    output_path = Path(args.output_path)

    log_event(logger, "run start", run_id=run_id, event="RUN_START", status="ok")
    try:
        config = load_config(
            Path(args.config) if args.config else None,
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        )
        config = apply_overrides(config, args)
        if config.pipeline.worker_count < 1 or config.pipeline.queue_capacity < 1:
            print("--workers and --queue-capacity must be positive.", file=sys.stderr)
            return EXIT_USAGE

        validate_input_file(input_path, config.max_inbound_file_size_mb)

        with AccountStatusClient.from_config(config) as client:
            pipeline = AccountMergePipeline(config.pipeline, client, logger)
            result = pipeline.run(input_path, output_path)
    except PipelineError as exc:
        log_event(
            logger,
            f"run failed: {exc}",
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        logger.exception(
            "unexpected failure: %s",
            exc,
            extra={"run_id": run_id, "event": "RUN_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
        )
        return EXIT_HARD_FAIL

    if args.summary:
        write_run_summary(Path(args.summary), run_id, result, input_path, output_path)

    log_event(
        logger,
        "run end",
        run_id=run_id,
        event="RUN_END",
        status=result.status,
        rows_in=result.lines_read,
        rows_out=result.records_written,
        duration_ms=result.duration_ms,
    )
    if args.strict and result.status != "success":
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
