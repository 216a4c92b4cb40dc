from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from screening_feed.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from screening_feed.excel.reader import SheetHeaderError, WorkbookDecodeError, read_first_sheet
from screening_feed.logging.init import log_summary, set_debug, setup_logging
from screening_feed.models.config_models import ConverterConfig
from screening_feed.services.orchestrator import ProcessingError, convert_file
from screening_feed.services.summary import render_summary_line
from screening_feed.transform.columns import detect_columns

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (built-in defaults when the default file is absent)
- Convert the given workbook (first sheet) to <stem>.jsonl
- Print the SUMMARY line; exit code tells success / fatal / no rows
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_NO_ROWS = 2

ENV_CONFIG = "SCREENING_FEED_CONFIG"
ENV_OUTPUT_DIR = "SCREENING_FEED_OUTPUT_DIR"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; values in .env win over the process environment."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="screening-feed", description="Excel screening list -> profile JSONL converter"
    )
    p.add_argument("input", type=Path, help="Workbook to convert (first sheet is used)")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for the .jsonl file")
    p.add_argument("--preview", action="store_true", help="Print a bounded preview of the JSONL output")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, column roles & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> ConverterConfig:
    explicit = args.config or (Path(os.environ[ENV_CONFIG]) if os.getenv(ENV_CONFIG) else None)
    if explicit is not None:
        return load_config(explicit)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ConverterConfig()


def _resolve_output_directory(args: argparse.Namespace, cfg: ConverterConfig) -> Path | None:
    if args.output_dir is not None:
        return args.output_dir
    env_dir = os.getenv(ENV_OUTPUT_DIR)
    if env_dir:
        return Path(env_dir)
    return Path(cfg.output_directory) if cfg.output_directory else None


def _inspect_data(path: Path, cfg: ConverterConfig) -> int:
    try:
        sheet = read_first_sheet(path, keep_na_strings=cfg.keep_na_strings, header_row=cfg.header_row)
    except (WorkbookDecodeError, SheetHeaderError) as e:
        print(f"inspect: read_error: {e}")
        return EXIT_FATAL
    columns = detect_columns(sheet.columns)
    print(f"FILE: {path.name} SHEET: {sheet.sheet_name} rows={len(sheet.rows)}")
    for header in sheet.columns:
        key = columns.keys[header]
        print(f"  {header!r} -> {key} ({columns.role_of(key).value})")
    for key, raws in columns.collisions.items():
        print(f"  collision: {list(raws)} -> {key}")
    # datetime 含む場合 JSON 化できないため isoformat で表示
    for r in sheet.rows[:3]:
        print("    sample_row=", {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで main([...]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    input_path: Path = args.input
    if not input_path.exists():
        logger.error(f"input file not found: {input_path}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(input_path, cfg)

    try:
        result = convert_file(input_path, cfg, output_directory=_resolve_output_directory(args, cfg))
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if result.outcome.is_empty:
        logger.warning("No rows found in Excel.")
    else:
        logger.info(f"wrote {result.record_count} records -> {result.artifact_path}")
        if args.preview and result.preview is not None:
            print(result.preview)

    # log_summary が "SUMMARY " を付与するため除去
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_NO_ROWS if result.outcome.is_empty else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
