from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SheetHeaderError, WorkbookDecodeError, read_first_sheet
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ConverterConfig
from ..models.error_record import FILE_LEVEL_SHEET, ErrorRecord
from ..models.processing_result import BatchStatus, ConversionResult
from .pipeline import output_filename, render_preview, run_batch

"""File-level conversion service.

Reads the first sheet of one workbook, runs the batch pipeline and writes the JSONL
artifact. Decoding the workbook is the only step that can fail the whole file; in that
case nothing is written and the failure is recorded in the error log.
"""

__all__ = [
    "ProcessingError",
    "convert_file",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error for a conversion (missing input, undecodable workbook)."""


def _record_decode_failure(
    error_log: ErrorLogBuffer, file_name: str, error_type: str, message: str
) -> None:
    error_log.append(
        ErrorRecord.create(
            file=file_name,
            sheet=FILE_LEVEL_SHEET,
            row=-1,
            error_type=error_type,
            message=message,
        )
    )
    try:
        path = error_log.flush()
        if path is not None:
            logger.debug(f"error log written: {path}")
    except OSError as e:
        # エラーログ書き込み失敗で本来のエラーを隠さない
        logger.warning(f"failed to write error log: {e}")


def convert_file(
    input_path: Path,
    config: ConverterConfig | None = None,
    *,
    output_directory: Path | None = None,
    cancel_event: threading.Event | None = None,
) -> ConversionResult:
    """Convert one workbook to JSONL.

    Args:
        input_path: Workbook to read (first sheet only)
        config: Converter configuration (defaults when None)
        output_directory: Where to write <stem>.jsonl; falls back to
            config.output_directory, then to the input file's directory
        cancel_event: Optional event checked between rows

    Returns:
        ConversionResult; artifact_path is None when the outcome is EMPTY

    Raises:
        ProcessingError: input missing or not decodable as a workbook
    """
    if config is None:
        config = ConverterConfig()
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(config.log_directory)

    if not input_path.exists():
        raise ProcessingError(f"input file not found: {input_path}")

    try:
        sheet = read_first_sheet(
            input_path,
            keep_na_strings=config.keep_na_strings,
            header_row=config.header_row,
        )
    except WorkbookDecodeError as e:
        _record_decode_failure(error_log, input_path.name, "DECODE_ERROR", str(e))
        raise ProcessingError(f"cannot read workbook {input_path.name}: {e}") from e
    except SheetHeaderError as e:
        _record_decode_failure(error_log, input_path.name, "HEADER_ERROR", str(e))
        raise ProcessingError(str(e)) from e

    logger.info(f"Reading {input_path.name} sheet={sheet.sheet_name} rows={len(sheet.rows)}")

    outcome = run_batch(sheet.rows, config.transform, cancel_event=cancel_event)

    artifact_path: Path | None = None
    preview: str | None = None
    if outcome.status is BatchStatus.SUCCESS and outcome.jsonl is not None:
        if output_directory is None:
            output_directory = (
                Path(config.output_directory) if config.output_directory else input_path.parent
            )
        output_directory.mkdir(parents=True, exist_ok=True)
        artifact_path = output_directory / output_filename(input_path.name)
        artifact_path.write_text(outcome.jsonl, encoding="utf-8")
        preview = render_preview(outcome.jsonl, config.preview_chars)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    if elapsed_seconds > 0:
        throughput_rps = outcome.row_count / elapsed_seconds
    else:
        throughput_rps = 0.0

    return ConversionResult(
        source_name=input_path.name,
        outcome=outcome,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        artifact_path=artifact_path,
        preview=preview,
        sheet_name=sheet.sheet_name,
    )
