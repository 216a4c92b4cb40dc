from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping, Sequence
from pathlib import PurePath
from typing import Any

from ..models.config_models import DEFAULT_PREVIEW_CHARS, TransformOptions
from ..models.processing_result import BatchOutcome, BatchStatus
from ..transform.columns import detect_columns
from ..transform.row import transform_row
from .progress import ProgressTracker

"""Batch pipeline: rows in, JSONL out.

Dynamic columns are detected once from the first row's headers, then every row is
transformed independently and serialized to one JSON line.
"""

__all__ = [
    "TRUNCATION_MARKER",
    "ConversionCancelled",
    "serialize_record",
    "run_batch",
    "render_preview",
    "output_filename",
]

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n...preview truncated..."


class ConversionCancelled(Exception):
    """Raised when the cancel event is set while rows are being transformed."""


def serialize_record(record: Mapping[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


def run_batch(
    rows: Sequence[Mapping[Any, Any]],
    options: TransformOptions | None = None,
    *,
    cancel_event: threading.Event | None = None,
) -> BatchOutcome:
    """Transform all rows and join the records as JSON Lines.

    Returns an EMPTY outcome when there are no rows, or when no row produced a
    record; SUCCESS otherwise. Raises ConversionCancelled if cancel_event is set.
    """
    if options is None:
        options = TransformOptions()
    if not rows:
        logger.debug("batch has no rows")
        return BatchOutcome.empty(row_count=0)

    columns = detect_columns(rows[0].keys())
    logger.debug(
        f"columns={len(columns.keys)} aliases={[c.key for c in columns.alias_columns]} "
        f"date_columns={sorted(columns.date_columns)}"
    )

    lines: list[str] = []
    with ProgressTracker(len(rows)) as progress:
        for number, row in enumerate(rows, start=1):
            if cancel_event is not None and cancel_event.is_set():
                raise ConversionCancelled(f"cancelled after {number - 1}/{len(rows)} rows")
            record = transform_row(row, columns, options, row_number=number)
            if record:
                lines.append(serialize_record(record))
            else:
                logger.debug(f"row {number}: no data, skipped")
            progress.advance()
        progress.set_postfix(records=len(lines))

    if not lines:
        return BatchOutcome.empty(row_count=len(rows))
    return BatchOutcome(
        status=BatchStatus.SUCCESS,
        row_count=len(rows),
        record_count=len(lines),
        jsonl="\n".join(lines),
    )


def render_preview(jsonl: str, limit: int = DEFAULT_PREVIEW_CHARS) -> str:
    if len(jsonl) <= limit:
        return jsonl
    return jsonl[:limit] + TRUNCATION_MARKER


def output_filename(input_name: str) -> str:
    """"sanctions.xlsx" -> "sanctions.jsonl" (only the last extension is replaced)."""
    name = PurePath(input_name).name
    stem, dot, _ = name.rpartition(".")
    if not dot or not stem:
        return f"{name}.jsonl"
    return f"{stem}.jsonl"
