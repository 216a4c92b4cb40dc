from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""Result models for the batch pipeline and file conversion.

A batch ends in exactly one of two states: SUCCESS (JSONL text plus a record count)
or EMPTY (nothing to write, surfaced to the user as "no rows found").
"""

__all__ = [
    "BatchStatus",
    "BatchOutcome",
    "ConversionResult",
]


class BatchStatus(Enum):
    SUCCESS = "success"
    EMPTY = "empty"


@dataclass(frozen=True)
class BatchOutcome:
    """Terminal outcome of one run of the batch pipeline."""
    status: BatchStatus
    row_count: int  # input rows seen
    record_count: int = 0  # JSONL lines produced
    jsonl: str | None = None  # None unless status is SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.status is BatchStatus.EMPTY

    @classmethod
    def empty(cls, row_count: int = 0) -> BatchOutcome:
        return cls(status=BatchStatus.EMPTY, row_count=row_count)


@dataclass(frozen=True)
class ConversionResult:
    """Aggregated result of converting one workbook.

    Contains everything needed for the SUMMARY line and for the caller to expose
    the preview and the written artifact.
    """
    source_name: str  # input file name
    outcome: BatchOutcome
    start_time: datetime  # UTC
    end_time: datetime  # UTC
    elapsed_seconds: float
    throughput_rows_per_sec: float
    artifact_path: Path | None = None  # written .jsonl, None when EMPTY
    preview: str | None = None  # bounded preview of the JSONL payload
    sheet_name: str | None = None

    @property
    def row_count(self) -> int:
        return self.outcome.row_count

    @property
    def record_count(self) -> int:
        return self.outcome.record_count
