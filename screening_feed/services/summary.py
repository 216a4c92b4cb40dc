from __future__ import annotations

from ..models.processing_result import ConversionResult

"""SUMMARY line rendering.

Format:
SUMMARY file={name} rows={rows} records={records} elapsed_sec={elapsed} throughput_rps={throughput}
"""

__all__ = [
    "render_summary_line",
]


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ConversionResult) -> str:
    """Render the SUMMARY line for one conversion.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from screening_feed.models.processing_result import BatchOutcome, BatchStatus
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     source_name="list.xlsx",
        ...     outcome=BatchOutcome(BatchStatus.SUCCESS, row_count=10, record_count=9, jsonl="{}"),
        ...     start_time=start, end_time=end, elapsed_seconds=2.0, throughput_rows_per_sec=5.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY file=list.xlsx rows=10 records=9 elapsed_sec=2 throughput_rps=5'
    """
    return (
        f"SUMMARY file={result.source_name} "
        f"rows={result.row_count} "
        f"records={result.record_count} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
