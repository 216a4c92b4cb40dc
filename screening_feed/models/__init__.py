"""Domain models for the spreadsheet -> JSONL converter.

Frozen dataclasses shared between the transform layer, the batch pipeline and the CLI.
"""

from .config_models import ConverterConfig, TransformOptions
from .error_record import ErrorRecord
from .processing_result import BatchOutcome, BatchStatus, ConversionResult
from .row_data import RowData

__all__ = [
    # Configuration models
    "ConverterConfig",
    "TransformOptions",
    # Processing models
    "RowData",
    "BatchOutcome",
    "BatchStatus",
    "ConversionResult",
    "ErrorRecord",
]
