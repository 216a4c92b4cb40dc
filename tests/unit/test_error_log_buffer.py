from __future__ import annotations

import json
import re
from pathlib import Path

from screening_feed.logging.error_log import ErrorLogBuffer
from screening_feed.models.error_record import FILE_LEVEL_SHEET, ErrorRecord

EXPECTED_KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_record_json_line_keys():
    rec = ErrorRecord.create(file="a.xlsx", sheet=FILE_LEVEL_SHEET, row=-1, error_type="DECODE_ERROR", message="bad zip")
    data = json.loads(rec.to_json_line())
    assert set(data) == EXPECTED_KEYS
    assert data["row"] == -1
    assert data["sheet"] == "<FILE_LEVEL>"
    assert data["timestamp"].endswith("Z")


def test_flush_empty_buffer_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("a.xlsx", "<FILE_LEVEL>", -1, "DECODE_ERROR", "bad zip"))
    buf.append(ErrorRecord.create("b.xlsx", "<FILE_LEVEL>", -1, "HEADER_ERROR", "no header"))
    assert len(buf) == 2
    path = buf.flush()
    assert path is not None
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["error_type"] for line in lines] == ["DECODE_ERROR", "HEADER_ERROR"]
    assert len(buf) == 0


def test_second_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("a.xlsx", "<FILE_LEVEL>", -1, "DECODE_ERROR", "x"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.xlsx", "<FILE_LEVEL>", -1, "DECODE_ERROR", "y"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2
