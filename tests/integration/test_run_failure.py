from __future__ import annotations

import json
from pathlib import Path

from screening_feed.cli import main as cli_main


def test_run_undecodable_workbook_writes_error_log(temp_workdir: Path, write_config, capsys):
    broken = temp_workdir / "data" / "broken.xlsx"
    broken.write_bytes(b"\x00\x01 definitely not xlsx")
    code = cli_main([str(broken)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR processing: cannot read workbook broken.xlsx" in out
    assert "SUMMARY" not in out
    assert not (temp_workdir / "out").exists()

    logs = sorted((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert entry["file"] == "broken.xlsx"
    assert entry["sheet"] == "<FILE_LEVEL>"
    assert entry["error_type"] == "DECODE_ERROR"
    assert entry["message"]
