from __future__ import annotations

import math
from pathlib import Path

import pytest

from body_com.service.com_log import DisplacementLog, load_displacement_log, summarize_displacement_log


def test_log_writes_headerless_rows(tmp_path: Path):
    path = tmp_path / "com_data.csv"
    with DisplacementLog(path) as log:
        log.append([1.5, -2.0, 3.25])
        log.append((0.0, 0.0, 0.0))
        assert log.rows_written == 2

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["1.5,-2.0,3.25", "0.0,0.0,0.0"]
    assert not log.is_open


def test_log_is_truncated_on_open(tmp_path: Path):
    path = tmp_path / "com_data.csv"
    path.write_text("9,9,9\n", encoding="utf-8")
    log = DisplacementLog(path).open()
    log.close()
    assert path.read_text(encoding="utf-8") == ""
    assert log.rows_written == 0


def test_append_requires_open_log(tmp_path: Path):
    with pytest.raises(RuntimeError):
        DisplacementLog(tmp_path / "log.csv").append([0.0, 0.0, 0.0])


def test_load_displacement_log(tmp_path: Path):
    path = tmp_path / "com_data.csv"
    path.write_text("1.0,2.0,3.0\n4.0,5.0,6.0\n", encoding="utf-8")
    frame = load_displacement_log(path)
    assert list(frame.columns) == ["x", "y", "z"]
    assert frame.to_numpy().tolist() == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]

    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert load_displacement_log(empty).empty

    with pytest.raises(FileNotFoundError):
        load_displacement_log(tmp_path / "missing.csv")


def test_summarize_displacement_log(tmp_path: Path):
    path = tmp_path / "com_data.csv"
    path.write_text("0,0,0\n3,4,0\n3,-4,0\n", encoding="utf-8")

    summary = summarize_displacement_log(path)

    assert summary.row_count == 3
    assert summary.final == (3.0, -4.0, 0.0)
    assert summary.max_abs == (3.0, 4.0, 0.0)
    assert summary.path_length == pytest.approx(13.0)
    assert summary.as_dict()["final_y"] == -4.0


def test_summarize_empty_log(tmp_path: Path):
    path = tmp_path / "com_data.csv"
    path.write_text("", encoding="utf-8")
    summary = summarize_displacement_log(path)
    assert summary.row_count == 0
    assert summary.final is None
    assert math.isnan(summary.path_length)
    assert summary.as_dict()["max_abs_x"] is None
