import io
import os

import pytest

from gridcsv_lib.errors import DestinationWriteFailure
from gridcsv_lib.writer import (
    FileDestination,
    StdoutDestination,
    output_path_for,
    resolve_output_dir,
)


def test_configured_directory_wins(tmp_path):
    env = {"GRIDCSV_OUTPUT_DIR": "/from/env"}

    assert resolve_output_dir(str(tmp_path), environ=env) == str(tmp_path)


def test_environment_directory_is_second_choice():
    assert resolve_output_dir(None, environ={"GRIDCSV_OUTPUT_DIR": "/from/env"}) == "/from/env"


def test_falls_back_to_documents_then_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert resolve_output_dir(None, environ={}) == str(tmp_path)
    (tmp_path / "Documents").mkdir()
    assert resolve_output_dir(None, environ={}) == str(tmp_path / "Documents")


@pytest.mark.parametrize(
    "input_path, set_name, multiple, expected",
    [
        ("/data/plan.dxf", "modelspace", False, "plan.csv"),
        ("report.pdf", "page3", True, "report_page3.csv"),
        ("report.pdf", "page3", False, "report.csv"),
        ("", None, False, "ExportedTable.csv"),
    ],
)
def test_output_path_for(input_path, set_name, multiple, expected):
    assert output_path_for(input_path, "out", set_name, multiple) == os.path.join("out", expected)


def test_file_destination_writes_utf8_without_newline_translation(tmp_path):
    path = tmp_path / "t.csv"

    FileDestination(str(path)).write("Größe,\r\n,\n")

    assert path.read_bytes() == "Größe,\r\n,\n".encode("utf-8")


def test_file_destination_with_bom(tmp_path):
    path = tmp_path / "t.csv"

    FileDestination(str(path), encoding="utf-8-sig").write("a\n")

    assert path.read_bytes() == b"\xef\xbb\xbfa\n"


def test_file_destination_failures_are_raised(tmp_path):
    with pytest.raises(DestinationWriteFailure):
        FileDestination(str(tmp_path / "no" / "dir.csv")).write("a\n")
    with pytest.raises(DestinationWriteFailure):
        FileDestination(str(tmp_path)).write("a\n")
    with pytest.raises(DestinationWriteFailure):
        FileDestination(str(tmp_path / "x.csv"), encoding="no-such-codec").write("a\n")


def test_unencodable_text_leaves_no_file(tmp_path):
    path = tmp_path / "t.csv"

    with pytest.raises(DestinationWriteFailure) as exc_info:
        FileDestination(str(path), encoding="ascii").write("café\n")

    assert isinstance(exc_info.value.cause, UnicodeEncodeError)
    assert not path.exists()


def test_unencodable_text_keeps_previous_file(tmp_path):
    path = tmp_path / "t.csv"
    path.write_bytes(b"old\n")

    with pytest.raises(DestinationWriteFailure):
        FileDestination(str(path), encoding="ascii").write("café\n")

    assert path.read_bytes() == b"old\n"


def test_stdout_destination():
    stream = io.StringIO()

    StdoutDestination(stream).write("Q1,\n,\n")

    assert stream.getvalue() == "Q1,\n,\n"
