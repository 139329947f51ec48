import json

import pytest
from pdfminer.layout import LTRect

import gridcsv
from gridcsv import Application


@pytest.fixture(autouse=True)
def no_logging_setup(mocker):
    # Keep the test runner's own log handlers in place
    return mocker.patch("gridcsv.setup_logging")


@pytest.fixture
def geometry_file(tmp_path):
    def write(segments, labels, name="table.json"):
        path = tmp_path / name
        path.write_text(json.dumps({"segments": segments, "labels": labels}), encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def two_by_two_file(geometry_file):
    segments = [[0, y, 20, y] for y in (0, 10, 20)] + [[x, 0, x, 20] for x in (0, 10, 20)]
    return geometry_file(segments, [{"text": "Q1", "x": 5, "y": 15}])


def run(tmp_path, *argv):
    args = Application.parse_arguments(["-c", str(tmp_path / "gridcsv.cfg"), *argv])
    return Application(args).run()


def test_export_to_explicit_file(tmp_path, two_by_two_file):
    out = tmp_path / "result.csv"

    assert run(tmp_path, two_by_two_file, "-o", str(out)) == 0
    assert out.read_text(encoding="utf-8") == "Q1,\n,\n"


def test_default_output_goes_to_output_dir(tmp_path, two_by_two_file):
    out_dir = tmp_path / "exports"
    out_dir.mkdir()

    assert run(tmp_path, two_by_two_file, "--output-dir", str(out_dir)) == 0
    assert (out_dir / "table.csv").read_text(encoding="utf-8") == "Q1,\n,\n"


def test_output_dir_from_environment(tmp_path, two_by_two_file, monkeypatch):
    monkeypatch.setenv("GRIDCSV_OUTPUT_DIR", str(tmp_path))

    assert run(tmp_path, two_by_two_file) == 0
    assert (tmp_path / "table.csv").exists()


def test_stdout_output(tmp_path, two_by_two_file, capsys):
    assert run(tmp_path, two_by_two_file, "-o", "-", "--delimiter", ";") == 0
    assert capsys.readouterr().out == "Q1;\n;\n"


def test_bom_option(tmp_path, two_by_two_file):
    out = tmp_path / "bom.csv"

    assert run(tmp_path, two_by_two_file, "-o", str(out), "--bom") == 0
    assert out.read_bytes().startswith(b"\xef\xbb\xbf")


def test_config_file_settings_apply(tmp_path, two_by_two_file):
    (tmp_path / "gridcsv.cfg").write_text(
        "[Output]\ndelimiter = \\t\nline_terminator = \\r\\n\n", encoding="utf-8"
    )
    out = tmp_path / "t.csv"

    assert run(tmp_path, two_by_two_file, "-o", str(out)) == 0
    assert out.read_bytes() == b"Q1\t\r\n\t\r\n"


def test_dry_run_writes_nothing(tmp_path, two_by_two_file, capsys):
    out = tmp_path / "result.csv"

    assert run(tmp_path, two_by_two_file, "-o", str(out), "-D", "--preview") == 0
    assert not out.exists()
    assert "Q1" in capsys.readouterr().err


def test_empty_selection_is_silent(tmp_path, geometry_file):
    empty = geometry_file([], [], name="empty.json")
    out = tmp_path / "empty.csv"

    assert run(tmp_path, empty, "-o", str(out)) == 0
    assert not out.exists()


def test_write_failure_exits_with_error(tmp_path, two_by_two_file):
    assert run(tmp_path, two_by_two_file, "-o", str(tmp_path / "missing" / "t.csv")) == 1


def test_unencodable_output_exits_with_error(tmp_path, geometry_file):
    path = geometry_file([[0, 0, 10, 0], [0, 10, 10, 10]], [{"text": "café", "x": 5, "y": 5}])
    out = tmp_path / "t.csv"

    assert run(tmp_path, path, "-o", str(out), "--encoding", "ascii") == 1
    assert not out.exists()


def test_bad_source_exits_with_error(tmp_path):
    assert run(tmp_path, str(tmp_path / "absent.json")) == 1


def test_bad_page_selection_exits_with_error(tmp_path, two_by_two_file):
    assert run(tmp_path, two_by_two_file, "-p", "1-x") == 1


def test_single_output_file_for_many_inputs_is_refused(tmp_path, geometry_file, two_by_two_file):
    other = geometry_file([], [], name="other.json")

    assert run(tmp_path, two_by_two_file, other, "-o", str(tmp_path / "t.csv")) == 1


def test_no_inputs(tmp_path):
    assert run(tmp_path) == 1


def test_init_config_writes_settings(tmp_path):
    assert run(tmp_path, "--init-config") == 0
    assert "[Output]" in (tmp_path / "gridcsv.cfg").read_text(encoding="utf-8")


def test_logging_is_configured_from_flags(tmp_path, two_by_two_file, no_logging_setup):
    run(tmp_path, two_by_two_file, "-D", "-v", "-d", "grid,assign")

    kwargs = no_logging_setup.call_args.kwargs
    assert kwargs["project_name"] == "gridcsv"
    assert kwargs["debug_topics"] == "grid,assign"


def test_main_exits_with_run_status(tmp_path, two_by_two_file, mocker):
    mocker.patch(
        "sys.argv",
        ["gridcsv.py", "-c", str(tmp_path / "gridcsv.cfg"), two_by_two_file, "-D"],
    )
    mocker.patch("logging.basicConfig")

    with pytest.raises(SystemExit) as excinfo:
        gridcsv.main()
    assert excinfo.value.code == 0


@pytest.fixture
def two_page_pdf(tmp_path, mocker):
    pages = []
    for pageid in (1, 2):
        page = mocker.MagicMock()
        page.pageid = pageid
        page.__iter__.return_value = [LTRect(1, (0, 0, 20, 20))]
        pages.append(page)
    mocker.patch("gridcsv_lib.sources.extract_pages", return_value=pages)
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4\n%%EOF")
    return str(path)


def test_stdout_refuses_several_tables(tmp_path, two_page_pdf, capsys):
    assert run(tmp_path, two_page_pdf, "-o", "-") == 1
    assert capsys.readouterr().out == ""


def test_stdout_accepts_one_selected_page(tmp_path, two_page_pdf, capsys):
    assert run(tmp_path, two_page_pdf, "-o", "-", "-p", "2") == 0
    assert capsys.readouterr().out == "\n"


def test_several_tables_get_one_file_each(tmp_path, two_page_pdf):
    out_dir = tmp_path / "exports"
    out_dir.mkdir()

    assert run(tmp_path, two_page_pdf, "--output-dir", str(out_dir)) == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["report_page1.csv", "report_page2.csv"]
