from gridcsv_lib.diagnostics import CollectingSink
from gridcsv_lib.models import CellGrid
from gridcsv_lib.serializer import TableSerializer


def test_empty_cells_render_as_empty_fields():
    assert TableSerializer().serialize(CellGrid(2, 2)) == ",\n,\n"


def test_fields_follow_column_order():
    grid = CellGrid(2, 3)
    grid.set(0, 0, "Q1")
    grid.set(0, 2, "Q3")
    grid.set(1, 1, "mid")

    assert TableSerializer().serialize(grid) == "Q1,,Q3\n,mid,\n"


def test_grid_without_cells_serializes_to_nothing():
    serializer = TableSerializer()

    assert serializer.serialize(CellGrid(0, 0)) == ""
    assert serializer.serialize(CellGrid(0, 3)) == ""
    assert serializer.serialize(CellGrid(2, 0)) == ""


def test_custom_delimiter_and_terminator():
    grid = CellGrid(2, 2)
    grid.set(1, 1, "x")

    assert TableSerializer(delimiter=";", line_terminator="\r\n").serialize(grid) == ";\r\n;x\r\n"


def test_content_is_neither_trimmed_nor_escaped():
    sink = CollectingSink()
    grid = CellGrid(1, 2)
    grid.set(0, 0, "  padded ")
    grid.set(0, 1, "a,b")

    text = TableSerializer(sink=sink).serialize(grid)

    assert text == "  padded ,a,b\n"
    unsafe = sink.named("cell_unsafe")
    assert len(unsafe) == 1
    assert (unsafe[0].data["row"], unsafe[0].data["col"]) == (0, 1)


def test_serialization_is_repeatable():
    grid = CellGrid(3, 2)
    grid.set(2, 0, "ä")
    serializer = TableSerializer()

    first = serializer.serialize(grid)
    assert serializer.serialize(grid) == first
    assert first.encode("utf-8") == serializer.serialize(grid).encode("utf-8")


def test_serialized_content_event_carries_text():
    sink = CollectingSink()
    TableSerializer(sink=sink).serialize(CellGrid(1, 1))

    event = sink.named("content_serialized")[0]
    assert event.data["text"] == "\n"
    assert event.message.startswith("CSV Content:")
