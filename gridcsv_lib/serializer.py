# --- gridcsv_lib/serializer.py ---
"""
gridcsv_lib/serializer.py: Renders a CellGrid as row/column delimited text.
"""
from .constants import DEFAULT_DELIMITER, DEFAULT_LINE_TERMINATOR
from .diagnostics import NullSink
from .models import CellGrid


class TableSerializer:
    """
    One line per row, fields joined by the delimiter, absent cells as empty
    fields. Cell text is written verbatim: embedded delimiters or line breaks
    are not quoted (they are reported through the diagnostic sink instead).
    """

    def __init__(
        self, delimiter=DEFAULT_DELIMITER, line_terminator=DEFAULT_LINE_TERMINATOR, sink=None
    ):
        self.delimiter = delimiter
        self.line_terminator = line_terminator
        self.sink = sink or NullSink()

    def serialize(self, grid: CellGrid) -> str:
        """Returns the delimited text for `grid`; empty when it has no cells."""
        if grid.is_empty:
            self.sink.event("serialize", "content_serialized", "CSV Content:\n", text="")
            return ""

        lines = []
        for r, row in enumerate(grid.rows()):
            fields = []
            for c, cell in enumerate(row):
                text = cell if cell is not None else ""
                if self._is_unsafe(text):
                    self.sink.event(
                        "serialize",
                        "cell_unsafe",
                        f"Cell [{r}, {c}] contains a delimiter or line break; "
                        "output columns may shift.",
                        row=r,
                        col=c,
                    )
                fields.append(text)
            lines.append(self.delimiter.join(fields) + self.line_terminator)
        content = "".join(lines)
        self.sink.event("serialize", "content_serialized", f"CSV Content:\n{content}", text=content)
        return content

    def _is_unsafe(self, text):
        return bool(text) and (self.delimiter in text or "\n" in text or "\r" in text)
