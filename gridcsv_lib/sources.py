# --- gridcsv_lib/sources.py ---
"""
gridcsv_lib/sources.py: Geometry sources. Reads ruling lines and placed text
from PDF (pdfminer.six), DXF (ezdxf) or JSON files into GeometrySet objects.
"""
import json
import logging
import os

import ezdxf
from pdfminer.high_level import extract_pages
from pdfminer.layout import LTChar, LTCurve, LTLine, LTRect, LTTextLine
from pdfminer.psparser import PSException

from .constants import DEFAULT_AXIS_TOLERANCE, SUPPORTED_EXTENSIONS
from .errors import GeometrySourceError, NoInputSelected
from .geometry import (
    filter_axis_aligned,
    polyline_edges,
    rect_edges,
    slot_of,
    vertical_rulings_at,
)
from .models import GeometrySet, LineSegment, TextLabel

log_source = logging.getLogger("gridcsv.source")


def parse_page_selection(pages_str: str) -> set | None:
    """Parses a page selection string (e.g., '1,3,5-7') into a set of integers.

    Returns None for 'all'. Raises ValueError on malformed input.
    """
    if not pages_str or pages_str.strip().lower() == "all":
        return None
    pages = set()
    for p in pages_str.split(","):
        part = p.strip()
        if not part:
            continue
        if "-" in part:
            s, e = map(int, part.split("-"))
            if s > e:
                raise ValueError(f"descending page range '{part}'")
            pages.update(range(s, e + 1))
        else:
            pages.add(int(part))
    if not pages:
        raise ValueError(f"empty page selection '{pages_str}'")
    return pages


def parse_layer_selection(layers_str) -> set | None:
    """Parses a comma-separated layer list; None (or empty) selects every layer."""
    if not layers_str:
        return None
    layers = {name.strip().upper() for name in layers_str.split(",") if name.strip()}
    return layers or None


def load_geometry(
    path, pages="all", layers=None, axis_tolerance=DEFAULT_AXIS_TOLERANCE
) -> list[GeometrySet]:
    """Loads every table candidate from `path`, dispatching on its extension."""
    if not os.path.isfile(path):
        raise GeometrySourceError(f"Input file not found: {path}")
    ext = os.path.splitext(path)[1].lower()
    if ext == ".pdf":
        try:
            pages_to_process = parse_page_selection(pages)
        except ValueError as e:
            raise GeometrySourceError(f"Invalid page selection '{pages}': {e}") from e
        sets = _load_pdf(path, pages_to_process)
    elif ext == ".dxf":
        sets = [_load_dxf(path, parse_layer_selection(layers))]
    elif ext == ".json":
        sets = [_load_json(path)]
    else:
        raise GeometrySourceError(
            f"Unsupported input '{path}' (expected one of: {', '.join(SUPPORTED_EXTENSIONS)})"
        )

    if not sets:
        raise NoInputSelected(f"No pages selected from {path}")
    for geometry in sets:
        geometry.segments = filter_axis_aligned(geometry.segments, axis_tolerance)
        log_source.info(
            "%s: %d segment(s), %d label(s)",
            geometry.name,
            len(geometry.segments),
            len(geometry.labels),
        )
    return sets


# --- PDF ---
def _load_pdf(path, pages_to_process):
    """One GeometrySet per selected page."""
    try:
        all_page_layouts = list(extract_pages(path))
    except (OSError, PSException) as e:
        raise GeometrySourceError(f"Could not parse PDF {path}: {e}") from e

    pages_to_scan = [
        p for p in all_page_layouts if not pages_to_process or p.pageid in pages_to_process
    ]
    log_source.debug(
        "Found %d of %d page(s) to scan in %s.",
        len(pages_to_scan),
        len(all_page_layouts),
        path,
    )
    sets = []
    for page_layout in pages_to_scan:
        geometry = GeometrySet(f"page{page_layout.pageid}")
        text_lines = []
        _collect_pdf_elements(page_layout, geometry, text_lines)
        for line in text_lines:
            geometry.labels.extend(_labels_from_text_line(line, geometry.segments))
        sets.append(geometry)
    return sets


def _collect_pdf_elements(obj, geometry, text_lines):
    """Recursively collects rulings and text lines from a pdfminer layout tree."""
    if isinstance(obj, LTTextLine):
        text_lines.append(obj)
        return
    if isinstance(obj, LTRect):
        for edge in rect_edges(obj.x0, obj.y0, obj.x1, obj.y1):
            geometry.segments.append(LineSegment(*edge))
        return
    if isinstance(obj, LTLine):
        (x1, y1), (x2, y2) = obj.pts[0], obj.pts[-1]
        geometry.segments.append(LineSegment(x1, y1, x2, y2))
        return
    if isinstance(obj, LTCurve):
        log_source.debug("Skipping curve at %s", getattr(obj, "bbox", "?"))
        return
    if hasattr(obj, "_objs"):
        for child in obj:
            _collect_pdf_elements(child, geometry, text_lines)


def _labels_from_text_line(line, segments):
    """Splits a text line into one label per run of characters between rulings.

    pdfminer merges text from neighbouring cells into one line when the gap is
    small, so every vertical ruling crossing the line starts a new run.
    """
    cy = (line.y0 + line.y1) / 2
    rulings = vertical_rulings_at(segments, cy, DEFAULT_AXIS_TOLERANCE)
    runs, run_chars, start_x, last_x, run_slot = [], [], -1, -1, None
    for char in line:
        if isinstance(char, LTChar) and char.get_text().strip():
            slot = slot_of(rulings, (char.x0 + char.x1) / 2)
            if run_chars and slot != run_slot:
                runs.append(("".join(run_chars), start_x, last_x))
                run_chars = []
            if not run_chars:
                start_x, run_slot = char.x0, slot
            run_chars.append(char.get_text())
            last_x = char.x1
        elif run_chars:
            # Spaces and the LTAnno breaks pdfminer inserts between chars
            run_chars.append(char.get_text())
    if run_chars:
        runs.append(("".join(run_chars), start_x, last_x))

    if not runs:
        # No character objects: keep the line whole, anchored on its bbox centre.
        runs = [(line.get_text(), line.x0, line.x1)]
    labels = []
    for text, x0, x1 in runs:
        text = text.strip()
        if text:
            labels.append(TextLabel(text, (x0 + x1) / 2, cy))
    if len(labels) > 1:
        log_source.debug(
            "Split text line %r into %d labels at rulings", line.get_text(), len(labels)
        )
    return labels


# --- DXF ---
def _load_dxf(path, layers):
    """A single GeometrySet for the modelspace, optionally restricted to layers."""
    try:
        doc = ezdxf.readfile(path)
    except IOError as e:
        raise GeometrySourceError(f"Could not read DXF {path}: {e}") from e
    except ezdxf.DXFStructureError as e:
        raise GeometrySourceError(f"Invalid or corrupted DXF {path}: {e}") from e

    geometry = GeometrySet("modelspace")
    skipped = 0
    for entity in doc.modelspace().query("LINE LWPOLYLINE TEXT MTEXT"):
        if layers and entity.dxf.layer.upper() not in layers:
            skipped += 1
            continue
        kind = entity.dxftype()
        if kind == "LINE":
            start, end = entity.dxf.start, entity.dxf.end
            geometry.segments.append(LineSegment(start.x, start.y, end.x, end.y))
        elif kind == "LWPOLYLINE":
            for edge in polyline_edges(entity.get_points("xy"), closed=entity.closed):
                geometry.segments.append(LineSegment(*edge))
        elif kind == "TEXT":
            insert = entity.dxf.insert
            geometry.labels.append(TextLabel(entity.dxf.text, insert.x, insert.y))
        elif kind == "MTEXT":
            insert = entity.dxf.insert
            geometry.labels.append(TextLabel(entity.plain_text(), insert.x, insert.y))
    if skipped:
        log_source.debug("Skipped %d entities outside layers %s", skipped, sorted(layers))
    return geometry


# --- JSON ---
def _load_json(path):
    """Reads {"segments": [[x1, y1, x2, y2], ...], "labels": [{"text", "x", "y"}, ...]}."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise GeometrySourceError(f"Could not read JSON geometry {path}: {e}") from e

    if not isinstance(data, dict):
        raise GeometrySourceError(f"{path}: top-level JSON value must be an object")
    geometry = GeometrySet(data.get("name") or "table")
    try:
        for seg in data.get("segments", []):
            if isinstance(seg, dict):
                geometry.segments.append(
                    LineSegment(seg["x1"], seg["y1"], seg["x2"], seg["y2"])
                )
            else:
                x1, y1, x2, y2 = seg
                geometry.segments.append(LineSegment(x1, y1, x2, y2))
        for label in data.get("labels", []):
            geometry.labels.append(TextLabel(label["text"], label["x"], label["y"]))
    except (KeyError, TypeError, ValueError) as e:
        raise GeometrySourceError(f"{path}: malformed geometry entry ({e})") from e
    return geometry
