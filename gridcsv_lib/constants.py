# --- gridcsv_lib/constants.py ---
"""
gridcsv_lib/constants.py: Shared constants and configuration defaults.
"""

# Decimal digits kept when normalising ruling coordinates.
COORD_PRECISION = 3

# Segments whose dx or dy is within this many drawing units count as ruling lines.
DEFAULT_AXIS_TOLERANCE = 0.001

DEFAULT_DELIMITER = ","
DEFAULT_LINE_TERMINATOR = "\n"
DEFAULT_ENCODING = "utf-8"
BOM_ENCODING = "utf-8-sig"

DEFAULT_OUTPUT_NAME = "ExportedTable.csv"
OUTPUT_EXTENSION = ".csv"
OUTPUT_DIR_ENV_VAR = "GRIDCSV_OUTPUT_DIR"
DEFAULT_CONFIG_FILE = "gridcsv.cfg"

SUPPORTED_EXTENSIONS = (".pdf", ".dxf", ".json")

# --- CONFIGURATION DEFAULTS ---
CONFIG_DEFAULTS = {
    "Output": {
        "directory": "",
        "encoding": DEFAULT_ENCODING,
        "delimiter": DEFAULT_DELIMITER,
        "line_terminator": "\\n",
    },
    "Source": {
        "pages": "all",
        "layers": "",
        "axis_tolerance": str(DEFAULT_AXIS_TOLERANCE),
    },
}
