# --- gridcsv_lib/writer.py ---
"""
gridcsv_lib/writer.py: Resolves where exported tables go and writes them.
"""
import logging
import os
import sys

from .constants import (
    DEFAULT_ENCODING,
    DEFAULT_OUTPUT_NAME,
    OUTPUT_DIR_ENV_VAR,
    OUTPUT_EXTENSION,
)
from .errors import DestinationWriteFailure

log_output = logging.getLogger("gridcsv.output")


def resolve_output_dir(configured=None, environ=None) -> str:
    """Decides the output directory once, at the application boundary.

    Order: explicit value, GRIDCSV_OUTPUT_DIR, ~/Documents, the home directory.
    """
    environ = os.environ if environ is None else environ
    if configured:
        return os.path.expanduser(configured)
    from_env = environ.get(OUTPUT_DIR_ENV_VAR)
    if from_env:
        log_output.debug("Using output directory from %s: %s", OUTPUT_DIR_ENV_VAR, from_env)
        return os.path.expanduser(from_env)
    home = os.path.expanduser("~")
    documents = os.path.join(home, "Documents")
    return documents if os.path.isdir(documents) else home


def output_path_for(input_path, output_dir, set_name=None, multiple=False) -> str:
    """Builds `<dir>/<stem>.csv`, or `<dir>/<stem>_<set>.csv` for multi-table inputs."""
    stem = os.path.splitext(os.path.basename(input_path or ""))[0]
    if not stem:
        filename = DEFAULT_OUTPUT_NAME
    elif multiple and set_name:
        safe = "".join(ch if ch.isalnum() else "_" for ch in set_name).strip("_")
        filename = f"{stem}_{safe}{OUTPUT_EXTENSION}"
    else:
        filename = f"{stem}{OUTPUT_EXTENSION}"
    return os.path.join(output_dir, filename)


class FileDestination:
    """Persists text to a file with a fixed encoding."""

    def __init__(self, path, encoding=DEFAULT_ENCODING):
        self.path = path
        self.encoding = encoding

    def write(self, text: str):
        """Encodes `text` first so an unencodable table leaves no file behind."""
        try:
            data = text.encode(self.encoding)
        except (LookupError, UnicodeError) as e:
            raise DestinationWriteFailure(self.path, e) from e
        try:
            with open(self.path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise DestinationWriteFailure(self.path, e) from e
        log_output.info("CSV file created at: %s", self.path)

    def __str__(self):
        return self.path


class StdoutDestination:
    """Writes text to standard output (the `-o -` destination)."""

    def __init__(self, stream=None):
        self.stream = stream

    def write(self, text: str):
        stream = self.stream or sys.stdout
        try:
            stream.write(text)
            stream.flush()
        except OSError as e:
            raise DestinationWriteFailure("<stdout>", e) from e

    def __str__(self):
        return "<stdout>"
