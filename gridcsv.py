#!/usr/bin/env python3
"""
gridcsv: Rebuilds tables drawn as loose ruling lines and text into CSV.

Reads the ruling lines and placed text of a PDF page, a DXF modelspace or a
JSON geometry dump, derives the row/column grid from the line endpoints,
drops every text into the cell containing it and writes the grid as
comma-separated text.
"""

import argparse
import logging
import os
import sys
import time

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.log_utils import ContextFilter, setup_logging
from gridcsv_lib.api import export_geometry
from gridcsv_lib.config_service import ConfigService, decode_escapes
from gridcsv_lib.constants import BOM_ENCODING, DEFAULT_CONFIG_FILE
from gridcsv_lib.diagnostics import LoggingSink
from gridcsv_lib.errors import DestinationWriteFailure, GeometrySourceError, NoInputSelected
from gridcsv_lib.sources import load_geometry, parse_page_selection
from gridcsv_lib.writer import (
    FileDestination,
    StdoutDestination,
    output_path_for,
    resolve_output_dir,
)

log_app = logging.getLogger("gridcsv")


# --- CUSTOM ARGPARSE FORMATTER ---
class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Orchestrates the table export workflow based on command-line arguments."""

    STDOUT_SENTINEL = "-"

    def __init__(self, args):
        self.args = args
        self.stats = {"tables": 0, "skipped": 0, "placed": 0, "dropped": 0, "collisions": 0}
        self.options = {}

    def run(self) -> int:
        """Main entry point for the application logic. Returns the exit status."""
        self.stats["start_time"] = time.monotonic()
        setup_logging(
            project_name="gridcsv",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )

        config = ConfigService(self.args.config or DEFAULT_CONFIG_FILE)
        settings = config.get_settings()
        if self.args.init_config:
            return 0 if config.save_settings(settings) else 1

        if not self.args.input_files:
            log_app.error("No input files given.")
            return 1

        try:
            self.options = self._resolve_options(settings)
        except ValueError as e:
            log_app.error("Invalid option: %s", e)
            return 1

        sink = LoggingSink("gridcsv")
        for input_file in self.args.input_files:
            log_filter = ContextFilter(os.path.basename(input_file))
            handlers = logging.getLogger().handlers
            for h in handlers:
                h.addFilter(log_filter)
            try:
                self._process_input(input_file, sink)
            except GeometrySourceError as e:
                log_app.critical("%s", e)
                return 1
            except DestinationWriteFailure as e:
                log_app.error("%s", e)
                return 1
            except ValueError as e:
                log_app.error("Invalid option: %s", e)
                return 1
            finally:
                for h in handlers:
                    h.removeFilter(log_filter)

        self._display_epilogue()
        return 0

    def _resolve_options(self, settings):
        """Merges config-file settings with command-line overrides."""
        out_cfg, src_cfg = settings.get("Output", {}), settings.get("Source", {})
        pages = self.args.pages or src_cfg.get("pages", "all")
        parse_page_selection(pages)  # Fail early on a bad selection

        if self.args.bom:
            encoding = BOM_ENCODING
        else:
            encoding = self.args.encoding or out_cfg.get("encoding") or "utf-8"

        delimiter = decode_escapes(self.args.delimiter or out_cfg.get("delimiter") or ",")
        line_terminator = decode_escapes(out_cfg.get("line_terminator") or "\\n")

        multiple_inputs = len(self.args.input_files) > 1
        if self.args.output_file not in (None, self.STDOUT_SENTINEL) and multiple_inputs:
            raise ValueError("--output-file accepts a single input file")

        options = {
            "pages": pages,
            "layers": self.args.layers or src_cfg.get("layers") or None,
            "axis_tolerance": float(src_cfg.get("axis_tolerance", "0.001")),
            "encoding": encoding,
            "delimiter": delimiter,
            "line_terminator": line_terminator,
            "output_dir": resolve_output_dir(self.args.output_dir or out_cfg.get("directory")),
        }
        if self.args.debug_topics:
            logging.getLogger("gridcsv.config").debug(
                "--- Effective Options ---\n%s",
                "\n".join([f"  - {k:<16} : {v!r}" for k, v in options.items()]),
            )
        return options

    def _process_input(self, input_file, sink):
        """Exports every table found in one input file."""
        log_app.info("--- Processing '%s' ---", input_file)
        try:
            geometry_sets = load_geometry(
                input_file,
                pages=self.options["pages"],
                layers=self.options["layers"],
                axis_tolerance=self.options["axis_tolerance"],
            )
        except NoInputSelected as e:
            log_app.info("%s. Nothing exported.", e)
            self.stats["skipped"] += 1
            return

        multiple = len(geometry_sets) > 1
        if multiple and self.args.output_file == self.STDOUT_SENTINEL and not self.args.dry_run:
            raise ValueError(
                f"{input_file} holds {len(geometry_sets)} tables; "
                "select one with -p to write to stdout"
            )
        for geometry in geometry_sets:
            destination = self._destination_for(input_file, geometry.name, multiple)
            try:
                result = export_geometry(
                    geometry,
                    destination,
                    sink=sink,
                    delimiter=self.options["delimiter"],
                    line_terminator=self.options["line_terminator"],
                )
            except NoInputSelected as e:
                log_app.info("%s. Skipping.", e)
                self.stats["skipped"] += 1
                continue

            self.stats["tables"] += 1
            self.stats["placed"] += result.stats.placed
            self.stats["dropped"] += result.stats.dropped
            self.stats["collisions"] += result.stats.collisions
            if self.args.preview:
                self._render_preview(f"{os.path.basename(input_file)} ({geometry.name})", result)

    def _destination_for(self, input_file, set_name, multiple):
        """Picks the destination for one table; None on a dry run."""
        if self.args.dry_run:
            return None
        if self.args.output_file == self.STDOUT_SENTINEL:
            return StdoutDestination()
        if self.args.output_file:
            path = self.args.output_file
            if multiple:
                root, ext = os.path.splitext(path)
                path = f"{root}_{set_name}{ext or '.csv'}"
        else:
            path = output_path_for(input_file, self.options["output_dir"], set_name, multiple)
        return FileDestination(path, encoding=self.options["encoding"])

    def _render_preview(self, title, result):
        """Shows the reconstructed grid as a rich table on stderr."""
        console = Console(stderr=True)
        grid = result.grid
        if grid.is_empty:
            console.print(f"[bold]{title}[/bold]: empty grid ({grid.num_rows}x{grid.num_cols})")
            return
        table = Table(title=title, show_header=False, show_lines=True)
        for _ in range(grid.num_cols):
            table.add_column()
        for row in grid.rows():
            table.add_row(*[Text(cell) if cell is not None else Text("") for cell in row])
        console.print(table)

    def _display_epilogue(self):
        """Logs a summary of what was exported."""
        total_dur = time.monotonic() - self.stats.get("start_time", time.monotonic())
        report = [
            "\n--- Export Summary ---",
            f"Total Execution Time: {total_dur:.2f} seconds",
            f"Tables Exported: {self.stats['tables']} ({self.stats['skipped']} skipped)",
            f"Labels: {self.stats['placed']} placed, {self.stats['dropped']} dropped, "
            f"{self.stats['collisions']} overwritten",
        ]
        log_app.info("\n".join(report))

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python gridcsv.py drawing.dxf -L TABLE",
            "  python gridcsv.py report.pdf -p 2 -o table.csv --preview",
            "  python gridcsv.py a.dxf b.dxf --output-dir exports --bom",
            "  python gridcsv.py geometry.json -o - -d grid,assign",
        ]
        parser = argparse.ArgumentParser(
            description="Rebuilds tables drawn as ruling lines and text into CSV.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument(
            "input_files",
            nargs="*",
            metavar="INPUT",
            help="PDF, DXF or JSON files holding the table geometry.",
        )
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )
        g_opts.add_argument(
            "-c",
            "--config",
            metavar="FILE",
            default=None,
            help=f"Settings file. (default: {DEFAULT_CONFIG_FILE})",
        )
        g_opts.add_argument(
            "--init-config",
            action="store_true",
            help="Write the effective settings to the config file and exit.",
        )

        g_src = parser.add_argument_group("Geometry Selection")
        g_src.add_argument(
            "-p",
            "--pages",
            default=None,
            metavar="PAGES",
            help="PDF pages to export (e.g., '1,3,5-7' or 'all').",
        )
        g_src.add_argument(
            "-L",
            "--layers",
            default=None,
            metavar="NAMES",
            help="Comma-separated DXF layers to read. (default: all layers)",
        )

        g_out = parser.add_argument_group("Output")
        g_out.add_argument(
            "-o",
            "--output-file",
            default=None,
            metavar="FILE",
            help="Write the CSV here ('-' for stdout). Defaults to <input>.csv.",
        )
        g_out.add_argument(
            "--output-dir",
            default=None,
            metavar="DIR",
            help="Directory for default output files "
            "(falls back to $GRIDCSV_OUTPUT_DIR, then ~/Documents).",
        )
        g_out.add_argument(
            "--encoding",
            default=None,
            help="Text encoding of the output file. (default: utf-8)",
        )
        g_out.add_argument(
            "--bom",
            action="store_true",
            help="Write UTF-8 with a byte order mark (for spreadsheet apps).",
        )
        g_out.add_argument(
            "--delimiter",
            default=None,
            help="Field delimiter, '\\t' for tabs. (default: ',')",
        )
        g_out.add_argument(
            "--preview",
            action="store_true",
            help="Render each reconstructed grid in the terminal.",
        )
        g_out.add_argument(
            "-D",
            "--dry-run",
            action="store_true",
            help="Reconstruct tables without writing any file.",
        )

        g_log = parser.add_argument_group("Logging")
        g_log.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress.",
        )
        g_log.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging (all,api,source,grid,assign,serialize,output,config).",
        )
        g_log.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output.",
        )
        g_log.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Also write logging output to a file.",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        sys.exit(Application(args).run())
    except KeyboardInterrupt:
        log_app.info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        log_app.critical("\nAn unexpected error occurred: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
