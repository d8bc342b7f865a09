from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, apply_env_overrides, load_config
from ..errors import SpreadsheetError, describe
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.config_models import LoaderConfig
from ..services.grid import load_workbook_file, unwrap_sheet
from ..services.orchestrator import ProcessingError, process_all, scan_workbooks
from ..services.summary import render_summary_line

"""CLI entrypoint: ``python -m sheetmap.cli [options] PATH...``.

Loads each workbook with the configured decode policy, reports the first
failure per file with its location, and prints a SUMMARY line.

Exit codes: 0 all files loaded, 2 some files failed, 1 fatal (config/paths).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

SAMPLE_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetmap", description="Spreadsheet loader / checker")
    p.add_argument("paths", nargs="+", type=Path, help="Workbook files or directories")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--sheet", action="append", dest="sheets", default=None, help="Only load this sheet (repeatable)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet shapes & first rows then exit")
    return p.parse_args(argv)


def _load_env_file(path: Path) -> None:
    """Load .env so SHEETMAP_* overrides can live next to the data."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _resolve_config(args: argparse.Namespace) -> LoaderConfig:
    if args.config is not None:
        cfg = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = LoaderConfig()
    cfg = apply_env_overrides(cfg)
    if args.sheets:
        cfg = replace(cfg, target_sheets=tuple(args.sheets))
    return cfg


def _inspect_data(paths: list[Path], cfg: LoaderConfig) -> int:
    for f in paths:
        print(f"FILE: {f.name}")
        try:
            workbook = load_workbook_file(f, cfg.decode, cfg.target_sheets)
        except SpreadsheetError as e:
            print(f"  read_error: {describe(e)}")
            continue
        for sheet in workbook.value:
            name = sheet.origin.sheet_name if sheet.origin is not None else "?"
            try:
                rows = unwrap_sheet(sheet)
            except SpreadsheetError as e:
                print(f"  SHEET: {name} error={describe(e)}")
                continue
            width = max((len(r) for r in rows), default=0)
            print(f"  SHEET: {name} rows={len(rows)} cols={width}")
            if not cfg.keep_titles and rows:
                print("    titles=", _printable(rows[0]))
                rows = rows[1:]
            print("    sample_rows=", [_printable(r) for r in rows[:SAMPLE_ROWS]])
    return EXIT_SUCCESS_ALL


def _printable(row: list[Any]) -> list[Any]:
    return [v.isoformat() if hasattr(v, "isoformat") else v for v in row]


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when argv is None (tests pass [] explicitly)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        paths = scan_workbooks(args.paths)
    except ProcessingError as e:
        logger.error(f"paths: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(paths, cfg)

    logger.info(
        f"decode error_cells={cfg.decode.error_cell_handling.value} "
        f"formula_cells={cfg.decode.formula_cell_handling.value} files={len(paths)}"
    )
    result = process_all(paths, cfg)

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
