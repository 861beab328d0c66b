#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SDR Konverter - Haupteinstiegspunkt

Wandelt SDR-Dateien (STUD, COUR, CREG, COMP, QUAL) in CSV um.
COUR-Dateien werden optional mit dem Abschlusskennzeichen aus der
COMP-Datei im selben Verzeichnis ergänzt.
"""

import argparse
import os
import sys
import logging
from logging.handlers import RotatingFileHandler
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

# Pfad zum src-Verzeichnis
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from layouts.sdr_layouts import get_all_formats, get_layout_info
from services.processor import (
    process_files, find_sdr_files, format_result_line
)


def setup_logging(verbose: bool = False):
    """Konfiguriert Logging mit Console + File Output."""
    log_dir = os.path.join(_src_dir, "..", "logs")
    log_file = os.path.join(log_dir, "sdr_converter.log")

    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Bereits konfiguriert (z.B. durch pytest oder einen Aufrufer)
        return
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    # Console nur für Warnungen, die Ergebniszeilen gehen auf stdout
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root_logger.addHandler(console_handler)

    # File Handler mit Rotation (5 MB, 3 Backups)
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.debug(f"File-Logging aktiviert: {log_file}")
    except (OSError, PermissionError) as e:
        root_logger.warning(f"File-Logging nicht moeglich, nur Console: {e}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert SDR fixed-width files to CSV")
    parser.add_argument("paths", nargs="*", help="SDR files to convert")
    parser.add_argument("--all", action="store_true", help="convert all SDR files in --input-dir")
    parser.add_argument("--type", dest="format_id", choices=get_all_formats(),
                        help="convert all files of one type in --input-dir")
    parser.add_argument("--input-dir", default=".", help="directory scanned by --all/--type")
    parser.add_argument("--output-dir", default=".", help="directory for the CSV files")
    parser.add_argument("--no-completion", action="store_true",
                        help="do not add the completion indicator to COUR files")
    parser.add_argument("--detect-content", action="store_true",
                        help="recognise unnamed course enrolment files by their first line")
    parser.add_argument("--show-layout", metavar="TYPE", choices=get_all_formats(),
                        help="print the field layout of a file type and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Hauptfunktion; gibt den Exit-Code zurück."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.show_layout:
        print(get_layout_info(args.show_layout))
        return 0

    paths = list(args.paths)
    if args.all or args.format_id:
        if not os.path.isdir(args.input_dir):
            print(f"Input directory not found: {args.input_dir}")
            logger.error(f"Eingabeverzeichnis nicht gefunden: {args.input_dir}")
            return 1
        paths.extend(find_sdr_files(args.input_dir, args.format_id))

    if not paths:
        print("No SDR files to process.")
        return 1

    results = process_files(
        paths,
        args.output_dir,
        with_completion=not args.no_completion,
        detect_content=args.detect_content,
    )

    for result in results:
        print(format_result_line(result))
        for warning in result.warnings:
            print(f"  ! {warning}")

    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
