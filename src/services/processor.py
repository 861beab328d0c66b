#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Verarbeitung von SDR-Dateien: Einlesen → Erkennen → Parsen → CSV.

Jede Datei wird vollständig im Speicher verarbeitet, Dateien eines
Stapels strikt nacheinander. Fehler einer Datei landen im jeweiligen
ProcessingResult und stoppen den Stapel nicht.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from config.processing_rules import (
    ParseStatus, INPUT_EXTENSION, OUTPUT_SUFFIX
)
from layouts.sdr_layouts import LayoutRegistry, DEFAULT_REGISTRY
from parser.errors import (
    SDRError, UnknownFormat, SDRReadError, FileDecodeError, CSVWriteError
)
from parser.sdr_parser import read_sdr_file, split_lines
from services.completion_lookup import CompletionLookup
from services.csv_writer import write_csv
from services.type_dispatcher import classify, detect_format, get_decoder

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Ergebnis der Verarbeitung einer Datei."""
    input_file: str
    output_file: str = ""
    record_count: int = 0
    format_id: str = ""
    success: bool = False
    error: Optional[SDRError] = None
    status: ParseStatus = ParseStatus.OK
    warnings: List[str] = field(default_factory=list)

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error is not None else ""


def output_path_for(input_path: str, output_dir: str) -> str:
    """COUR9170.txt (auch .TXT) → <output_dir>/COUR9170_parsed.csv"""
    filename = os.path.basename(input_path)
    if filename.lower().endswith(INPUT_EXTENSION):
        filename = filename[:-len(INPUT_EXTENSION)]
    return os.path.join(output_dir, f"{filename}{OUTPUT_SUFFIX}")


def _classify_by_content(
    input_path: str,
    filename: str,
    registry: LayoutRegistry
) -> Optional[str]:
    """Erkennung über die erste Datenzeile; Lesefehler führen zu None."""
    try:
        content, _encoding = read_sdr_file(input_path)
    except SDRReadError as e:
        logger.debug(f"Inhaltserkennung für '{filename}' nicht möglich: {e}")
        return None
    lines = split_lines(content)
    first_line = lines[0][1] if lines else ""
    return classify(filename, first_line, registry)


def process_file(
    input_path: str,
    output_dir: str,
    with_completion: bool = False,
    registry: Optional[LayoutRegistry] = None,
    detect_content: bool = False
) -> ProcessingResult:
    """
    Verarbeitet eine einzelne SDR-Datei.

    Args:
        input_path: Pfad zur Eingabedatei
        output_dir: Zielverzeichnis für die CSV-Datei
        with_completion: COMP-Abgleich für COUR-Dateien aktivieren
        registry: Layout-Registry, Standard ist DEFAULT_REGISTRY
        detect_content: Ohne Kennzeichen im Namen die erste Zeile prüfen

    Returns:
        ProcessingResult (wirft nicht)
    """
    registry = registry or DEFAULT_REGISTRY
    result = ProcessingResult(input_file=input_path)

    filename = os.path.basename(input_path)
    format_id = detect_format(filename, registry)
    if format_id is None and detect_content:
        format_id = _classify_by_content(input_path, filename, registry)
    if format_id is None:
        result.error = UnknownFormat(None)
        result.status = ParseStatus.UNKNOWN_FORMAT
        logger.warning(f"Dateityp nicht erkannt: {filename}")
        return result
    result.format_id = format_id

    try:
        decoder = get_decoder(format_id, registry)
        content, encoding = read_sdr_file(input_path)
        records = decoder.parse(content)
    except UnknownFormat as e:
        result.error = e
        result.status = ParseStatus.UNKNOWN_FORMAT
        return result
    except SDRReadError as e:
        result.error = e
        result.status = ParseStatus.READ_ERROR
        logger.error(f"Lesefehler: {e}")
        return result
    except FileDecodeError as e:
        result.error = e
        result.status = ParseStatus.DECODE_ERROR
        logger.error(f"'{filename}' nicht konvertiert: {e}")
        return result

    result.record_count = len(records)

    lookup: Optional[CompletionLookup] = None
    if with_completion and format_id == "COUR":
        lookup = CompletionLookup(registry)
        lookup.load(input_path)
        result.warnings.extend(lookup.warnings)
        logger.debug(f"COMP-Abgleich: {lookup.stats()}")

    if lookup is not None:
        rows = [
            decoder.row_for(
                record,
                lookup.lookup(
                    record.get_field_value("ID"),
                    record.get_field_value("COURSE"),
                    record.get_field_value("CRS_SRT"),
                ),
            )
            for record in records
        ]
    else:
        rows = [decoder.row_for(record) for record in records]

    output_path = output_path_for(input_path, output_dir)
    result.output_file = output_path
    try:
        write_csv(output_path, decoder.headers(with_completion=lookup is not None), rows)
    except CSVWriteError as e:
        result.error = e
        result.status = ParseStatus.WRITE_ERROR
        logger.error(str(e))
        return result

    result.success = True
    logger.info(
        f"'{filename}' → '{os.path.basename(output_path)}': "
        f"{result.record_count} Records ({format_id}, {encoding})"
    )
    return result


def process_files(
    input_paths: List[str],
    output_dir: str,
    with_completion: bool = False,
    registry: Optional[LayoutRegistry] = None,
    detect_content: bool = False
) -> List[ProcessingResult]:
    """Verarbeitet mehrere Dateien nacheinander; jede Datei unabhängig."""
    results = []
    for path in input_paths:
        results.append(process_file(path, output_dir, with_completion, registry, detect_content))

    failed = sum(1 for r in results if not r.success)
    logger.info(f"Stapel abgeschlossen: {len(results) - failed} erfolgreich, {failed} fehlgeschlagen")
    return results


def find_sdr_files(
    directory: str,
    format_id: Optional[str] = None,
    registry: Optional[LayoutRegistry] = None
) -> List[str]:
    """
    Sucht SDR-Dateien (*.txt) in einem Verzeichnis.

    Ohne format_id werden alle Typen in Erkennungs-Priorität gesammelt.
    Eine Datei taucht nur einmal auf, beim ersten passenden Typ.
    """
    registry = registry or DEFAULT_REGISTRY
    format_ids = [format_id.upper()] if format_id else registry.format_ids()

    names = sorted(
        name for name in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, name))
        and name.lower().endswith(INPUT_EXTENSION)
    )

    found: List[str] = []
    for fid in format_ids:
        for name in names:
            path = os.path.join(directory, name)
            if fid in name.upper() and path not in found:
                found.append(path)
    return found


def format_result_line(result: ProcessingResult) -> str:
    """Einzeilige Zusammenfassung für die Ausgabe."""
    name = os.path.basename(result.input_file)
    if result.success:
        return (
            f"✓ {name} → {os.path.basename(result.output_file)} "
            f"({result.record_count} records)"
        )
    return f"✗ {name} - ERROR: {result.error_message}"
