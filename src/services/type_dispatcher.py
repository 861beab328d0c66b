#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dateityp-Erkennung und Auswahl des passenden Decoders.

Die Erkennung läuft über den Dateinamen (Teilstring, ohne Beachtung der
Groß-/Kleinschreibung) in fester Priorität: STUD, COUR, CREG, COMP, QUAL.
Ein Name wie "COUR_CREG.txt" wird deshalb immer als COUR erkannt.
"""

import logging
from typing import List, Optional

from config.processing_rules import SPACER_COLUMNS, COMPLETION_HEADER
from layouts.sdr_layouts import LayoutRegistry, RecordLayout, DEFAULT_REGISTRY
from parser.sdr_parser import ParsedRecord, parse_content

logger = logging.getLogger(__name__)


def detect_format(filename: str, registry: Optional[LayoutRegistry] = None) -> Optional[str]:
    """
    Bestimmt das Format-Kennzeichen aus dem Dateinamen.

    Returns:
        STUD/COUR/CREG/COMP/QUAL oder None, wenn kein Kennzeichen passt
    """
    registry = registry or DEFAULT_REGISTRY
    upper = (filename or "").upper()
    for format_id in registry.format_ids():
        if format_id in upper:
            return format_id
    return None


def looks_like_course_enrolment(line: str, registry: Optional[LayoutRegistry] = None) -> bool:
    """
    Strukturelle Prüfung einer Zeile auf COUR-Format.

    Länge muss exakt passen, Stelle 1-4 numerisch (Provider Code),
    Stelle 5-14 (Student ID) und 15-20 (Qualification Code) nicht leer.
    """
    registry = registry or DEFAULT_REGISTRY
    layout = registry.layout_for("COUR")
    if len(line) != layout.line_length:
        return False

    instit = line[:4].strip()
    # Nur ASCII-Ziffern 0-9
    if len(instit) != 4 or not (instit.isascii() and instit.isdigit()):
        return False
    if not line[4:14].strip():
        return False
    return bool(line[14:20].strip())


def classify(
    filename: str,
    first_line: str = "",
    registry: Optional[LayoutRegistry] = None
) -> Optional[str]:
    """Dateiname zuerst, danach die COUR-Strukturprüfung als Rückfallebene."""
    format_id = detect_format(filename, registry)
    if format_id is None and first_line and looks_like_course_enrolment(first_line, registry):
        logger.debug(f"'{filename}': COUR anhand der Zeilenstruktur erkannt")
        format_id = "COUR"
    return format_id


class RecordDecoder:
    """
    Bindet ein Layout an Parse- und Zeilen-Funktionen.

    Jeder Dateityp liefert über row_for() seine Feldwerte in
    Layout-Reihenfolge; der CSV-Writer braucht keine Sonderfälle.
    """

    def __init__(self, layout: RecordLayout):
        self.layout = layout

    @property
    def format_id(self) -> str:
        return self.layout.format_id

    @property
    def description(self) -> str:
        return self.layout.description

    @property
    def expected_line_length(self) -> int:
        return self.layout.line_length

    def headers(self, with_completion: bool = False) -> List[str]:
        headers = self.layout.headers()
        if with_completion:
            headers.extend([""] * SPACER_COLUMNS)
            headers.append(COMPLETION_HEADER)
        return headers

    def parse(self, content: str) -> List[ParsedRecord]:
        return parse_content(content, self.layout)

    def row_for(self, record: ParsedRecord, completion: Optional[str] = None) -> List[str]:
        row = [record.get_field_value(name) for name in self.layout.field_names()]
        if completion is not None:
            row.extend([""] * SPACER_COLUMNS)
            row.append(completion)
        return row


def get_decoder(format_id: str, registry: Optional[LayoutRegistry] = None) -> RecordDecoder:
    """
    Liefert den Decoder für ein Format-Kennzeichen.

    Raises:
        UnknownFormat: wenn kein Layout registriert ist
    """
    registry = registry or DEFAULT_REGISTRY
    return RecordDecoder(registry.layout_for(format_id))
