#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SDR Parser

Generischer Parser für SDR-Datensätze (Fixed-Width-Format).
Der Parser nutzt die Layout-Metadaten aus sdr_layouts, um Felder
aus Zeilen zu extrahieren.

Hauptfunktionen:
- parse_field(): Einzelnes Feld aus einer Zeile extrahieren
- parse_record(): Komplette Zeile parsen
- parse_content(): Dateiinhalt parsen (fail-fast, keine Teilergebnisse)
- parse_file(): Ganze Datei einlesen und parsen
- build_line_from_record(): Geparstes Record zurück in Fixed-Width-Zeile umwandeln
"""

import os
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config.processing_rules import ENCODINGS_TO_TRY
from layouts.sdr_layouts import (
    RecordLayout, FieldLayout,
    LINE_POLICY_STRICT, BOUNDS_STRICT, TRIM_RIGHT
)
from parser.errors import (
    SDRError, LineLengthMismatch, FieldOutOfBounds, RequiredFieldEmpty,
    FileDecodeError, SDRReadError
)


# Logger konfigurieren
logger = logging.getLogger(__name__)


# =============================================================================
# Datenklassen für geparste Datensätze
# =============================================================================

@dataclass(frozen=True)
class ParsedRecord:
    """Ein geparstes SDR-Record (eine Zeile). Unveränderlich."""
    line_number: int
    format_id: str
    fields: Mapping[str, str]

    def __post_init__(self):
        # Eigene Kopie, damit der Aufrufer das Record nicht nachträglich ändert
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self):
        return hash((self.line_number, self.format_id, tuple(self.fields.items())))

    def get_field_value(self, field_name: str, default: str = "") -> str:
        """Gibt den Wert eines Feldes zurück."""
        return self.fields.get(field_name, default)

    def values(self) -> List[str]:
        """Feldwerte in Layout-Reihenfolge."""
        return list(self.fields.values())

    def to_dict(self) -> Dict[str, str]:
        """Konvertiert das Record in ein Dictionary."""
        return dict(self.fields)


@dataclass
class ParsedFile:
    """Eine geparste SDR-Datei."""
    filepath: str
    filename: str
    encoding: str
    format_id: str
    total_lines: int
    records: List[ParsedRecord] = field(default_factory=list)


# =============================================================================
# Parsing-Funktionen
# =============================================================================

def normalize_line(raw_line: str, layout: RecordLayout) -> str:
    """
    Bringt eine Zeile auf die erwartete Länge.

    Bei Policy "pad" wird mit Leerzeichen aufgefüllt bzw. abgeschnitten,
    bei "strict" muss die Länge exakt stimmen.

    Raises:
        LineLengthMismatch: nur bei strikter Policy
    """
    expected = layout.line_length

    if layout.line_policy == LINE_POLICY_STRICT:
        if len(raw_line) != expected:
            raise LineLengthMismatch(expected, len(raw_line))
        return raw_line

    # Fehlende Leerzeichen am Zeilenende sind häufig
    if len(raw_line) < expected:
        return raw_line.ljust(expected)
    # Überhang am Zeilenende ignorieren
    if len(raw_line) > expected:
        return raw_line[:expected]
    return raw_line


def parse_field(
    line: str,
    field_def: FieldLayout,
    layout: RecordLayout
) -> str:
    """
    Extrahiert ein einzelnes Feld aus einer (normalisierten) Zeile.

    Args:
        line: Die Zeile nach normalize_line()
        field_def: Die Felddefinition mit Start und Länge
        layout: Das Layout (liefert Bereichs-Policy und Trim-Modus)

    Returns:
        Der getrimmte Feldwert

    Raises:
        FieldOutOfBounds: Feld liegt außerhalb der Zeile (nur strikte Policy)
        RequiredFieldEmpty: Pflichtfeld ist leer
    """
    # Positionen sind 1-basiert, Python ist 0-basiert
    start = field_def.start - 1
    end = start + field_def.length

    if end > len(line):
        if layout.bounds_policy == BOUNDS_STRICT:
            raise FieldOutOfBounds(field_def.name, start, end, len(line))
        value = ""
    else:
        raw_value = line[start:end]
        if layout.trim_mode == TRIM_RIGHT:
            value = raw_value.rstrip()
        else:
            value = raw_value.strip()

    if field_def.required and value.strip() == "":
        raise RequiredFieldEmpty(field_def.name)

    return value


def parse_record(raw_line: str, layout: RecordLayout, line_number: int = 0) -> ParsedRecord:
    """
    Parst eine komplette SDR-Zeile anhand des Layouts.

    Args:
        raw_line: Die Rohzeile (ohne Zeilenende)
        layout: Das Layout des Dateityps
        line_number: Zeilennummer in der Datei (für Fehlerberichte)

    Returns:
        ParsedRecord mit allen Feldern in Layout-Reihenfolge

    Raises:
        LineLengthMismatch, FieldOutOfBounds, RequiredFieldEmpty
    """
    line = normalize_line(raw_line, layout)

    values: Dict[str, str] = {}
    for field_def in layout.fields:
        values[field_def.name] = parse_field(line, field_def, layout)

    return ParsedRecord(
        line_number=line_number,
        format_id=layout.format_id,
        fields=values,
    )


def split_lines(content: str) -> List[Tuple[int, str]]:
    """
    Zerlegt den Dateiinhalt in nummerierte Zeilen.

    CRLF und einzelnes CR werden zu LF. Leerzeilen am Anfang und Ende
    werden verworfen, die Nummerierung (1-basiert) bezieht sich auf den
    so gekürzten Inhalt.
    """
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    lines = content.split("\n")

    first = 0
    while first < len(lines) and lines[first].strip() == "":
        first += 1
    last = len(lines)
    while last > first and lines[last - 1].strip() == "":
        last -= 1

    return [
        (line_number, line)
        for line_number, line in enumerate(lines[first:last], start=1)
    ]


def parse_content(content: str, layout: RecordLayout) -> List[ParsedRecord]:
    """
    Parst den kompletten Inhalt einer Datei.

    Der erste fehlerhafte Datensatz bricht die ganze Datei ab; es werden
    keine Teilergebnisse zurückgegeben.

    Raises:
        FileDecodeError: mit Zeilennummer und eigentlicher Ursache
    """
    records: List[ParsedRecord] = []

    for line_number, raw_line in split_lines(content):
        # Leere Zeilen überspringen
        if raw_line.strip() == "":
            continue

        try:
            records.append(parse_record(raw_line, layout, line_number))
        except SDRError as e:
            logger.warning(f"{layout.format_id} Zeile {line_number}: {e}")
            raise FileDecodeError(line_number, e) from e

    return records


def read_sdr_file(filepath: str, encoding: Optional[str] = None) -> Tuple[str, str]:
    """
    Liest eine SDR-Datei komplett in den Speicher.

    Args:
        filepath: Pfad zur Datei
        encoding: Bevorzugtes Encoding, danach die Fallback-Kette

    Returns:
        Tuple (Inhalt, verwendetes Encoding)

    Raises:
        SDRReadError: wenn die Datei nicht gelesen werden kann
    """
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise SDRReadError(filepath, e) from e

    encodings_to_try = ([encoding] if encoding else []) + list(ENCODINGS_TO_TRY)

    for enc in encodings_to_try:
        try:
            return raw.decode(enc), enc
        except (UnicodeDecodeError, LookupError):
            continue

    # Nicht erreichbar solange latin-1 in der Kette ist
    return raw.decode("cp1252", errors="replace"), "cp1252 (mit Ersetzung)"


def parse_file(
    filepath: str,
    layout: RecordLayout,
    encoding: Optional[str] = None
) -> ParsedFile:
    """
    Liest und parst eine komplette SDR-Datei.

    Raises:
        SDRReadError, FileDecodeError
    """
    content, used_encoding = read_sdr_file(filepath, encoding)
    records = parse_content(content, layout)

    parsed_file = ParsedFile(
        filepath=filepath,
        filename=os.path.basename(filepath),
        encoding=used_encoding,
        format_id=layout.format_id,
        total_lines=len(split_lines(content)),
        records=records,
    )

    logger.info(
        f"Datei '{parsed_file.filename}' geparst: "
        f"{len(records)} Records ({layout.format_id}, {used_encoding})"
    )
    return parsed_file


# =============================================================================
# Serialisierung (Record → Fixed-Width-Zeile)
# =============================================================================

def format_field_value(value: Any, field_def: FieldLayout) -> str:
    """
    Formatiert einen Feldwert für die Ausgabe als Fixed-Width.

    Linksbündig, mit Leerzeichen aufgefüllt, auf Feldlänge gekürzt.
    """
    formatted = "" if value is None else str(value)
    return formatted.ljust(field_def.length)[:field_def.length]


def build_line_from_record(record: ParsedRecord, layout: RecordLayout) -> str:
    """
    Baut aus einem ParsedRecord eine Fixed-Width-Zeile.

    Nicht belegte Positionen bleiben Leerzeichen.
    """
    return build_line(record.fields, layout)


def build_line(values: Mapping[str, Any], layout: RecordLayout) -> str:
    """Baut eine Fixed-Width-Zeile aus einem Feldname→Wert-Mapping."""
    line_length = layout.line_length
    line_chars = [" "] * line_length

    for field_def in layout.fields:
        formatted = format_field_value(values.get(field_def.name), field_def)

        # In Zeile eintragen (1-basierter Offset → 0-basiert)
        start = field_def.start - 1
        for i, char in enumerate(formatted):
            if start + i < line_length:
                line_chars[start + i] = char

    return "".join(line_chars)
