#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Zentrale Verarbeitungsregeln fuer die SDR-Konvertierung.

Alle Konstanten, die Parser, Lookup und Orchestrator gemeinsam nutzen,
liegen hier. Es gibt bewusst keine Umgebungsvariablen: das Verhalten
ist pro Lauf fest und reproduzierbar.
"""

from enum import Enum


# =============================================================================
# Lookup / Abgleich mit COMP-Dateien
# =============================================================================

# Platzhalter, wenn kein Abschlusskennzeichen ermittelt werden kann
SENTINEL = "N/A"

# Trenner fuer den zusammengesetzten Schluessel (ID, COURSE, CRS_SRT)
COMPOSITE_KEY_SEPARATOR = "||"

# Spaltenueberschrift fuer das angehaengte Abschlusskennzeichen
COMPLETION_HEADER = "Student Course Completion indicator"

# Leere Trennspalten vor der Abschlussspalte
SPACER_COLUMNS = 2

# Feldname des Abschlusskennzeichens im COMP-Layout (Revision 2)
COMPLETION_FIELD = "COMPLETE"


# =============================================================================
# Dateien
# =============================================================================

INPUT_EXTENSION = ".txt"
OUTPUT_SUFFIX = "_parsed.csv"

# Reihenfolge der Encodings beim Einlesen; utf-8-sig entfernt ein BOM,
# latin-1 kann jedes Byte dekodieren
ENCODINGS_TO_TRY = ("utf-8-sig", "utf-8", "cp1252", "latin-1")


# =============================================================================
# Status-Codes fuer Verarbeitungsergebnisse
# =============================================================================

class ParseStatus(Enum):
    """Ergebnis-Status einer Dateiverarbeitung."""
    OK = "OK"
    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    READ_ERROR = "READ_ERROR"
    DECODE_ERROR = "DECODE_ERROR"
    WRITE_ERROR = "WRITE_ERROR"


_PARSE_STATUS_DESCRIPTIONS = {
    ParseStatus.OK: "Datei erfolgreich konvertiert",
    ParseStatus.UNKNOWN_FORMAT: "Dateityp konnte nicht bestimmt werden",
    ParseStatus.READ_ERROR: "Datei konnte nicht gelesen werden",
    ParseStatus.DECODE_ERROR: "Datei enthaelt ungueltige Datensaetze",
    ParseStatus.WRITE_ERROR: "CSV-Datei konnte nicht geschrieben werden",
}


def get_parse_status_description(status: ParseStatus) -> str:
    """Gibt die Beschreibung zu einem Status zurueck."""
    return _PARSE_STATUS_DESCRIPTIONS.get(status, status.value)
