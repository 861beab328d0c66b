#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Fehlerklassen fuer das Einlesen von SDR-Dateien.

Alle Fehler erben von SDRError, damit der Orchestrator sie gesammelt
abfangen und an das ProcessingResult haengen kann. Die Meldungen sind
fuer den Anwender gedacht (englisch, wie die Dateispezifikation).
"""

from typing import Optional


class SDRError(Exception):
    """Basisklasse aller SDR-Fehler."""


class UnknownFormat(SDRError):
    """Wird ausgeloest wenn kein Layout zum Format-Kennzeichen existiert."""
    def __init__(self, format_id: Optional[str], revision: Optional[str] = None):
        self.format_id = format_id
        self.revision = revision
        if format_id is None:
            message = "unable to determine file type"
        elif revision is not None:
            message = f"unsupported file type: {format_id} (revision {revision})"
        else:
            message = f"unsupported file type: {format_id}"
        super().__init__(message)


class LineLengthMismatch(SDRError):
    """Zeilenlaenge weicht ab (nur bei strikter Zeilen-Policy)."""
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"invalid line length: expected {expected}, got {actual}")


class FieldOutOfBounds(SDRError):
    """Feldbereich liegt ausserhalb der (ggf. aufgefuellten) Zeile."""
    def __init__(self, field: str, start: int, end: int, line_length: int):
        self.field = field
        self.start = start
        self.end = end
        self.line_length = line_length
        super().__init__(
            f"field {field}: position out of bounds "
            f"(start: {start}, end: {end}, line length: {line_length})"
        )


class RequiredFieldEmpty(SDRError):
    """Pflichtfeld ist nach dem Trimmen leer."""
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"required field {field} is empty")


class FileDecodeError(SDRError):
    """Eine Zeile der Datei konnte nicht dekodiert werden."""
    def __init__(self, line_number: int, cause: SDRError):
        self.line_number = line_number
        self.cause = cause
        super().__init__(f"error parsing line {line_number}: {cause}")


class SDRReadError(SDRError):
    """Datei konnte nicht gelesen werden."""
    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to read input file {path}: {cause}")


class SecondaryFileError(SDRError):
    """
    Problem mit der COMP-Begleitdatei.

    Wird nie an den Aufrufer durchgereicht, sondern vom Lookup in eine
    Warnung umgewandelt.
    """
    def __init__(self, path: str, reason: str, cause: Optional[Exception] = None):
        self.path = path
        self.reason = reason
        self.cause = cause
        if cause is not None:
            message = f"Failed to {reason} COMP file ({path}): {cause}"
        else:
            message = f"Failed to {reason} COMP file ({path})"
        super().__init__(message)


class CSVWriteError(SDRError):
    """CSV-Ausgabe konnte nicht geschrieben werden."""
    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to write CSV {path}: {cause}")
