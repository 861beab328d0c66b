#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Abgleich von COUR-Datensätzen mit der COMP-Begleitdatei.

Die COMP-Datei wird unabhängig geparst und über den Schlüssel
(ID, COURSE, CRS_SRT) indiziert. Probleme mit der Begleitdatei führen
nie zum Abbruch der eigentlichen Verarbeitung: es wird eine Warnung
gesammelt und jede Abfrage liefert den Platzhalter "N/A".
"""

import os
import logging
from typing import Dict, List, Optional

from config.processing_rules import (
    SENTINEL, COMPOSITE_KEY_SEPARATOR, COMPLETION_FIELD, INPUT_EXTENSION
)
from layouts.sdr_layouts import LayoutRegistry, DEFAULT_REGISTRY
from parser.errors import SDRError, SDRReadError, SecondaryFileError
from parser.sdr_parser import parse_content, read_sdr_file

logger = logging.getLogger(__name__)


PRIMARY_PREFIX = "COUR"
COMPANION_PREFIXES = ("COMP", "comp", "Comp")


def build_composite_key(student_id: str, course: str, start_date: str) -> str:
    """Zusammengesetzter Schlüssel aus ID, COURSE und CRS_SRT (getrimmt)."""
    return COMPOSITE_KEY_SEPARATOR.join(
        (
            (student_id or "").strip(),
            (course or "").strip(),
            (start_date or "").strip(),
        )
    )


def companion_candidates(primary_path: str) -> List[str]:
    """
    Mögliche Dateinamen der COMP-Begleitdatei, in Suchreihenfolge.

    COUR9170.txt → COMP9170.txt, comp9170.txt, Comp9170.txt,
    danach COMP.txt, comp.txt, Comp.txt. Eine Endung wie ".TXT" wird
    zuerst in der Schreibweise der COUR-Datei versucht, dann als ".txt".
    """
    name = os.path.basename(primary_path)
    upper = name.upper()

    extensions = [INPUT_EXTENSION]
    suffix = ""
    if upper.endswith(INPUT_EXTENSION.upper()):
        primary_extension = name[len(name) - len(INPUT_EXTENSION):]
        if primary_extension != INPUT_EXTENSION:
            extensions.insert(0, primary_extension)
        if upper.startswith(PRIMARY_PREFIX):
            suffix = name[len(PRIMARY_PREFIX):len(name) - len(INPUT_EXTENSION)]

    names: List[str] = []
    for stem in (suffix, ""):
        for extension in extensions:
            for prefix in COMPANION_PREFIXES:
                candidate = f"{prefix}{stem}{extension}"
                if candidate not in names:
                    names.append(candidate)
    return names


def find_companion_file(primary_path: str) -> Optional[str]:
    """Sucht die COMP-Datei im Verzeichnis der COUR-Datei. Erster Treffer gewinnt."""
    directory = os.path.dirname(os.path.abspath(primary_path))
    for name in companion_candidates(primary_path):
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


class CompletionLookup:
    """
    Index der Abschlusskennzeichen aus einer COMP-Datei.

    Lebensdauer: ein Verarbeitungslauf. Der Index wird pro COUR-Datei
    neu aufgebaut und nie gespeichert.

    Usage:
        lookup = CompletionLookup()
        lookup.load("/daten/COUR9170.txt")   # sucht COMP9170.txt
        status = lookup.lookup("917000047", "2102-530", "28092023")
        for warning in lookup.warnings:
            print(warning)
    """

    def __init__(self, registry: Optional[LayoutRegistry] = None):
        self._registry = registry or DEFAULT_REGISTRY
        self._index: Dict[str, str] = {}
        self._loaded = False
        self._warnings: List[str] = []
        self.source_path: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def warnings(self) -> List[str]:
        """Warnungen beim Laden, in Reihenfolge des Auftretens."""
        return list(self._warnings)

    def load(self, primary_path: str) -> None:
        """
        Aktiviert den Abgleich für eine COUR-Datei.

        Wirft nie; alle Probleme mit der COMP-Datei werden zu Warnungen.
        """
        self._index = {}
        comp_path = find_companion_file(primary_path)
        if comp_path is None:
            self._degrade(
                "No COMP file found in the same directory - "
                "completion data will show as N/A"
            )
            return

        self.source_path = comp_path
        try:
            content, _encoding = read_sdr_file(comp_path)
        except SDRReadError as e:
            self._degrade(f"{SecondaryFileError(comp_path, 'read', e.cause)} - completion data will show as N/A")
            return

        self.load_content(content, source=comp_path)

    def load_content(self, content: str, source: str = "<content>") -> None:
        """Baut den Index aus bereits gelesenem COMP-Inhalt auf."""
        self._index = {}
        try:
            layout = self._registry.layout_for("COMP")
            records = parse_content(content, layout)
        except SDRError as e:
            self._degrade(f"{SecondaryFileError(source, 'parse', e)} - completion data will show as N/A")
            return

        for record in records:
            key = build_composite_key(
                record.get_field_value("ID"),
                record.get_field_value("COURSE"),
                record.get_field_value("CRS_SRT"),
            )
            # Doppelte Schlüssel: letzter Eintrag gewinnt
            self._index[key] = record.get_field_value(COMPLETION_FIELD)

        self._loaded = True
        logger.info(f"COMP-Abgleich geladen: {len(self._index)} Schlüssel aus {source}")

    def _degrade(self, warning: str) -> None:
        self._warnings.append(warning)
        # Als geladen markieren: Abfragen sind definiert, liefern aber N/A
        self._loaded = True
        logger.warning(warning)

    def lookup(self, student_id: str, course: str, start_date: str) -> str:
        """Abschlusskennzeichen oder SENTINEL, wirft nie."""
        if not self._loaded:
            return SENTINEL
        key = build_composite_key(student_id, course, start_date)
        return self._index.get(key, SENTINEL)

    def stats(self) -> Dict[str, object]:
        """Kurze Statistik für Logging und Anzeige."""
        return {
            "loaded": self._loaded,
            "total_records": len(self._index),
            "warnings_count": len(self._warnings),
        }

    def __len__(self) -> int:
        return len(self._index)
