#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CSV-Ausgabe der konvertierten Datensätze.

Werte werden unverändert übergeben; Quoting übernimmt das csv-Modul.
"""

import csv
import logging
from typing import Iterable, List

from parser.errors import CSVWriteError

logger = logging.getLogger(__name__)


def write_csv(output_path: str, headers: List[str], rows: Iterable[List[str]]) -> int:
    """
    Schreibt Kopfzeile und Datenzeilen.

    Returns:
        Anzahl geschriebener Datenzeilen

    Raises:
        CSVWriteError: bei Dateisystemfehlern
    """
    count = 0
    try:
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for row in rows:
                writer.writerow(row)
                count += 1
    except OSError as e:
        raise CSVWriteError(output_path, e) from e

    logger.info(f"CSV gespeichert: {output_path} ({count} Zeilen)")
    return count
