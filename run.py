#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Startskript fuer den SDR Konverter.

Verwendung:
    python run.py COUR9170.txt            -- Einzelne Datei konvertieren
    python run.py --all --input-dir daten -- Alle SDR-Dateien eines Verzeichnisses
    python run.py --show-layout COMP      -- Feldlayout anzeigen
"""

import sys
import os

# Fuege src-Verzeichnis zum Python-Pfad hinzu
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from main import main

if __name__ == "__main__":
    sys.exit(main())
