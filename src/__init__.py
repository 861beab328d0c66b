# SDR Konverter - Hauptpaket
"""
SDR Konverter: wandelt Fixed-Width-Lieferdateien in CSV um.

Struktur:
- src/layouts/    - Layout-Metadaten der Dateitypen (STUD, COUR, CREG, COMP, QUAL)
- src/parser/     - Parser-Kern für Fixed-Width-Dateien und Fehlerklassen
- src/services/   - Typ-Erkennung, COMP-Abgleich, CSV-Ausgabe, Verarbeitung
- src/config/     - Verarbeitungsregeln (Konstanten, Status-Codes)
- src/main.py     - Haupteinstiegspunkt (Kommandozeile)
"""

__version__ = "0.1.0"
__author__ = "SDR Tool Team"
