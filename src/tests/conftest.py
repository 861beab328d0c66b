"""
Gemeinsame Fixtures fuer die SDR-Tests.

Testzeilen werden ueber build_line() aus Feldwerten erzeugt, damit die
Spaltenpositionen immer zum Layout passen.
"""

import os
import sys

import pytest

# src/ zum Path hinzufügen
_src_dir = os.path.join(os.path.dirname(__file__), '..')
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from layouts.sdr_layouts import get_layout
from parser.sdr_parser import build_line


# Beispielzeile aus einer echten COMP-Lieferung (52 Zeichen, Revision 1)
COMP_SAMPLE_LINE = "9170917000047 2102-530            028092023 12033171"


def cour_values(**overrides):
    values = {
        "INSTIT": "9170",
        "ID": "917000047",
        "QUAL": "NZ2102",
        "COURSE": "2102-530",
        "CRS_SRT": "28092023",
        "CRS_END": "12122023",
        "ATTEND": "I",
        "FUNDING": "01",
        "CATEGORY": "P1",
        "CLASS": "22",
        "NZSCED": "110109",
        "FACTOR": "0.1167",
        "NSN": "123456789",
    }
    values.update(overrides)
    return values


def comp_values(**overrides):
    values = {
        "INSTIT": "9170",
        "ID": "917000047",
        "COURSE": "2102-530",
        "COMPLETE": "2",
        "CRS_SRT": "28092023",
        "CRS_END": "12122023",
    }
    values.update(overrides)
    return values


@pytest.fixture()
def cour_layout():
    return get_layout("COUR")


@pytest.fixture()
def comp_layout():
    return get_layout("COMP")


@pytest.fixture()
def make_cour_line(cour_layout):
    def _make(**overrides):
        return build_line(cour_values(**overrides), cour_layout)
    return _make


@pytest.fixture()
def make_comp_line(comp_layout):
    def _make(**overrides):
        return build_line(comp_values(**overrides), comp_layout)
    return _make


@pytest.fixture()
def write_file(tmp_path):
    def _write(name, lines, newline="\n", encoding="utf-8"):
        path = tmp_path / name
        path.write_bytes(newline.join(lines).encode(encoding))
        return path
    return _write
