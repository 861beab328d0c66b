#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Erstellt einen Satz Beispiel-SDR-Dateien zum Testen.

Erzeugt STUD9170.txt, COUR9170.txt, CREG9170.txt, COMP9170.txt und
QUAL9170.txt im Zielverzeichnis (Standard: testdata/sample).
"""

import os
import sys

# Pfad zum src-Verzeichnis hinzufügen
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from layouts.sdr_layouts import get_layout
from parser.sdr_parser import build_line


PROVIDER = "9170"

COURSES = [
    ("2102-530", "Food Product Development", "2"),
    ("2102-510", "Prepare, cook and finish stocks, soups and sauces", "2"),
    ("2102-520", "Food Safety in Catering", "3"),
    ("2102-240", "Introduction to nutrition", None),  # ohne COMP-Eintrag
]

STUDENTS = [
    ("917000047", "F", "15051999", "123456789"),
    ("917000048", "M", "02111987", "987654321"),
]


def _student_lines():
    layout = get_layout("STUD")
    for student_id, gender, dob, nsn in STUDENTS:
        yield build_line({
            "INSTIT": PROVIDER,
            "ID": student_id,
            "GENDER": gender,
            "DOB": dob,
            "NAMEID": "00001",
            "CITIZEN": "NZL",
            "NSN": nsn,
            "ETHNIC": "111",
        }, layout)


def _course_register_lines():
    layout = get_layout("CREG")
    for course, title, _ in COURSES:
        yield build_line({
            "INSTIT": PROVIDER,
            "COURSE": course,
            "CTITLE": title,
            "QUAL": "NZ2102",
            "CLASS": "01",
            "NZSCED": "110109",
            "NZQCFLEVEL": "4",
            "CREDIT": " 12",
            "CATEGORY": "P1",
            "FACTOR": "0.1000",
            "INTERNET": "X",
            "EMB_LIT_NUM": "N",
        }, layout)


def _course_enrolment_lines():
    layout = get_layout("COUR")
    for student_id, _, _, nsn in STUDENTS:
        for course, _, _ in COURSES:
            yield build_line({
                "INSTIT": PROVIDER,
                "ID": student_id,
                "QUAL": "NZ2102",
                "COURSE": course,
                "CRS_SRT": "28092023",
                "CRS_END": "12122023",
                "ATTEND": "I",
                "FUNDING": "01",
                "CATEGORY": "P1",
                "CLASS": "01",
                "NZSCED": "110109",
                "FACTOR": "0.1000",
                "NSN": nsn,
            }, layout)


def _completion_lines():
    layout = get_layout("COMP")
    for student_id, _, _, nsn in STUDENTS:
        for course, _, complete in COURSES:
            if complete is None:
                continue
            yield build_line({
                "INSTIT": PROVIDER,
                "ID": student_id,
                "COURSE": course,
                "COMPLETE": complete,
                "CRS_SRT": "28092023",
                "CRS_END": "12122023",
                "NSN": nsn,
            }, layout)


def _qualification_lines():
    layout = get_layout("QUAL")
    for student_id, _, _, nsn in STUDENTS:
        yield build_line({
            "INSTIT": PROVIDER,
            "ID": student_id,
            "NSN": nsn,
            "QUAL": "NZ2102",
            "MAIN_1": "0101",
            "YR_REQ_MET": "2023",
        }, layout)


def create_test_files(output_dir: str):
    """Schreibt alle Beispieldateien (CRLF, wie aus dem Studentenverwaltungssystem)."""
    os.makedirs(output_dir, exist_ok=True)

    files = {
        f"STUD{PROVIDER}.txt": list(_student_lines()),
        f"COUR{PROVIDER}.txt": list(_course_enrolment_lines()),
        f"CREG{PROVIDER}.txt": list(_course_register_lines()),
        f"COMP{PROVIDER}.txt": list(_completion_lines()),
        f"QUAL{PROVIDER}.txt": list(_qualification_lines()),
    }

    for name, lines in files.items():
        path = os.path.join(output_dir, name)
        with open(path, 'w', encoding='utf-8', newline='\r\n') as f:
            for line in lines:
                f.write(line + '\n')
        print(f"Testdatei erstellt: {path} ({len(lines)} Sätze)")


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else os.path.join(os.path.dirname(__file__), "sample")
    create_test_files(target)
