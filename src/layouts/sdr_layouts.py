#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SDR Layout-Definitionen

Dieses Modul enthält die Feld-Metadaten der SDR-Dateitypen
(Single Data Return): STUD, COUR, CREG, COMP und QUAL.

WICHTIG:
- Alle Positionen sind 1-basiert (wie in der Dateispezifikation)
- Die Reihenfolge der Felder ist gleichzeitig Parse- und CSV-Spaltenreihenfolge
- COMP existiert in zwei Revisionen (52 bzw. 65 Zeichen), Revision 2 ist Standard
- Die Tabellen werden von Hand gepflegt und nicht auf Überlappungen geprüft
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from parser.errors import UnknownFormat


# Zeilen-Policy: Auffüllen/Abschneiden oder exakte Länge verlangen
LINE_POLICY_PAD = "pad"
LINE_POLICY_STRICT = "strict"

# Bereichs-Policy für Felder jenseits des Zeilenendes
BOUNDS_LENIENT = "lenient"
BOUNDS_STRICT = "strict"

# Trimmen: beidseitig oder nur rechts (führende Leerzeichen bleiben erhalten)
TRIM_BOTH = "both"
TRIM_RIGHT = "right"


@dataclass(frozen=True)
class FieldLayout:
    """Definition eines einzelnen Feldes."""
    name: str
    title: str
    start: int
    length: int
    required: bool = False

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"Feld {self.name}: Startposition muss >= 1 sein ({self.start})")
        if self.length < 1:
            raise ValueError(f"Feld {self.name}: Länge muss >= 1 sein ({self.length})")

    @property
    def end(self) -> int:
        """Letzte Position (1-basiert, inklusive)."""
        return self.start + self.length - 1


@dataclass(frozen=True)
class RecordLayout:
    """Definition eines SDR-Dateityps."""
    format_id: str
    description: str
    line_length: int
    fields: Tuple[FieldLayout, ...]
    revision: str = "1"
    line_policy: str = LINE_POLICY_PAD
    bounds_policy: str = BOUNDS_LENIENT
    trim_mode: str = TRIM_BOTH

    def __post_init__(self):
        if self.line_length < 1:
            raise ValueError(f"{self.format_id}: Zeilenlänge muss positiv sein")
        if self.line_policy not in (LINE_POLICY_PAD, LINE_POLICY_STRICT):
            raise ValueError(f"{self.format_id}: unbekannte Zeilen-Policy '{self.line_policy}'")
        if self.bounds_policy not in (BOUNDS_LENIENT, BOUNDS_STRICT):
            raise ValueError(f"{self.format_id}: unbekannte Bereichs-Policy '{self.bounds_policy}'")
        if self.trim_mode not in (TRIM_BOTH, TRIM_RIGHT):
            raise ValueError(f"{self.format_id}: unbekannter Trim-Modus '{self.trim_mode}'")

    def headers(self) -> List[str]:
        """Feldtitel in Layout-Reihenfolge (CSV-Kopfzeile)."""
        return [f.title for f in self.fields]

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldLayout]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


def _build_layout(definition: dict) -> RecordLayout:
    """Wandelt eine handgepflegte Tabelle in ein unveränderliches Layout um."""
    fields = tuple(
        FieldLayout(
            name=row["name"],
            title=row.get("title", row["name"]),
            start=row["start"],
            length=row["length"],
            required=row.get("required", False),
        )
        for row in definition["fields"]
    )
    return RecordLayout(
        format_id=definition["format_id"],
        description=definition["description"],
        line_length=definition["length"],
        fields=fields,
        revision=definition.get("revision", "1"),
        line_policy=definition.get("line_policy", LINE_POLICY_PAD),
        bounds_policy=definition.get("bounds_policy", BOUNDS_LENIENT),
        trim_mode=definition.get("trim_mode", TRIM_BOTH),
    )


# =============================================================================
# STUD - Student File
# =============================================================================
LAYOUT_STUD = {
    "format_id": "STUD",
    "description": "Student File",
    "length": 116,
    "fields": [
        {"name": "INSTIT", "title": "Provider Code", "start": 1, "length": 4, "required": True},
        {"name": "ID", "title": "Student Identification Code", "start": 5, "length": 10, "required": True},
        {"name": "GENDER", "title": "Gender", "start": 15, "length": 1, "required": True},
        {"name": "DOB", "title": "Date of Birth", "start": 16, "length": 8, "required": True},
        {"name": "TOTAL_FEE", "title": "Total fee for domestic student", "start": 24, "length": 6},
        {"name": "NAMEID", "title": "Name ID Code", "start": 30, "length": 5, "required": True},
        {"name": "PRIOR_A", "title": "Main Activity at 1 October in Year Prior to Formal Enrolment", "start": 35, "length": 2},
        {"name": "FIRST_YR", "title": "First Year of Tertiary Education", "start": 37, "length": 4},
        {"name": "DIS_ACCESS", "title": "Disability Services Accessed Indicator", "start": 41, "length": 1},
        {"name": "S_SCHOOL", "title": "Last Secondary School Attended", "start": 42, "length": 4},
        {"name": "Y_SCHOOL", "title": "Last Year at Secondary School", "start": 46, "length": 4},
        {"name": "SEC_QUAL", "title": "Highest Secondary School Qualification", "start": 50, "length": 2},
        {"name": "CITIZEN", "title": "Country of Citizenship", "start": 52, "length": 3},
        {"name": "FEES_FREE_ELIGIBLE", "title": "Fees Free Eligibility indicator", "start": 55, "length": 1},
        {"name": "REMOVED_FIELD", "title": "Removed field (padded blanks)", "start": 56, "length": 1},
        {"name": "DISABILITY", "title": "Disability Indicator", "start": 57, "length": 1},
        {"name": "FINISH", "title": "Expectation to Complete a Qualification this year", "start": 58, "length": 1},
        {"name": "IWI", "title": "Iwi Affiliation", "start": 59, "length": 12},
        {"name": "IRDNOS", "title": "Padded Blanks (previously IRD Number)", "start": 71, "length": 9},
        {"name": "NSN", "title": "National Student Number", "start": 80, "length": 10},
        {"name": "FOREIGN_FEE", "title": "Tuition fee paid by international fee-paying student", "start": 90, "length": 5},
        {"name": "MAX_EXEMPT_FEE", "title": "Maxima Exempt Fees", "start": 95, "length": 5},
        {"name": "ETHNIC", "title": "Ethnicity", "start": 100, "length": 9},
        {"name": "PERM_POST_CODE", "title": "Permanent Post Code", "start": 109, "length": 4},
        {"name": "TERM_POST_CODE", "title": "Term Post Code", "start": 113, "length": 4},
    ]
}


# =============================================================================
# COUR - Course Enrolment File
# =============================================================================
LAYOUT_COUR = {
    "format_id": "COUR",
    "description": "Course Enrolment File",
    "length": 186,
    "fields": [
        {"name": "INSTIT", "title": "Provider Code", "start": 1, "length": 4, "required": True},
        {"name": "ID", "title": "Student Identification Code", "start": 5, "length": 10, "required": True},
        {"name": "QUAL", "title": "Qualification Code", "start": 15, "length": 6, "required": True},
        {"name": "COURSE", "title": "Course Code", "start": 21, "length": 20, "required": True},
        {"name": "CRS_SRT", "title": "Course Start Date", "start": 41, "length": 8},
        {"name": "CRS_END", "title": "Course End Date", "start": 49, "length": 8},
        {"name": "CRS_WTD", "title": "Student's Course Withdrawal Date", "start": 57, "length": 8},
        {"name": "ASSIST", "title": "Category of Fees Assessment for International Students", "start": 65, "length": 2},
        {"name": "ATTEND", "title": "Intramural/Extramural Attendance", "start": 67, "length": 1},
        {"name": "CRS_SITE", "title": "Course Delivery Site", "start": 68, "length": 2},
        {"name": "FUNDING", "title": "Source of Funding", "start": 70, "length": 2},
        {"name": "RESIDENCY", "title": "Residential Status", "start": 72, "length": 1},
        {"name": "AUS_RESIDENCY", "title": "Australian Residential Status", "start": 73, "length": 1},
        {"name": "MANAAPPR", "title": "Managed Apprenticeship", "start": 74, "length": 1},
        {"name": "CATEGORY", "title": "Funding Category", "start": 75, "length": 2},
        {"name": "CLASS", "title": "Course Classification", "start": 77, "length": 4},
        {"name": "NZSCED", "title": "NZSCED Field of Study", "start": 81, "length": 6},
        {"name": "FACTOR", "title": "Course EFTS Factor", "start": 87, "length": 6},
        {"name": "EFTS_MTH", "title": "EFTS by Month", "start": 93, "length": 84},
        {"name": "NSN", "title": "National Student Number", "start": 177, "length": 10},
    ]
}


# =============================================================================
# CREG - Course Register File
# =============================================================================
LAYOUT_CREG = {
    "format_id": "CREG",
    "description": "Course Register File",
    "length": 148,
    "fields": [
        {"name": "INSTIT", "title": "Provider Code", "start": 1, "length": 4, "required": True},
        {"name": "COURSE", "title": "Course Code", "start": 5, "length": 20, "required": True},
        {"name": "CTITLE", "title": "Course Title", "start": 25, "length": 75, "required": True},
        {"name": "QUAL", "title": "Qualification Code", "start": 100, "length": 6, "required": True},
        {"name": "CLASS", "title": "Course Classification", "start": 106, "length": 4, "required": True},
        {"name": "NZSCED", "title": "NZSCED Field of Study", "start": 110, "length": 6, "required": True},
        {"name": "NZQCFLEVEL", "title": "Level on the NZ Qualifications and Credentials Framework", "start": 116, "length": 1, "required": True},
        {"name": "CREDIT", "title": "Credit", "start": 117, "length": 3},
        {"name": "CATEGORY", "title": "Funding Category", "start": 120, "length": 2, "required": True},
        {"name": "FACTOR", "title": "Course EFTS Factor", "start": 122, "length": 6, "required": True},
        {"name": "STAGE", "title": "Stage of Pre-Service Teacher Education Qualification", "start": 128, "length": 2},
        # Positionen 130-131 sind in der Spezifikation unbelegt
        {"name": "FEE", "title": "Course Tuition Fee", "start": 132, "length": 4},
        {"name": "INTERNET", "title": "Internet Based Learning Indicator", "start": 136, "length": 1},
        {"name": "PBRF_ELIGIBLE", "title": "PBRF Eligible Course Indicator", "start": 137, "length": 9},
        {"name": "CCCOSTS_FEE", "title": "Compulsory Course Costs Fee", "start": 146, "length": 1},
        {"name": "EXEMPT_INDICATOR", "title": "Course Exemption from AMFM", "start": 147, "length": 1},
        {"name": "EMB_LIT_NUM", "title": "Embedded Literacy and Numeracy Flag", "start": 148, "length": 1},
    ]
}


# =============================================================================
# COMP - Course Completion
# ACHTUNG: Revision 1 (52 Zeichen) kennt kein Abschlusskennzeichen und wird
# strikt geprüft. Revision 2 (65 Zeichen) ist Standard und Quelle für den
# Abgleich mit COUR-Dateien.
# =============================================================================
LAYOUT_COMP_REV1 = {
    "format_id": "COMP",
    "revision": "1",
    "description": "Course Completion records (legacy)",
    "length": 52,
    "line_policy": LINE_POLICY_STRICT,
    "bounds_policy": BOUNDS_STRICT,
    "fields": [
        {"name": "ID", "title": "Student Identification Code", "start": 1, "length": 13, "required": True},
        {"name": "COURSE", "title": "Course Code", "start": 15, "length": 20, "required": True},
        {"name": "CRS_SRT", "title": "Course Start Date", "start": 35, "length": 9, "required": True},
        {"name": "CRS_END", "title": "Course End Date", "start": 45, "length": 8, "required": True},
    ]
}

LAYOUT_COMP_REV2 = {
    "format_id": "COMP",
    "revision": "2",
    "description": "Course Completion records",
    "length": 65,
    "fields": [
        {"name": "INSTIT", "title": "Provider Code", "start": 1, "length": 4, "required": True},
        {"name": "ID", "title": "Student Identification Code", "start": 5, "length": 10, "required": True},
        {"name": "COURSE", "title": "Course Code", "start": 15, "length": 20, "required": True},
        {"name": "COMPLETE", "title": "Student Course Completion indicator", "start": 35, "length": 1, "required": True},
        {"name": "CRS_SRT", "title": "Course Start Date", "start": 36, "length": 8, "required": True},
        {"name": "CRS_END", "title": "Course End Date", "start": 45, "length": 8},
        {"name": "NSN", "title": "National Student Number", "start": 53, "length": 10},
        {"name": "PADDING", "title": "Padding", "start": 63, "length": 3},
    ]
}

# Standard-Layout für COMP
LAYOUT_COMP = LAYOUT_COMP_REV2


# =============================================================================
# QUAL - Qualification Completion
# =============================================================================
LAYOUT_QUAL = {
    "format_id": "QUAL",
    "description": "Qualification Completion records",
    "length": 50,
    "fields": [
        {"name": "INSTIT", "title": "Provider Code", "start": 1, "length": 4, "required": True},
        {"name": "ID", "title": "Student Identification Code", "start": 5, "length": 10, "required": True},
        {"name": "NSN", "title": "National Student Number", "start": 15, "length": 10, "required": True},
        {"name": "QUAL", "title": "Qualification Code", "start": 25, "length": 6, "required": True},
        {"name": "MAIN_1", "title": "Main Subject 1", "start": 31, "length": 4},
        {"name": "MAIN_2", "title": "Main Subject 2", "start": 35, "length": 4},
        {"name": "MAIN_3", "title": "Main Subject 3", "start": 39, "length": 4},
        {"name": "YR_REQ_MET", "title": "Year Requirements Met", "start": 43, "length": 4, "required": True},
        {"name": "PADDING", "title": "Padding", "start": 47, "length": 4},
    ]
}


# =============================================================================
# Registry
# =============================================================================

# Prioritätsreihenfolge für die Dateityp-Erkennung: erster Treffer gewinnt
FORMAT_PRIORITY = ("STUD", "COUR", "CREG", "COMP", "QUAL")

# Standard-Revision je Dateityp
DEFAULT_REVISIONS = {
    "STUD": "1",
    "COUR": "1",
    "CREG": "1",
    "COMP": "2",
    "QUAL": "1",
}

ALL_LAYOUT_DEFINITIONS = [
    LAYOUT_STUD,
    LAYOUT_COUR,
    LAYOUT_CREG,
    LAYOUT_COMP_REV1,
    LAYOUT_COMP_REV2,
    LAYOUT_QUAL,
]


class LayoutRegistry:
    """
    Unveränderliches Verzeichnis aller Layouts.

    Wird einmal beim Start aufgebaut und an Parser, Lookup und
    Orchestrator weitergereicht.

    Usage:
        registry = LayoutRegistry.default()
        layout = registry.layout_for("COUR")
        legacy = registry.layout_for("COMP", revision="1")
    """

    def __init__(
        self,
        layouts: List[RecordLayout],
        default_revisions: Optional[Dict[str, str]] = None,
        priority: Tuple[str, ...] = FORMAT_PRIORITY
    ):
        table: Dict[Tuple[str, str], RecordLayout] = {}
        for layout in layouts:
            table[(layout.format_id, layout.revision)] = layout
        self._layouts: Mapping[Tuple[str, str], RecordLayout] = MappingProxyType(table)
        self._defaults: Mapping[str, str] = MappingProxyType(dict(default_revisions or {}))
        self._priority = tuple(p for p in priority if any(k[0] == p for k in table))

    @classmethod
    def default(cls) -> "LayoutRegistry":
        return cls(
            [_build_layout(d) for d in ALL_LAYOUT_DEFINITIONS],
            DEFAULT_REVISIONS,
        )

    def layout_for(self, format_id: str, revision: Optional[str] = None) -> RecordLayout:
        """
        Gibt das Layout für ein Format-Kennzeichen zurück.

        Args:
            format_id: STUD, COUR, CREG, COMP oder QUAL (Groß-/Kleinschreibung egal)
            revision: Optionale Revision, sonst die Standard-Revision

        Raises:
            UnknownFormat: wenn Format oder Revision nicht registriert ist
        """
        key = (format_id or "").strip().upper()
        if revision is None:
            revision = self._defaults.get(key)
            if revision is None:
                # Ohne Standard: die einzige (oder erste) registrierte Revision
                revisions = self.revisions(key)
                if not revisions:
                    raise UnknownFormat(format_id)
                revision = revisions[0]
        layout = self._layouts.get((key, revision))
        if layout is None:
            raise UnknownFormat(format_id, revision if self.revisions(key) else None)
        return layout

    def format_ids(self) -> List[str]:
        """Alle Format-Kennzeichen in Erkennungs-Priorität."""
        return list(self._priority)

    def revisions(self, format_id: str) -> List[str]:
        key = (format_id or "").strip().upper()
        return sorted(rev for (fid, rev) in self._layouts if fid == key)

    def __contains__(self, format_id: str) -> bool:
        return bool(self.revisions(format_id))


DEFAULT_REGISTRY = LayoutRegistry.default()


# =============================================================================
# Hilfsfunktionen
# =============================================================================

def get_layout(format_id: str, revision: Optional[str] = None) -> RecordLayout:
    """Kurzform für DEFAULT_REGISTRY.layout_for()."""
    return DEFAULT_REGISTRY.layout_for(format_id, revision)


def get_all_formats() -> List[str]:
    """Gibt alle definierten Format-Kennzeichen zurück."""
    return DEFAULT_REGISTRY.format_ids()


def get_field_by_name(format_id: str, field_name: str, revision: Optional[str] = None) -> Optional[FieldLayout]:
    """Sucht ein Feld in einem Layout."""
    return get_layout(format_id, revision).get_field(field_name)


def get_layout_info(format_id: str, revision: Optional[str] = None) -> str:
    """Gibt eine formatierte Übersicht eines Layouts zurück."""
    layout = get_layout(format_id, revision)

    lines = [
        f"Dateityp {layout.format_id} (Revision {layout.revision}): {layout.description}",
        f"Zeilenlänge: {layout.line_length} Zeichen, Policy: {layout.line_policy}/"
        f"{layout.bounds_policy}, Trimmen: {layout.trim_mode}",
        "-" * 80,
        f"{'Feld':<20} {'Start':>6} {'Länge':>6} {'Ende':>6}  Pflicht  Titel",
        "-" * 80,
    ]
    for f in layout.fields:
        req = "ja" if f.required else ""
        lines.append(f"{f.name:<20} {f.start:>6} {f.length:>6} {f.end:>6}  {req:<7}  {f.title}")
    return "\n".join(lines)
