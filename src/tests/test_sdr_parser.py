"""
Tests fuer Record- und Datei-Decoder.

Ausfuehrung:
    python -m pytest src/tests/test_sdr_parser.py -v
"""

import pytest

from layouts.sdr_layouts import (
    FieldLayout, RecordLayout, get_layout,
    LINE_POLICY_STRICT, BOUNDS_STRICT, TRIM_RIGHT
)
from parser.errors import (
    LineLengthMismatch, FieldOutOfBounds, RequiredFieldEmpty,
    FileDecodeError, SDRReadError
)
from parser.sdr_parser import (
    parse_record, parse_content, parse_file, split_lines, normalize_line,
    build_line, build_line_from_record, read_sdr_file
)


COMP_SAMPLE_LINE = "9170917000047 2102-530            028092023 12033171"


# ==============================================================================
# 1. Record-Decoder
# ==============================================================================

class TestParseRecord:
    """Einzelne Zeilen dekodieren."""

    def test_legacy_completion_sample(self):
        layout = get_layout("COMP", revision="1")
        record = parse_record(COMP_SAMPLE_LINE, layout, 1)
        assert record.to_dict() == {
            "ID": "9170917000047",
            "COURSE": "2102-530",
            "CRS_SRT": "028092023",
            "CRS_END": "12033171",
        }
        assert record.format_id == "COMP"
        assert record.line_number == 1

    def test_completion_sample_current_revision(self, comp_layout):
        record = parse_record(COMP_SAMPLE_LINE, comp_layout)
        assert record.get_field_value("INSTIT") == "9170"
        assert record.get_field_value("ID") == "917000047"
        assert record.get_field_value("COURSE") == "2102-530"
        assert record.get_field_value("COMPLETE") == "0"
        assert record.get_field_value("CRS_SRT") == "28092023"
        assert record.get_field_value("CRS_END") == "12033171"
        assert record.get_field_value("NSN") == ""

    def test_values_follow_layout_order(self, cour_layout, make_cour_line):
        record = parse_record(make_cour_line(), cour_layout)
        assert list(record.fields) == cour_layout.field_names()
        assert record.values()[:4] == ["9170", "917000047", "NZ2102", "2102-530"]

    def test_record_is_immutable(self, cour_layout, make_cour_line):
        record = parse_record(make_cour_line(), cour_layout)
        with pytest.raises(TypeError):
            record.fields["ID"] = "other"
        with pytest.raises(AttributeError):
            record.line_number = 5

    def test_record_is_hashable(self, cour_layout, make_cour_line):
        first = parse_record(make_cour_line(), cour_layout, line_number=1)
        second = parse_record(make_cour_line(), cour_layout, line_number=1)
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_record_does_not_share_caller_dict(self):
        from parser.sdr_parser import ParsedRecord
        values = {"ID": "1"}
        record = ParsedRecord(line_number=1, format_id="TEST", fields=values)
        values["ID"] = "2"
        assert record.get_field_value("ID") == "1"

    def test_short_line_is_padded(self, cour_layout, make_cour_line):
        # Nur die Pflichtfelder, Rest der Zeile fehlt komplett
        line = make_cour_line()[:40]
        record = parse_record(line, cour_layout)
        assert record.get_field_value("COURSE") == "2102-530"
        assert record.get_field_value("NSN") == ""
        assert record.get_field_value("EFTS_MTH") == ""

    def test_long_line_is_truncated(self, cour_layout, make_cour_line):
        line = make_cour_line()
        reference = parse_record(line, cour_layout)
        record = parse_record(line + "GARBAGE-AT-THE-END", cour_layout)
        assert record.to_dict() == reference.to_dict()

    def test_trailing_garbage_does_not_reach_last_field(self, cour_layout, make_cour_line):
        line = make_cour_line(NSN="")
        record = parse_record(line + "999", cour_layout)
        assert record.get_field_value("NSN") == ""

    def test_required_field_empty(self, cour_layout, make_cour_line):
        with pytest.raises(RequiredFieldEmpty) as exc_info:
            parse_record(make_cour_line(QUAL=""), cour_layout)
        assert exc_info.value.field == "QUAL"
        assert "QUAL" in str(exc_info.value)

    def test_required_field_whitespace_only(self, cour_layout, make_cour_line):
        with pytest.raises(RequiredFieldEmpty):
            parse_record(make_cour_line(COURSE="     "), cour_layout)

    def test_optional_fields_may_be_blank(self, cour_layout, make_cour_line):
        record = parse_record(make_cour_line(CRS_SRT="", FACTOR=""), cour_layout)
        assert record.get_field_value("CRS_SRT") == ""

    def test_both_sides_trimmed(self, cour_layout, make_cour_line):
        record = parse_record(make_cour_line(COURSE="  2102-530"), cour_layout)
        assert record.get_field_value("COURSE") == "2102-530"

    def test_strict_line_length(self):
        layout = get_layout("COMP", revision="1")
        with pytest.raises(LineLengthMismatch) as exc_info:
            parse_record(COMP_SAMPLE_LINE + " ", layout)
        assert exc_info.value.expected == 52
        assert exc_info.value.actual == 53

        with pytest.raises(LineLengthMismatch):
            parse_record(COMP_SAMPLE_LINE[:-1], layout)


def _custom_layout(**options):
    return RecordLayout(
        format_id="TEST",
        description="Test layout",
        line_length=10,
        fields=(
            FieldLayout("CODE", "Code", 1, 4, required=True),
            FieldLayout("TEXT", "Text", 5, 4),
            FieldLayout("TAIL", "Tail", 8, 5),
        ),
        **options
    )


class TestDecoderOptions:
    """Layout-Optionen: Bereichs-Policy und Trim-Modus."""

    def test_field_out_of_bounds_strict(self):
        layout = _custom_layout(line_policy=LINE_POLICY_STRICT, bounds_policy=BOUNDS_STRICT)
        with pytest.raises(FieldOutOfBounds) as exc_info:
            parse_record("ABCD123456", layout)
        assert exc_info.value.field == "TAIL"
        assert exc_info.value.end == 12
        assert exc_info.value.line_length == 10

    def test_field_out_of_bounds_lenient(self):
        layout = _custom_layout(line_policy=LINE_POLICY_STRICT)
        record = parse_record("ABCD123456", layout)
        assert record.get_field_value("TAIL") == ""
        assert record.get_field_value("TEXT") == "1234"

    def test_right_trim_keeps_leading_spaces(self):
        layout = _custom_layout(trim_mode=TRIM_RIGHT)
        record = parse_record("ABCD  1", layout)
        assert record.get_field_value("TEXT") == "  1"

    def test_right_trim_required_blank(self):
        layout = _custom_layout(trim_mode=TRIM_RIGHT)
        with pytest.raises(RequiredFieldEmpty):
            parse_record("    XY", layout)

    def test_normalize_line(self):
        layout = _custom_layout()
        assert normalize_line("AB", layout) == "AB        "
        assert normalize_line("A" * 15, layout) == "A" * 10


# ==============================================================================
# 2. Datei-Decoder
# ==============================================================================

class TestParseContent:
    """Ganze Dateiinhalte dekodieren."""

    def test_empty_content(self, cour_layout):
        assert parse_content("", cour_layout) == []
        assert parse_content("\n  \n\r\n", cour_layout) == []

    def test_blank_lines_skipped_everywhere(self, cour_layout, make_cour_line):
        content = "\n   \n" + make_cour_line() + "\n\n  \t \n" + make_cour_line(ID="917000048") + "\n\n"
        records = parse_content(content, cour_layout)
        assert len(records) == 2
        assert [r.get_field_value("ID") for r in records] == ["917000047", "917000048"]

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_line_endings(self, cour_layout, make_cour_line, newline):
        content = newline.join([make_cour_line(), make_cour_line(ID="2"), make_cour_line(ID="3")])
        records = parse_content(content, cour_layout)
        assert [r.get_field_value("ID") for r in records] == ["917000047", "2", "3"]
        assert records[-1].get_field_value("NSN") == "123456789"

    def test_order_preserved(self, cour_layout, make_cour_line):
        ids = [str(n) for n in range(10, 0, -1)]
        content = "\n".join(make_cour_line(ID=i) for i in ids)
        assert [r.get_field_value("ID") for r in parse_content(content, cour_layout)] == ids

    def test_fail_fast_with_line_number(self, cour_layout, make_cour_line):
        # Fuehrende Leerzeilen zaehlen nicht mit
        content = "\n\n" + "\n".join([
            make_cour_line(),
            "",
            make_cour_line(QUAL=""),
            make_cour_line(),
        ])
        with pytest.raises(FileDecodeError) as exc_info:
            parse_content(content, cour_layout)
        assert exc_info.value.line_number == 3
        assert isinstance(exc_info.value.cause, RequiredFieldEmpty)
        assert "line 3" in str(exc_info.value)

    def test_leading_spaces_of_first_line_kept(self):
        layout = _custom_layout()
        records = parse_content("\n\nABCD  1\n", layout)
        assert records[0].get_field_value("CODE") == "ABCD"

        # Fuehrende Leerzeichen verschieben keine Spalten
        with pytest.raises(FileDecodeError):
            parse_content("    ABCD", layout)

    def test_split_lines_numbering(self):
        assert split_lines("\n \nA\n\nB\n \n") == [(1, "A"), (2, ""), (3, "B")]


class TestReadFile:
    """Dateien lesen (Encoding-Fallback)."""

    def test_parse_file(self, tmp_path, comp_layout, make_comp_line):
        path = tmp_path / "COMP9170.txt"
        path.write_text("\r\n".join([make_comp_line(), make_comp_line(COMPLETE="3")]), encoding="utf-8")
        parsed = parse_file(str(path), comp_layout)
        assert parsed.filename == "COMP9170.txt"
        assert parsed.format_id == "COMP"
        assert parsed.encoding == "utf-8-sig"
        assert parsed.total_lines == 2
        assert [r.get_field_value("COMPLETE") for r in parsed.records] == ["2", "3"]

    def test_cp1252_fallback(self, tmp_path):
        layout = get_layout("CREG")
        values = {
            "INSTIT": "9170", "COURSE": "2102-530", "CTITLE": "Crème brûlée",
            "QUAL": "NZ2102", "CLASS": "22", "NZSCED": "110109", "NZQCFLEVEL": "5",
            "CATEGORY": "P1", "FACTOR": "0.1167",
        }
        path = tmp_path / "CREG9170.txt"
        path.write_bytes(build_line(values, layout).encode("cp1252"))

        content, encoding = read_sdr_file(str(path))
        assert encoding == "cp1252"
        parsed = parse_file(str(path), layout)
        assert parsed.records[0].get_field_value("CTITLE") == "Crème brûlée"

    def test_utf8_bom_is_stripped(self, tmp_path, cour_layout, make_cour_line):
        path = tmp_path / "COUR9170.txt"
        path.write_bytes(b"\xef\xbb\xbf" + make_cour_line().encode("utf-8") + b"\r\n")

        content, encoding = read_sdr_file(str(path))
        assert encoding == "utf-8-sig"
        assert not content.startswith("\ufeff")

        record = parse_file(str(path), cour_layout).records[0]
        assert record.get_field_value("INSTIT") == "9170"
        assert record.get_field_value("ID") == "917000047"
        assert record.get_field_value("QUAL") == "NZ2102"

    def test_missing_file(self, tmp_path, cour_layout):
        with pytest.raises(SDRReadError):
            parse_file(str(tmp_path / "COUR0000.txt"), cour_layout)


# ==============================================================================
# 3. Serialisierung
# ==============================================================================

class TestBuildLine:
    """Record zurueck in Fixed-Width-Zeile."""

    def test_required_fields_roundtrip(self, cour_layout, make_cour_line):
        line = make_cour_line(CRS_WTD="", ASSIST="")
        record = parse_record(line, cour_layout)
        rebuilt = build_line_from_record(record, cour_layout)
        assert len(rebuilt) == 186
        for f in cour_layout.fields:
            if f.required:
                start = f.start - 1
                assert rebuilt[start:start + f.length] == line[start:start + f.length]
        assert parse_record(rebuilt, cour_layout).to_dict() == record.to_dict()

    def test_values_are_truncated_to_field_length(self, comp_layout):
        line = build_line({"COMPLETE": "XYZ", "INSTIT": "123456"}, comp_layout)
        assert line[34] == "X"
        assert line[0:4] == "1234"
        assert line[4] == " "
