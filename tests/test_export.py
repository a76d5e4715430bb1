"""Tests for CSV export text and file names."""

from datetime import date

from registry.export import (
    export_filename,
    profile_export_filename,
    profile_to_csv_text,
    slugify_name,
    to_csv_bytes,
    to_csv_text,
)


class TestToCsvText:
    def test_header_and_rows(self):
        text = to_csv_text(["name", "age"], [{"name": "Rahim", "age": 34}, {"name": "Fatima", "age": 28}])

        assert text == "name,age\nRahim,34\nFatima,28"

    def test_quoting_rules(self):
        text = to_csv_text(["name", "note"], [{"name": "Doe, John", "note": 'said "hi"'}])

        assert text.splitlines()[1] == '"Doe, John","said ""hi"""'

    def test_line_breaks_are_quoted(self):
        text = to_csv_text(["note"], [{"note": "line one\nline two"}])

        assert text == 'note\n"line one\nline two"'

    def test_missing_values_empty_and_ints_not_upcast(self):
        text = to_csv_text(["name", "age"], [{"name": "A", "age": None}, {"name": "B", "age": 7}])

        assert text == "name,age\nA,\nB,7"

    def test_booleans_render_yes_no(self):
        text = to_csv_text(["embassy_contacted"], [{"embassy_contacted": True}, {"embassy_contacted": False}])

        assert text == "embassy_contacted\nYes\nNo"

    def test_missing_boolean_reads_no_like_detail_view(self):
        from registry.schema import display_value

        text = to_csv_text(["name", "embassy_contacted"], [{"name": "A", "embassy_contacted": None}, {"name": "B"}])

        assert text == "name,embassy_contacted\nA,No\nB,No"
        assert display_value("embassy_contacted", None) == "No"
        assert profile_to_csv_text({"embassy_contacted": None}) == "embassy_contacted,No"

    def test_no_records_gives_header_only(self):
        assert to_csv_text(["name", "gender"], []) == "name,gender"


def test_profile_export_is_key_value_lines():
    text = profile_to_csv_text({"name": "Jon Doe", "embassy_contacted": False, "current_location": None})

    assert text == "name,Jon Doe\nembassy_contacted,No\ncurrent_location,"


def test_profile_export_respects_field_order():
    text = profile_to_csv_text({"a": 1, "b": "x, y"}, fields=["b", "a"])

    assert text == 'b,"x, y"\na,1'


class TestFilenames:
    def test_dated_filename(self):
        assert export_filename("profiles-export", today=date(2026, 10, 17)) == "profiles-export-2026-10-17.csv"

    def test_suffix_overrides_date(self):
        assert export_filename("profile", "Jon-Doe") == "profile-Jon-Doe.csv"

    def test_profile_filename_replaces_whitespace(self):
        assert profile_export_filename({"name": "Jon  Q Doe"}) == "profile-Jon-Q-Doe.csv"
        assert slugify_name(None) == "unnamed"


def test_csv_bytes_are_utf8():
    assert to_csv_bytes("naïve") == "naïve".encode("utf-8")


def test_table_export_parses_back_to_the_same_cells():
    import csv
    import io

    records = [{"name": 'Doe, "JD" John', "note": "two\nlines"}, {"name": "Plain", "note": None}]

    rows = list(csv.reader(io.StringIO(to_csv_text(["name", "note"], records))))

    assert rows == [["name", "note"], ['Doe, "JD" John', "two\nlines"], ["Plain", ""]]
