"""Tests for tolerant row ingestion helpers."""

import pytest

from flightplanner.ingestion import (
    MalformedRowError,
    SkippedRow,
    clean_field,
    clean_row,
    parse_float,
    parse_optional_int,
    parse_rows,
    read_csv_rows,
)


class TestFieldCleaning:
    """Test quote and whitespace stripping."""

    @pytest.mark.parametrize(
        "raw,expected",
        [('"VOR"', "VOR"), ('  "SFO" ', "SFO"), ("  115800 ", "115800"), ("", ""), (None, "")],
    )
    def test_clean_field(self, raw, expected):
        """Test quotes and surrounding whitespace are removed."""
        assert clean_field(raw) == expected

    def test_clean_row_pads_short_rows(self):
        """Test missing trailing fields become empty strings."""
        assert clean_row(['"a"', "b"], 4) == ["a", "b", "", ""]

    def test_clean_row_truncates_long_rows(self):
        """Test fields past the expected width are dropped."""
        assert clean_row(["a", "b", "c"], 2) == ["a", "b"]


class TestParsers:
    """Test numeric field parsers."""

    def test_parse_float(self):
        """Test valid decimal parsing."""
        assert parse_float("37.6213", "lat") == 37.6213

    @pytest.mark.parametrize("raw", ["", "abc", "12,5"])
    def test_parse_float_malformed(self, raw):
        """Test non-numeric values raise MalformedRowError naming the field."""
        with pytest.raises(MalformedRowError, match="latitude_deg"):
            parse_float(raw, "latitude_deg")

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("13", 13),
            ("12.7", 12),
            ("-5", -5),
            ("", None),
            ("n/a", None),
            ("inf", None),
            ("nan", None),
        ],
    )
    def test_parse_optional_int(self, raw, expected):
        """Test integers parse with truncation and bad values become None."""
        assert parse_optional_int(raw) == expected


class TestParseRows:
    """Test the row loop shared by the catalogs."""

    @staticmethod
    def _parse(fields):
        if fields[0] == "skip":
            return None
        return (fields[0], parse_float(fields[1], "value"))

    def test_header_and_blank_rows_ignored(self):
        """Test the header and blank rows produce no outcome."""
        rows = [["name", "value"], ["a", "1"], [], ["", "  "], ["b", "2"]]

        outcomes = list(parse_rows(rows, self._parse, 2))

        assert outcomes == [(2, ("a", 1.0)), (5, ("b", 2.0))]

    def test_malformed_rows_reported_with_line_number(self):
        """Test a bad row becomes a SkippedRow and the loop continues."""
        rows = [["name", "value"], ["a", "oops"], ["b", "2"]]

        outcomes = list(parse_rows(rows, self._parse, 2))

        assert outcomes[0][0] == 2
        assert isinstance(outcomes[0][1], SkippedRow)
        assert outcomes[0][1].line_number == 2
        assert "value" in outcomes[0][1].reason
        assert outcomes[1] == (3, ("b", 2.0))

    def test_filtered_rows_yield_none(self):
        """Test rows the parser rejects as out of scope yield None."""
        rows = [["name", "value"], ["skip", "1"]]

        assert list(parse_rows(rows, self._parse, 2)) == [(2, None)]

    def test_without_header(self):
        """Test skip_header=False parses the first row."""
        outcomes = list(parse_rows([["a", "1"]], self._parse, 2, skip_header=False))

        assert outcomes == [(1, ("a", 1.0))]


class TestReadCsvRows:
    """Test CSV file reading."""

    def test_reads_quoted_fields(self, tmp_path):
        """Test quoted values containing commas stay in one field."""
        csv_file = tmp_path / "navaids.csv"
        csv_file.write_text('"id","name"\n1,"Oakland, CA"\n', encoding="utf-8")

        rows = read_csv_rows(csv_file)

        assert rows == [["id", "name"], ["1", "Oakland, CA"]]

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_csv_rows(tmp_path / "missing.csv")
