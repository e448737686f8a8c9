"""Tolerant row ingestion shared by the navaid and airport catalogs.

Source datasets are CSV exports where any row can be damaged. Parsers raise
MalformedRowError for a bad row; ingest() records the row and carries on, so
loading a catalog never fails because of one line.

Typical usage:
    rows = read_csv_rows("data/navaids.csv")
    result = NavDatabase.ingest(rows)
    if result.skipped:
        logger.warning("Skipped %d rows", len(result.skipped))
"""

import csv
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")


class MalformedRowError(ValueError):
    """Raised when a row lacks required fields or holds unparseable values."""


@dataclass(frozen=True)
class SkippedRow:
    """A row dropped during ingestion.

    Attributes:
        line_number: 1-based position of the row in the input, header included
        reason: Why the row was rejected
    """

    line_number: int
    reason: str


@dataclass
class IngestResult(Generic[C]):
    """Outcome of loading a catalog.

    Attributes:
        catalog: The catalog built from the valid rows
        loaded: Number of records accepted
        filtered: Rows that parsed but were outside the catalog's scope
        duplicates: Records that replaced an earlier one with the same key
        skipped: Malformed rows, in input order
    """

    catalog: C
    loaded: int = 0
    filtered: int = 0
    duplicates: int = 0
    skipped: list[SkippedRow] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def clean_field(value: str | None) -> str:
    """Strip double quotes and surrounding whitespace from a raw field."""
    if value is None:
        return ""
    return value.replace('"', "").strip()


def clean_row(row: Sequence[str | None], width: int) -> list[str]:
    """Clean every field and pad the row to width with empty strings.

    Fields past width are dropped.
    """
    cleaned = [clean_field(value) for value in row[:width]]
    cleaned.extend([""] * (width - len(cleaned)))
    return cleaned


def parse_float(value: str, field_name: str) -> float:
    """Parse a required decimal field.

    Raises:
        MalformedRowError: If value is empty or not numeric
    """
    try:
        return float(value)
    except ValueError as e:
        raise MalformedRowError(f"{field_name} is not numeric: {value!r}") from e


def parse_optional_int(value: str) -> int | None:
    """Parse an integer field, truncating decimals; None when blank or invalid."""
    if not value:
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def parse_rows(
    rows: Iterable[Sequence[str | None]],
    parse: Callable[[list[str]], T | None],
    width: int,
    skip_header: bool = True,
) -> Iterator[tuple[int, T | SkippedRow | None]]:
    """Run parse over each row, yielding (line_number, outcome).

    The outcome is the parsed record, a SkippedRow for malformed rows, or
    None when the parser filtered the row out. Blank rows are not yielded.
    """
    for line_number, row in enumerate(rows, start=1):
        if skip_header and line_number == 1:
            continue
        if not row or not any(clean_field(value) for value in row):
            continue

        try:
            record = parse(clean_row(row, width))
        except MalformedRowError as e:
            logger.debug("Skipping malformed row %d: %s", line_number, e)
            yield line_number, SkippedRow(line_number, str(e))
            continue

        yield line_number, record


def read_csv_rows(csv_path: str | Path) -> list[list[str]]:
    """Read every row of a CSV file, header included.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))
