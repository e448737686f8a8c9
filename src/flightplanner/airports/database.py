"""Airport database parser and query system.

This module provides functionality for loading and querying the OurAirports
airports dataset. Only large and medium airports are kept; they are the
ones a route can start or end at.

Typical usage:
    db = AirportDatabase.load_from_csv("data/airports.csv").catalog

    airport = db.get_airport("KSFO")
    matches = db.search("san fr")
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from flightplanner.geodesy import Coordinate, InvalidCoordinateError
from flightplanner.ingestion import (
    IngestResult,
    MalformedRowError,
    SkippedRow,
    parse_float,
    parse_optional_int,
    parse_rows,
    read_csv_rows,
)

logger = logging.getLogger(__name__)

AIRPORT_FIELDS = (
    "id",
    "ident",
    "type",
    "name",
    "lat",
    "lon",
    "elevation",
    "continent",
    "country",
    "region",
    "municipality",
    "scheduled_service",
    "gps_code",
    "iata_code",
)
_COL = {name: index for index, name in enumerate(AIRPORT_FIELDS)}

DEFAULT_SEARCH_LIMIT = 5


class AirportSize(Enum):
    """Airport size classification retained by the catalog."""

    LARGE = "large_airport"
    MEDIUM = "medium_airport"


@dataclass(frozen=True)
class Airport:
    """Airport information from OurAirports database.

    Attributes:
        icao: ICAO code (e.g., "KSFO")
        name: Airport name
        position: Airport reference point
        size: Size classification
        city: City/town name
        iso_country: ISO country code
        iata: IATA code (3-letter, if exists)
        elevation_ft: Field elevation in feet, None if unknown
    """

    icao: str
    name: str
    position: Coordinate
    size: AirportSize
    city: str = ""
    iso_country: str = ""
    iata: str | None = None
    elevation_ft: int | None = None

    def __str__(self) -> str:
        return f"{self.icao} ({self.name})"


def parse_airport_row(fields: list[str]) -> Airport | None:
    """Build an Airport from one cleaned row of the airports dataset.

    Returns:
        The airport, or None for small fields, heliports and rows without ident

    Raises:
        MalformedRowError: If the position is missing or invalid
    """
    icao = fields[_COL["ident"]]
    if not icao:
        return None

    try:
        size = AirportSize(fields[_COL["type"]])
    except ValueError:
        return None

    lat = parse_float(fields[_COL["lat"]], "lat")
    lon = parse_float(fields[_COL["lon"]], "lon")
    try:
        position = Coordinate(lat, lon)
    except InvalidCoordinateError as e:
        raise MalformedRowError(str(e)) from e

    return Airport(
        icao=icao.upper(),
        name=fields[_COL["name"]],
        position=position,
        size=size,
        city=fields[_COL["municipality"]],
        iso_country=fields[_COL["country"]],
        iata=fields[_COL["iata_code"]] or None,
        elevation_ft=parse_optional_int(fields[_COL["elevation"]]),
    )


class AirportDatabase:
    """Read-only airport catalog keyed by ICAO code.

    Examples:
        >>> db = AirportDatabase.load_from_csv("data/airports.csv").catalog
        >>> airport = db.get_airport("KSFO")
        >>> print(f"{airport.name} at {airport.position}")
        >>> for match in db.search("LON"):
        ...     print(match.icao)
    """

    def __init__(self, airports: Iterable[Airport] = ()) -> None:
        """Initialize database from airport records."""
        self._airports: dict[str, Airport] = {}
        for airport in airports:
            self._airports[airport.icao] = airport

    @classmethod
    def ingest(cls, rows: Iterable[Sequence[str | None]]) -> IngestResult["AirportDatabase"]:
        """Build a database from raw dataset rows.

        The first row is treated as a header.

        Args:
            rows: Raw field sequences in AIRPORT_FIELDS order

        Returns:
            IngestResult holding the database and skip statistics
        """
        airports: dict[str, Airport] = {}
        result: IngestResult[AirportDatabase] = IngestResult(catalog=cls())

        for _, outcome in parse_rows(rows, parse_airport_row, len(AIRPORT_FIELDS)):
            if outcome is None:
                result.filtered += 1
            elif isinstance(outcome, SkippedRow):
                result.skipped.append(outcome)
            else:
                if outcome.icao in airports:
                    result.duplicates += 1
                airports[outcome.icao] = outcome

        result.catalog = cls(airports.values())
        result.loaded = len(airports)

        logger.info(
            "Loaded %d airports (%d filtered, %d skipped)",
            result.loaded,
            result.filtered,
            result.skipped_count,
        )
        if result.duplicates:
            logger.warning("%d airport identifiers appeared more than once", result.duplicates)
        return result

    @classmethod
    def load_from_csv(cls, csv_path: str | Path) -> IngestResult["AirportDatabase"]:
        """Load airports from a CSV export of the airports dataset.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
        """
        logger.info("Loading airports from %s", csv_path)
        return cls.ingest(read_csv_rows(csv_path))

    @property
    def airports(self) -> Mapping[str, Airport]:
        """Read-only view of airports keyed by ICAO code."""
        return MappingProxyType(self._airports)

    def get_airport(self, icao: str) -> Airport | None:
        """Get airport by ICAO code.

        Args:
            icao: ICAO code (e.g., "KSFO"), any case

        Returns:
            Airport if found, None otherwise
        """
        return self._airports.get(icao.strip().upper())

    def all(self) -> Iterator[Airport]:
        """Iterate over every airport in load order."""
        return iter(self._airports.values())

    def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Airport]:
        """Find airports whose ICAO, IATA, name or city contains query.

        Matching is case-insensitive. Results are the first matches in load
        order, not ranked by relevance. A blank query returns nearby().

        Args:
            query: Text typed by the user
            limit: Maximum number of results

        Returns:
            Up to limit matching airports

        Examples:
            >>> [a.icao for a in db.search("heath")]
            ['EGLL']
        """
        needle = query.strip().upper()
        if not needle:
            return self.nearby(limit)

        matches: list[Airport] = []
        for airport in self._airports.values():
            if len(matches) >= limit:
                break
            haystacks = (airport.icao, airport.iata or "", airport.name, airport.city)
            if any(needle in text.upper() for text in haystacks):
                matches.append(airport)

        return matches

    def nearby(self, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Airport]:
        """Suggest airports when nothing has been typed yet.

        Returns:
            The first limit large airports in load order
        """
        large = (a for a in self._airports.values() if a.size is AirportSize.LARGE)
        return [airport for airport, _ in zip(large, range(limit))]

    def get_airport_count(self) -> int:
        """Get total number of airports in database."""
        return len(self._airports)

    def __len__(self) -> int:
        return len(self._airports)

    def __contains__(self, icao: object) -> bool:
        return isinstance(icao, str) and icao.upper() in self._airports
