"""Navigation database for radio navaids.

This module provides functionality for loading and querying VOR, DME and
NDB stations from the OurAirports navaids dataset.

Typical usage:
    result = NavDatabase.load_from_csv("data/navaids.csv")
    db = result.catalog

    vor = db.find_navaid("SFO")
    nearby = db.find_navaids_near(position, radius_nm=50)
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from flightplanner.geodesy import Coordinate, InvalidCoordinateError, distance_nm
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

# Column positions in the navaids dataset
NAVAID_FIELDS = (
    "id",
    "filename",
    "ident",
    "name",
    "type",
    "frequency_khz",
    "latitude_deg",
    "longitude_deg",
    "elevation_ft",
    "iso_country",
    "dme_frequency_khz",
    "dme_channel",
    "dme_latitude_deg",
    "dme_longitude_deg",
    "dme_elevation_ft",
    "slaved_variation_deg",
    "magnetic_variation_deg",
    "usageType",
    "power",
    "associated_airport",
)
_COL = {name: index for index, name in enumerate(NAVAID_FIELDS)}


class NavaidType(Enum):
    """Navigation aid type classification.

    Attributes:
        VOR: VHF Omnidirectional Range
        DME: Distance Measuring Equipment
        NDB: Non-Directional Beacon
        VORDME: Co-located VOR and DME
        VOR_DME: VOR with paired DME, published as "VOR-DME"
    """

    VOR = "VOR"
    DME = "DME"
    NDB = "NDB"
    VORDME = "VORDME"
    VOR_DME = "VOR-DME"


# Types that may be inserted into a route; DME and NDB are markers only
ROUTE_NAVAID_TYPES = frozenset({NavaidType.VOR, NavaidType.VOR_DME, NavaidType.VORDME})


@dataclass(frozen=True)
class Navaid:
    """Navigation aid information.

    Attributes:
        identifier: Station ident (e.g., "SFO")
        name: Human-readable name (e.g., "San Francisco")
        type: Type of navaid
        position: Station position
        frequency_mhz: Frequency in MHz, None if the source value is unusable
        elevation_ft: Station elevation in feet, None if unknown
        iso_country: ISO country code
        dme_channel: Paired DME channel (e.g., "105X")
        magnetic_variation: Magnetic variation as published
        associated_airport: Ident of the airport the station serves
        usage: Usage classification (e.g., "HI", "LO", "BOTH", "TERMINAL")

    Examples:
        >>> vor = Navaid(
        ...     identifier="SFO",
        ...     name="San Francisco",
        ...     type=NavaidType.VORDME,
        ...     position=Coordinate(37.6195, -122.3738),
        ...     frequency_mhz=115.8,
        ... )
    """

    identifier: str
    name: str
    type: NavaidType
    position: Coordinate
    frequency_mhz: float | None = None
    elevation_ft: int | None = None
    iso_country: str = ""
    dme_channel: str | None = None
    magnetic_variation: str | None = None
    associated_airport: str | None = None
    usage: str = ""

    @property
    def is_route_eligible(self) -> bool:
        """Whether the navaid can be used as an en-route waypoint."""
        return self.type in ROUTE_NAVAID_TYPES

    def display_info(self) -> dict[str, Any]:
        """Return the fields a map popup shows for this navaid.

        Returns:
            Dictionary with identifier, type, name, frequency (3 decimals),
            DME channel, elevation and associated airport
        """
        return {
            "identifier": self.identifier,
            "type": self.type.value,
            "name": self.name,
            "frequency": f"{self.frequency_mhz:.3f}" if self.frequency_mhz is not None else None,
            "dme_channel": self.dme_channel,
            "elevation_ft": self.elevation_ft,
            "associated_airport": self.associated_airport,
            "latitude": self.position.latitude,
            "longitude": self.position.longitude,
        }

    def __str__(self) -> str:
        """Return string representation of navaid.

        Returns:
            String with identifier, type, and frequency if applicable
        """
        if self.frequency_mhz:
            return f"{self.identifier} ({self.type.value} {self.frequency_mhz:.3f})"
        return f"{self.identifier} ({self.type.value})"


def parse_navaid_row(fields: list[str]) -> Navaid | None:
    """Build a Navaid from one cleaned row of the navaids dataset.

    Args:
        fields: Row values in NAVAID_FIELDS order

    Returns:
        The navaid, or None if its type is not one we keep

    Raises:
        MalformedRowError: If the ident or position is missing or invalid
    """
    try:
        navaid_type = NavaidType(fields[_COL["type"]])
    except ValueError:
        return None

    identifier = fields[_COL["ident"]]
    if not identifier:
        raise MalformedRowError("Missing ident")

    lat = parse_float(fields[_COL["latitude_deg"]], "latitude_deg")
    lon = parse_float(fields[_COL["longitude_deg"]], "longitude_deg")
    try:
        position = Coordinate(lat, lon)
    except InvalidCoordinateError as e:
        raise MalformedRowError(str(e)) from e

    frequency_khz = parse_optional_int(fields[_COL["frequency_khz"]])
    frequency_mhz = round(frequency_khz / 1000, 3) if frequency_khz is not None else None

    return Navaid(
        identifier=identifier,
        name=fields[_COL["name"]],
        type=navaid_type,
        position=position,
        frequency_mhz=frequency_mhz,
        elevation_ft=parse_optional_int(fields[_COL["elevation_ft"]]),
        iso_country=fields[_COL["iso_country"]],
        dme_channel=fields[_COL["dme_channel"]] or None,
        magnetic_variation=fields[_COL["magnetic_variation_deg"]] or None,
        associated_airport=fields[_COL["associated_airport"]] or None,
        usage=fields[_COL["usageType"]],
    )


class NavDatabase:
    """Read-only catalog of navaids keyed by identifier.

    Build one with ingest() or load_from_csv(); the catalog never changes
    afterwards, so it can be shared between any number of route queries.
    Iteration order is the order records were loaded in.

    Examples:
        >>> db = NavDatabase.load_from_csv("data/navaids.csv").catalog
        >>> vor = db.find_navaid("SFO")
        >>> nearby = db.find_navaids_near(position, radius_nm=50)
    """

    def __init__(self, navaids: Iterable[Navaid] = ()) -> None:
        """Initialize database from navaid records.

        Args:
            navaids: Records to index; later duplicates replace earlier ones
        """
        self._navaids: dict[str, Navaid] = {}
        for navaid in navaids:
            self._navaids[navaid.identifier] = navaid

    @classmethod
    def ingest(cls, rows: Iterable[Sequence[str | None]]) -> IngestResult["NavDatabase"]:
        """Build a database from raw dataset rows.

        The first row is treated as a header. Rows with an unrecognised
        type are filtered out; rows with an unusable ident or position are
        skipped and reported in the result.

        Args:
            rows: Raw field sequences in NAVAID_FIELDS order

        Returns:
            IngestResult holding the database and skip statistics

        Examples:
            >>> result = NavDatabase.ingest(csv.reader(f))
            >>> db = result.catalog
        """
        navaids: dict[str, Navaid] = {}
        result: IngestResult[NavDatabase] = IngestResult(catalog=cls())

        for _, outcome in parse_rows(rows, parse_navaid_row, len(NAVAID_FIELDS)):
            if outcome is None:
                result.filtered += 1
            elif isinstance(outcome, SkippedRow):
                result.skipped.append(outcome)
            else:
                if outcome.identifier in navaids:
                    result.duplicates += 1
                    logger.debug("Navaid %s replaced by a later row", outcome.identifier)
                navaids[outcome.identifier] = outcome

        result.catalog = cls(navaids.values())
        result.loaded = len(navaids)

        logger.info(
            "Loaded %d navaids (%d filtered, %d skipped)",
            result.loaded,
            result.filtered,
            result.skipped_count,
        )
        if result.duplicates:
            logger.warning("%d navaid identifiers appeared more than once", result.duplicates)
        return result

    @classmethod
    def load_from_csv(cls, csv_path: str | Path) -> IngestResult["NavDatabase"]:
        """Load navaids from a CSV export of the navaids dataset.

        Args:
            csv_path: Path to CSV file

        Returns:
            IngestResult holding the database and skip statistics

        Raises:
            FileNotFoundError: If CSV file doesn't exist
        """
        logger.info("Loading navaids from %s", csv_path)
        return cls.ingest(read_csv_rows(csv_path))

    @property
    def navaids(self) -> Mapping[str, Navaid]:
        """Read-only view of navaids keyed by identifier."""
        return MappingProxyType(self._navaids)

    def find_navaid(self, identifier: str) -> Navaid | None:
        """Find navaid by identifier.

        Args:
            identifier: Navaid identifier (case-sensitive)

        Returns:
            Navaid if found, None otherwise
        """
        return self._navaids.get(identifier)

    def all(self) -> Iterator[Navaid]:
        """Iterate over every navaid in load order."""
        return iter(self._navaids.values())

    def find_navaids_by_type(self, *navaid_types: NavaidType) -> list[Navaid]:
        """Find all navaids of the given types.

        Args:
            navaid_types: One or more types to match

        Returns:
            Matching navaids in load order

        Examples:
            >>> vors = db.find_navaids_by_type(NavaidType.VOR, NavaidType.VORDME)
        """
        wanted = set(navaid_types)
        return [n for n in self._navaids.values() if n.type in wanted]

    def find_navaids_near(
        self, position: Coordinate, radius_nm: float, navaid_type: NavaidType | None = None
    ) -> list[Navaid]:
        """Find navaids within radius of position.

        Args:
            position: Center position to search from
            radius_nm: Search radius in nautical miles
            navaid_type: Optional filter by navaid type

        Returns:
            List of navaids within radius, sorted by distance (closest first)
        """
        results = []

        for navaid in self._navaids.values():
            if navaid_type and navaid.type != navaid_type:
                continue

            distance = distance_nm(position, navaid.position)
            if distance <= radius_nm:
                results.append((distance, navaid.identifier, navaid))

        results.sort(key=lambda x: (x[0], x[1]))
        return [navaid for _, _, navaid in results]

    def count(self) -> int:
        """Return total number of navaids in database."""
        return len(self._navaids)

    def __len__(self) -> int:
        return len(self._navaids)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._navaids
