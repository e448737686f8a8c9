"""Pytest configuration and fixtures for all tests."""

import logging
from collections.abc import Callable

import pytest

from flightplanner.airports.database import AIRPORT_FIELDS, Airport, AirportDatabase, AirportSize
from flightplanner.geodesy import Coordinate
from flightplanner.navigation.navdata import NAVAID_FIELDS, Navaid, NavaidType, NavDatabase


@pytest.fixture
def make_navaid_row() -> Callable[..., list[str]]:
    """Factory for raw navaid rows in dataset column order."""

    def _make(
        ident: str,
        navaid_type: str = "VOR",
        lat: str | float = 0.0,
        lon: str | float = 0.0,
        frequency_khz: str = "115800",
        elevation_ft: str = "100",
        **extra: str,
    ) -> list[str]:
        values = {
            "id": "1",
            "filename": f"{ident}_navaid",
            "ident": ident,
            "name": f"{ident} station",
            "type": navaid_type,
            "frequency_khz": frequency_khz,
            "latitude_deg": str(lat),
            "longitude_deg": str(lon),
            "elevation_ft": elevation_ft,
            "iso_country": "XX",
            "usageType": "BOTH",
        }
        values.update(extra)
        return [values.get(field, "") for field in NAVAID_FIELDS]

    return _make


@pytest.fixture
def make_airport_row() -> Callable[..., list[str]]:
    """Factory for raw airport rows in dataset column order."""

    def _make(
        ident: str,
        airport_type: str = "large_airport",
        lat: str | float = 0.0,
        lon: str | float = 0.0,
        name: str | None = None,
        city: str = "",
        iata: str = "",
        elevation: str = "10",
    ) -> list[str]:
        values = {
            "id": "1",
            "ident": ident,
            "type": airport_type,
            "name": name if name is not None else f"{ident} Airport",
            "lat": str(lat),
            "lon": str(lon),
            "elevation": elevation,
            "continent": "EU",
            "country": "XX",
            "region": "XX-01",
            "municipality": city,
            "scheduled_service": "yes",
            "gps_code": ident,
            "iata_code": iata,
        }
        return [values[field] for field in AIRPORT_FIELDS]

    return _make


def make_navaid(identifier: str, navaid_type: NavaidType, lat: float, lon: float) -> Navaid:
    return Navaid(
        identifier=identifier,
        name=f"{identifier} station",
        type=navaid_type,
        position=Coordinate(lat, lon),
        frequency_mhz=115.8,
        elevation_ft=100,
    )


@pytest.fixture
def equator_airports() -> tuple[Airport, Airport]:
    """Origin at (0, 0) and destination at (0, 10), about 600 nm apart."""
    origin = Airport(
        icao="ORIG",
        name="Origin Intl",
        position=Coordinate(0.0, 0.0),
        size=AirportSize.LARGE,
        city="Start",
    )
    destination = Airport(
        icao="DEST",
        name="Destination Intl",
        position=Coordinate(0.0, 10.0),
        size=AirportSize.LARGE,
        city="Finish",
    )
    return origin, destination


@pytest.fixture
def equator_nav_db() -> NavDatabase:
    """Navaids around the (0, 0) -> (0, 10) route.

    ALFA and BRVO are on the corridor away from the endpoints; NEAR sits
    10 nm from the origin; OFFC is well off the track; DMEX and NDBX are on
    the track but of types never used as waypoints.
    """
    return NavDatabase(
        [
            make_navaid("OFFC", NavaidType.VOR, 2.0, 5.0),
            make_navaid("BRVO", NavaidType.VORDME, 0.005, 7.0),
            make_navaid("NEAR", NavaidType.VOR, 0.0, 0.1666),
            make_navaid("DMEX", NavaidType.DME, 0.0, 5.0),
            make_navaid("ALFA", NavaidType.VOR, 0.0, 3.0),
            make_navaid("NDBX", NavaidType.NDB, 0.0, 6.0),
        ]
    )


@pytest.fixture
def airport_db(make_airport_row) -> AirportDatabase:
    """Small airport catalog in a fixed load order."""
    table = [
        ("KJFK", "large_airport", 40.6398, -73.7789, "John F Kennedy Intl", "New York", "JFK"),
        ("EGLL", "large_airport", 51.4706, -0.461941, "London Heathrow", "London", "LHR"),
        ("EGLC", "medium_airport", 51.5053, 0.055278, "London City", "London", "LCY"),
        ("KSFO", "large_airport", 37.619, -122.375, "San Francisco Intl", "San Francisco", "SFO"),
        ("KPAO", "small_airport", 37.4611, -122.115, "Palo Alto", "Palo Alto", "PAO"),
        ("LFPG", "large_airport", 49.0128, 2.55, "Charles de Gaulle", "Paris", "CDG"),
        ("EDDF", "large_airport", 50.0333, 8.5706, "Frankfurt am Main", "Frankfurt", "FRA"),
        ("RJTT", "large_airport", 35.5523, 139.78, "Tokyo Haneda", "Tokyo", "HND"),
    ]
    rows = [list(AIRPORT_FIELDS)] + [make_airport_row(*entry) for entry in table]
    return AirportDatabase.ingest(rows).catalog


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
