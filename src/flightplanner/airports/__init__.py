"""Airport database for route endpoints.

This module provides functionality for working with airport data from
the OurAirports database: lookup by ICAO code and type-ahead search.

Typical usage:
    from flightplanner.airports import AirportDatabase

    db = AirportDatabase.load_from_csv("data/airports.csv").catalog
    airport = db.get_airport("KSFO")
    suggestions = db.search("san")
"""

from flightplanner.airports.database import Airport, AirportDatabase, AirportSize

__all__ = [
    "Airport",
    "AirportDatabase",
    "AirportSize",
]
