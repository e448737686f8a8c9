"""Route construction between two airports.

This module joins the corridor search and great circle math into a Route:
origin, the navaids picked along the way, and the destination, with leg
distances and courses ready for display.

Typical usage:
    from flightplanner.navigation import RouteBuilder

    builder = RouteBuilder(settings)
    route = builder.build_route_between("KJFK", "EGLL", airport_db, nav_db)
    print(route.route_string, f"{route.total_distance_nm:.0f} nm")
"""

import logging
from dataclasses import dataclass
from typing import Any

from flightplanner.airports.database import Airport, AirportDatabase
from flightplanner.geodesy import Coordinate, bearing_deg, distance_nm
from flightplanner.navigation.corridor import CorridorSearch
from flightplanner.navigation.navdata import NavDatabase
from flightplanner.navigation.settings import PlannerSettings
from flightplanner.navigation.waypoint import Waypoint

logger = logging.getLogger(__name__)


class UnknownAirportError(LookupError):
    """Raised when a route endpoint is not in the airport catalog."""

    def __init__(self, icao: str) -> None:
        super().__init__(f"Airport not found: {icao}")
        self.icao = icao


@dataclass(frozen=True)
class RouteLeg:
    """One straight segment of a route.

    Attributes:
        from_ident: Identifier at the start of the leg
        to_ident: Identifier at the end of the leg
        distance_nm: Great circle length
        course_deg: Initial true course
    """

    from_ident: str
    to_ident: str
    distance_nm: float
    course_deg: float


@dataclass(frozen=True)
class Route:
    """Flight route from origin to destination through navaid waypoints.

    Attributes:
        origin: Departure airport
        destination: Arrival airport
        waypoints: Navaids in flying order
        legs: Segments between consecutive points
        total_distance_nm: Sum of leg distances (includes doglegs)
        direct_distance_nm: Great circle distance origin->destination
    """

    origin: Airport
    destination: Airport
    waypoints: tuple[Waypoint, ...]
    legs: tuple[RouteLeg, ...]
    total_distance_nm: float
    direct_distance_nm: float

    @property
    def positions(self) -> list[Coordinate]:
        """Coordinates to draw: origin, waypoints, destination."""
        return [
            self.origin.position,
            *(wp.position for wp in self.waypoints),
            self.destination.position,
        ]

    @property
    def route_string(self) -> str:
        """Waypoint identifiers separated by spaces, or DCT for a direct route."""
        if not self.waypoints:
            return "DCT"
        return " ".join(wp.identifier for wp in self.waypoints)

    def is_direct(self) -> bool:
        """Check if route has no intermediate waypoints."""
        return not self.waypoints

    def to_dict(self) -> dict[str, Any]:
        """Serialize the route for a map or UI layer."""
        return {
            "origin": _airport_dict(self.origin),
            "destination": _airport_dict(self.destination),
            "waypoints": [
                _waypoint_dict(wp) for wp in self.waypoints
            ],
            "legs": [
                {
                    "from": leg.from_ident,
                    "to": leg.to_ident,
                    "distance_nm": round(leg.distance_nm, 1),
                    "course_deg": round(leg.course_deg, 1),
                }
                for leg in self.legs
            ],
            "route": self.route_string,
            "total_distance_nm": round(self.total_distance_nm, 1),
            "direct_distance_nm": round(self.direct_distance_nm, 1),
        }


def _waypoint_dict(waypoint: Waypoint) -> dict[str, Any]:
    info = waypoint.navaid.display_info()
    info["distance_from_start_nm"] = round(waypoint.distance_from_start_nm, 1)
    return info


def _airport_dict(airport: Airport) -> dict[str, Any]:
    return {
        "icao": airport.icao,
        "iata": airport.iata,
        "name": airport.name,
        "city": airport.city,
        "country": airport.iso_country,
        "elevation_ft": airport.elevation_ft,
        "latitude": airport.position.latitude,
        "longitude": airport.position.longitude,
    }


class RouteBuilder:
    """Builds routes between airports using a corridor search.

    The builder holds no catalog state; the same instance can serve any
    number of queries against any catalogs.

    Examples:
        >>> builder = RouteBuilder()
        >>> route = builder.build_route(kjfk, egll, nav_db)
        >>> [wp.identifier for wp in route.waypoints]
    """

    def __init__(self, settings: PlannerSettings | None = None) -> None:
        """Initialize route builder.

        Args:
            settings: Corridor parameters (defaults when None)
        """
        self.settings = settings or PlannerSettings()
        self.corridor = CorridorSearch(
            corridor_width_nm=self.settings.corridor_width_nm,
            min_endpoint_distance_nm=self.settings.min_endpoint_distance_nm,
            waypoint_types=self.settings.waypoint_types,
        )

    def build_route(self, origin: Airport, destination: Airport, nav_db: NavDatabase) -> Route:
        """Build a route between two airports.

        Args:
            origin: Departure airport
            destination: Arrival airport
            nav_db: Navaid catalog to pick waypoints from

        Returns:
            Route with waypoints ordered from origin to destination
        """
        waypoints = self.corridor.find_waypoints(origin.position, destination.position, nav_db)

        points = [
            (origin.icao, origin.position),
            *((wp.identifier, wp.position) for wp in waypoints),
            (destination.icao, destination.position),
        ]
        legs = tuple(
            RouteLeg(
                from_ident=start_ident,
                to_ident=end_ident,
                distance_nm=distance_nm(start, end),
                course_deg=bearing_deg(start, end),
            )
            for (start_ident, start), (end_ident, end) in zip(points, points[1:])
        )

        route = Route(
            origin=origin,
            destination=destination,
            waypoints=tuple(waypoints),
            legs=legs,
            total_distance_nm=sum(leg.distance_nm for leg in legs),
            direct_distance_nm=distance_nm(origin.position, destination.position),
        )

        logger.info(
            "Built route %s -> %s via %s (%.1f nm)",
            origin.icao,
            destination.icao,
            route.route_string,
            route.total_distance_nm,
        )
        return route

    def build_route_between(
        self,
        origin_icao: str,
        destination_icao: str,
        airport_db: AirportDatabase,
        nav_db: NavDatabase,
    ) -> Route:
        """Build a route between two airports given by ICAO code.

        Raises:
            UnknownAirportError: If either code is not in the airport catalog
        """
        origin = airport_db.get_airport(origin_icao)
        if origin is None:
            raise UnknownAirportError(origin_icao)

        destination = airport_db.get_airport(destination_icao)
        if destination is None:
            raise UnknownAirportError(destination_icao)

        return self.build_route(origin, destination, nav_db)
