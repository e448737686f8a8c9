"""Corridor search for navaids lying along a direct route.

A navaid is considered on route when its cross-track distance from the
great circle origin->destination is within the corridor half-width and it
is not too close to either end of the route.

Typical usage:
    search = CorridorSearch(corridor_width_nm=1.0, min_endpoint_distance_nm=50.0)
    waypoints = search.find_waypoints(kjfk.position, egll.position, nav_db)
"""

import logging
import math
from collections.abc import Iterable

import numpy as np

from flightplanner.geodesy import (
    Coordinate,
    cross_track_distances_nm,
    distance_nm,
    distances_nm,
)
from flightplanner.navigation.navdata import ROUTE_NAVAID_TYPES, NavaidType, NavDatabase
from flightplanner.navigation.waypoint import Waypoint

logger = logging.getLogger(__name__)

DEFAULT_CORRIDOR_WIDTH_NM = 1.0
DEFAULT_MIN_ENDPOINT_DISTANCE_NM = 50.0


class CorridorSearch:
    """Selects navaids inside a lateral corridor around a great circle route.

    Attributes:
        corridor_width_nm: Maximum absolute cross-track distance
        min_endpoint_distance_nm: Navaids closer than this to the origin or
            the destination are left out
        waypoint_types: Navaid types eligible for insertion

    Examples:
        >>> search = CorridorSearch()
        >>> for wp in search.find_waypoints(origin, destination, nav_db):
        ...     print(wp.identifier, round(wp.distance_from_start_nm))
    """

    def __init__(
        self,
        corridor_width_nm: float = DEFAULT_CORRIDOR_WIDTH_NM,
        min_endpoint_distance_nm: float = DEFAULT_MIN_ENDPOINT_DISTANCE_NM,
        waypoint_types: Iterable[NavaidType] = ROUTE_NAVAID_TYPES,
    ) -> None:
        """Initialize corridor search.

        Raises:
            ValueError: If a width or margin is negative or not finite
        """
        if not math.isfinite(corridor_width_nm) or corridor_width_nm < 0:
            raise ValueError(f"Invalid corridor width: {corridor_width_nm}")
        if not math.isfinite(min_endpoint_distance_nm) or min_endpoint_distance_nm < 0:
            raise ValueError(f"Invalid endpoint margin: {min_endpoint_distance_nm}")

        self.corridor_width_nm = corridor_width_nm
        self.min_endpoint_distance_nm = min_endpoint_distance_nm
        self.waypoint_types = frozenset(waypoint_types)

    def find_waypoints(
        self, origin: Coordinate, destination: Coordinate, nav_db: NavDatabase
    ) -> list[Waypoint]:
        """Find navaids along the route, ordered from origin to destination.

        Args:
            origin: Route start
            destination: Route end
            nav_db: Catalog to search (read only)

        Returns:
            Waypoints sorted by distance from origin, ties by identifier.
            Empty when origin and destination coincide.
        """
        total_distance = distance_nm(origin, destination)
        if total_distance == 0.0:
            logger.debug("Degenerate route at %s, no waypoints", origin)
            return []

        candidates = nav_db.find_navaids_by_type(*self.waypoint_types)
        if not candidates:
            return []

        lats = np.fromiter((n.position.latitude for n in candidates), dtype=np.float64)
        lons = np.fromiter((n.position.longitude for n in candidates), dtype=np.float64)

        cross_track = np.abs(cross_track_distances_nm(lats, lons, origin, destination))
        from_start = distances_nm(origin, lats, lons)

        margin = self.min_endpoint_distance_nm
        keep = (
            (cross_track <= self.corridor_width_nm)
            & (from_start > margin)
            & (from_start < total_distance - margin)
        )

        waypoints = [
            Waypoint(navaid=navaid, distance_from_start_nm=float(distance))
            for navaid, distance, selected in zip(candidates, from_start, keep)
            if selected
        ]
        waypoints.sort(key=lambda wp: (wp.distance_from_start_nm, wp.identifier))

        logger.debug(
            "Corridor %s -> %s (%.1f nm): %d of %d candidates on route",
            origin,
            destination,
            total_distance,
            len(waypoints),
            len(candidates),
        )
        return waypoints
