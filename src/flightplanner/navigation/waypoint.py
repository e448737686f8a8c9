"""Navigation waypoint definition.

This module provides the Waypoint class for navaids selected along a route.
"""

from dataclasses import dataclass

from flightplanner.geodesy import Coordinate
from flightplanner.navigation.navdata import Navaid


@dataclass(frozen=True)
class Waypoint:
    """Navaid selected as an intermediate route point.

    Attributes:
        navaid: The navaid flown over
        distance_from_start_nm: Great circle distance from route origin

    Examples:
        >>> waypoint = Waypoint(navaid=sfo_vor, distance_from_start_nm=212.4)
    """

    navaid: Navaid
    distance_from_start_nm: float

    @property
    def identifier(self) -> str:
        return self.navaid.identifier

    @property
    def position(self) -> Coordinate:
        return self.navaid.position

    def __str__(self) -> str:
        """Return string representation of waypoint.

        Returns:
            Navaid description and distance from origin
        """
        return f"{self.navaid} @ {self.distance_from_start_nm:.1f}nm"
