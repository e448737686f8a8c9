"""Flight plan details and SimBrief dispatch links.

A FlightPlan wraps a built Route with the operational details a dispatcher
needs (callsign, aircraft, level, load) and turns them into a SimBrief
dispatch URL or a short summary for display.

Typical usage:
    from flightplanner.navigation import FlightPlan

    plan = FlightPlan(callsign="BAW117", aircraft_type="B77W", route=route, flight_level=350)
    print(plan.dispatch_url())
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

from flightplanner.navigation.routes import Route

logger = logging.getLogger(__name__)

SIMBRIEF_DISPATCH_URL = "https://www.simbrief.com/system/dispatch.php"
MAX_FLIGHT_LEVEL = 600


@dataclass
class FlightPlan:
    """Flight plan built on top of a route.

    Attributes:
        callsign: Airline code followed by flight number (e.g., "BAW117")
        aircraft_type: Aircraft type code (e.g., "B738")
        route: Route from origin to destination
        flight_level: Cruise flight level (350 = FL350), None if not set
        pax: Passenger count
        cargo: Cargo weight in thousands of the dispatcher's weight unit
        route_text: Route field override; defaults to the route's waypoints

    Examples:
        >>> plan = FlightPlan(
        ...     callsign="DLH400",
        ...     aircraft_type="A359",
        ...     route=route,
        ...     flight_level=370,
        ...     pax=280,
        ... )
    """

    callsign: str
    aircraft_type: str
    route: Route
    flight_level: int | None = None
    pax: int | None = None
    cargo: float | None = None
    route_text: str | None = None

    @property
    def airline(self) -> str:
        """Airline code: the first three callsign characters."""
        return self.callsign[:3]

    @property
    def flight_number(self) -> str:
        """Flight number: everything after the airline code."""
        return self.callsign[3:]

    def get_route_text(self) -> str:
        """Get the route field, falling back to the route's waypoint list."""
        return self.route_text if self.route_text else self.route.route_string

    def dispatch_url(self) -> str:
        """Build a SimBrief dispatch URL for this plan.

        Returns:
            URL with airline, fltnum, type, orig, dest, route, fl, pax
            and cargo query parameters
        """
        params = {
            "airline": self.airline,
            "fltnum": self.flight_number,
            "type": self.aircraft_type,
            "orig": self.route.origin.icao,
            "dest": self.route.destination.icao,
            "route": self.get_route_text(),
            "fl": _blank_if_none(self.flight_level),
            "pax": _blank_if_none(self.pax),
            "cargo": _blank_if_none(self.cargo),
        }
        url = f"{SIMBRIEF_DISPATCH_URL}?{urlencode(params, quote_via=quote)}"
        logger.debug("Dispatch URL for %s: %s", self.callsign, url)
        return url

    def summary(self) -> dict[str, Any]:
        """Summarize the plan for a flight info panel.

        Returns:
            Dictionary with callsign, aircraft, level, route and the direct
            distance rounded to whole nautical miles
        """
        return {
            "callsign": self.callsign or "N/A",
            "aircraft": self.aircraft_type or "N/A",
            "level": f"FL{self.flight_level:03d}" if self.flight_level is not None else "FL---",
            "route": " ".join(
                (self.route.origin.icao, self.get_route_text(), self.route.destination.icao)
            ),
            "distance_nm": round(self.route.direct_distance_nm),
        }

    def validate(self) -> list[str]:
        """Validate the plan before dispatch.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if len(self.callsign) < 4:
            errors.append("Callsign must hold an airline code and a flight number")

        if not self.aircraft_type:
            errors.append("Aircraft type is required")

        if self.flight_level is not None and not 0 < self.flight_level <= MAX_FLIGHT_LEVEL:
            errors.append(f"Flight level must be between 1 and {MAX_FLIGHT_LEVEL}")

        if self.pax is not None and self.pax < 0:
            errors.append("Passenger count cannot be negative")

        if self.cargo is not None and self.cargo < 0:
            errors.append("Cargo cannot be negative")

        if self.route.origin.icao == self.route.destination.icao:
            errors.append("Origin and destination are the same airport")

        return errors


def _blank_if_none(value: object) -> str:
    return "" if value is None else str(value)
