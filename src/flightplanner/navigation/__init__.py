"""Navaid database, corridor search and route building.

This module provides functionality for navigation aids, selecting navaids
along a great circle route, and turning routes into dispatchable plans.

Typical usage:
    from flightplanner.navigation import NavDatabase, RouteBuilder

    nav_db = NavDatabase.load_from_csv("data/navaids.csv").catalog
    route = RouteBuilder().build_route(origin, destination, nav_db)
"""

from flightplanner.navigation.corridor import CorridorSearch
from flightplanner.navigation.flight_plan import FlightPlan
from flightplanner.navigation.navdata import (
    ROUTE_NAVAID_TYPES,
    Navaid,
    NavaidType,
    NavDatabase,
)
from flightplanner.navigation.routes import (
    Route,
    RouteBuilder,
    RouteLeg,
    UnknownAirportError,
)
from flightplanner.navigation.settings import PlannerSettings
from flightplanner.navigation.waypoint import Waypoint

__all__ = [
    "CorridorSearch",
    "FlightPlan",
    "Navaid",
    "NavaidType",
    "NavDatabase",
    "PlannerSettings",
    "ROUTE_NAVAID_TYPES",
    "Route",
    "RouteBuilder",
    "RouteLeg",
    "UnknownAirportError",
    "Waypoint",
]
