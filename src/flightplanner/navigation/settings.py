"""Typed route planning settings read from YAML configuration.

Typical usage:
    config = ConfigLoader.load("config/planner.yaml")
    settings = PlannerSettings.from_config(config)
    builder = RouteBuilder(settings.with_overrides(corridor_width_nm=5.0))
"""

import math
from dataclasses import dataclass, replace
from typing import Any

from flightplanner.airports.database import DEFAULT_SEARCH_LIMIT
from flightplanner.core.config import ConfigError, ConfigLoader
from flightplanner.navigation.corridor import (
    DEFAULT_CORRIDOR_WIDTH_NM,
    DEFAULT_MIN_ENDPOINT_DISTANCE_NM,
)
from flightplanner.navigation.navdata import ROUTE_NAVAID_TYPES, NavaidType


def _check_non_negative(key: str, number: float) -> float:
    if not math.isfinite(number) or number < 0:
        raise ConfigError(f"{key} must be a non-negative number, got {number!r}")
    return number


def _non_negative(config: ConfigLoader, key: str, default: float) -> float:
    value = config.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    return _check_non_negative(key, number)


@dataclass(frozen=True)
class PlannerSettings:
    """Tunable parameters for route building and airport search.

    Attributes:
        corridor_width_nm: Corridor half-width in nautical miles
        min_endpoint_distance_nm: Exclusion margin around origin and destination
        waypoint_types: Navaid types that may become route waypoints
        search_limit: Maximum airport search suggestions
    """

    corridor_width_nm: float = DEFAULT_CORRIDOR_WIDTH_NM
    min_endpoint_distance_nm: float = DEFAULT_MIN_ENDPOINT_DISTANCE_NM
    waypoint_types: frozenset[NavaidType] = ROUTE_NAVAID_TYPES
    search_limit: int = DEFAULT_SEARCH_LIMIT

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "PlannerSettings":
        """Build settings from a loaded configuration.

        Reads route.corridor_width_nm, route.min_endpoint_distance_nm,
        route.waypoint_types and search.max_results. Missing keys fall back
        to defaults.

        Raises:
            ConfigError: If a value has the wrong type or range
        """
        raw_types = config.get("route.waypoint_types")
        if raw_types is None:
            waypoint_types = ROUTE_NAVAID_TYPES
        else:
            if not isinstance(raw_types, list):
                raise ConfigError("route.waypoint_types must be a list")
            try:
                waypoint_types = frozenset(NavaidType(str(t).upper()) for t in raw_types)
            except ValueError as e:
                raise ConfigError(f"Unknown navaid type in route.waypoint_types: {e}") from e

        search_limit = config.get("search.max_results", DEFAULT_SEARCH_LIMIT)
        if isinstance(search_limit, bool) or not isinstance(search_limit, int) or search_limit < 1:
            raise ConfigError(
                f"search.max_results must be a positive integer, got {search_limit!r}"
            )

        return cls(
            corridor_width_nm=_non_negative(
                config, "route.corridor_width_nm", DEFAULT_CORRIDOR_WIDTH_NM
            ),
            min_endpoint_distance_nm=_non_negative(
                config, "route.min_endpoint_distance_nm", DEFAULT_MIN_ENDPOINT_DISTANCE_NM
            ),
            waypoint_types=waypoint_types,
            search_limit=search_limit,
        )

    def with_overrides(self, **overrides: Any) -> "PlannerSettings":
        """Return a copy with the given non-None fields replaced.

        Raises:
            ConfigError: If a width or margin override is negative or not finite
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        for key in ("corridor_width_nm", "min_endpoint_distance_nm"):
            if key in changes:
                _check_non_negative(key, changes[key])
        return replace(self, **changes)
