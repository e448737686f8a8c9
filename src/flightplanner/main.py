"""FlightPlanner - great circle routes through radio navaids.

Command line entry point. Loads the airport and navaid catalogs, builds a
route between two airports and prints it, or searches the airport catalog.

Typical usage:
    flightplanner route KJFK EGLL --airports data/airports.csv --navaids data/navaids.csv
    flightplanner route KJFK EGLL ... --format yaml --callsign BAW114 --aircraft B77W --fl 370
    flightplanner route KJFK EGLL ... --config config/planner.yaml
    flightplanner search heathrow --airports data/airports.csv
"""

import argparse
import sys
from collections.abc import Sequence

import yaml

from flightplanner.airports import AirportDatabase
from flightplanner.core.config import ConfigError, ConfigLoader
from flightplanner.core.logging_system import (
    LoggingError,
    get_logger,
    initialize_logging,
    shutdown_logging,
)
from flightplanner.navigation import (
    FlightPlan,
    NavDatabase,
    PlannerSettings,
    Route,
    RouteBuilder,
    UnknownAirportError,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNKNOWN_AIRPORT = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="flightplanner",
        description="FlightPlanner - great circle routes through radio navaids",
    )
    parser.add_argument("--config", type=str, help="Planner settings YAML file")
    parser.add_argument("--log-config", type=str, help="Logging configuration YAML file")

    # Same options after the subcommand; SUPPRESS keeps a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=argparse.SUPPRESS)
    common.add_argument("--log-config", type=str, default=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", required=True)

    route_parser = subparsers.add_parser(
        "route", parents=[common], help="Build a route between two airports"
    )
    route_parser.add_argument("origin", help="Departure airport ICAO code (e.g., KJFK)")
    route_parser.add_argument("destination", help="Destination airport ICAO code (e.g., EGLL)")
    route_parser.add_argument("--airports", required=True, help="Airports CSV file")
    route_parser.add_argument("--navaids", required=True, help="Navaids CSV file")
    route_parser.add_argument("--corridor-width", type=float, help="Corridor half-width in nm")
    route_parser.add_argument("--min-distance", type=float, help="Endpoint exclusion margin in nm")
    route_parser.add_argument("--format", choices=("text", "yaml"), default="text")
    route_parser.add_argument("--callsign", type=str, help="Callsign for a SimBrief dispatch link")
    route_parser.add_argument("--aircraft", type=str, default="", help="Aircraft type code")
    route_parser.add_argument("--fl", type=int, help="Cruise flight level (e.g., 350)")
    route_parser.add_argument("--pax", type=int, help="Passenger count")
    route_parser.add_argument("--cargo", type=float, help="Cargo load")

    search_parser = subparsers.add_parser(
        "search", parents=[common], help="Search the airport catalog"
    )
    search_parser.add_argument("query", nargs="?", default="", help="ICAO, IATA, name or city")
    search_parser.add_argument("--airports", required=True, help="Airports CSV file")
    search_parser.add_argument("--limit", type=int, help="Maximum number of results")

    return parser.parse_args(argv)


def load_settings(config_path: str | None) -> PlannerSettings:
    """Load planner settings, falling back to defaults without a file.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    if not config_path:
        return PlannerSettings()
    return PlannerSettings.from_config(ConfigLoader.load(config_path))


def format_route(route: Route) -> str:
    """Render a route as a plain text table."""
    lines = [
        f"{route.origin.icao} -> {route.destination.icao}: {route.route_string}",
        f"{'FROM':<8}{'TO':<8}{'DIST':>8}{'CRS':>6}",
    ]
    for leg in route.legs:
        lines.append(
            f"{leg.from_ident:<8}{leg.to_ident:<8}{leg.distance_nm:>8.1f}{leg.course_deg:>6.0f}"
        )
    lines.append(
        f"Total {route.total_distance_nm:.1f} nm (direct {route.direct_distance_nm:.1f} nm)"
    )
    return "\n".join(lines)


def run_route(args: argparse.Namespace, settings: PlannerSettings) -> int:
    """Build and print a route."""
    settings = settings.with_overrides(
        corridor_width_nm=args.corridor_width,
        min_endpoint_distance_nm=args.min_distance,
    )

    airports = AirportDatabase.load_from_csv(args.airports)
    navaids = NavDatabase.load_from_csv(args.navaids)
    for name, result in (("airports", airports), ("navaids", navaids)):
        if result.skipped:
            logger.warning("Skipped %d malformed rows in %s", result.skipped_count, name)

    try:
        route = RouteBuilder(settings).build_route_between(
            args.origin, args.destination, airports.catalog, navaids.catalog
        )
    except UnknownAirportError as e:
        print(str(e), file=sys.stderr)
        return EXIT_UNKNOWN_AIRPORT

    output = route.to_dict()
    plan = None
    if args.callsign:
        plan = FlightPlan(
            callsign=args.callsign.upper(),
            aircraft_type=args.aircraft.upper(),
            route=route,
            flight_level=args.fl,
            pax=args.pax,
            cargo=args.cargo,
        )
        for problem in plan.validate():
            logger.warning("Flight plan: %s", problem)
        output["dispatch_url"] = plan.dispatch_url()

    if args.format == "yaml":
        print(yaml.safe_dump(output, sort_keys=False), end="")
    else:
        print(format_route(route))
        if plan is not None:
            print(output["dispatch_url"])
    return EXIT_OK


def run_search(args: argparse.Namespace, settings: PlannerSettings) -> int:
    """Print airports matching a query."""
    airports = AirportDatabase.load_from_csv(args.airports).catalog
    limit = args.limit if args.limit is not None else settings.search_limit

    for airport in airports.search(args.query, limit=limit):
        iata = f" ({airport.iata})" if airport.iata else ""
        city = f"{airport.city}, " if airport.city else ""
        print(f"{airport.icao:<6}{airport.name} - {city}{airport.iso_country}{iata}")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)

    try:
        initialize_logging(args.log_config)
        settings = load_settings(args.config)

        if args.command == "route":
            return run_route(args, settings)
        return run_search(args, settings)
    except (ConfigError, LoggingError, FileNotFoundError) as e:
        logger.error("%s", e)
        print(str(e), file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return EXIT_ERROR
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
