"""Tests for the command line entry point."""

import csv
from pathlib import Path

import pytest
import yaml

from flightplanner.airports.database import AIRPORT_FIELDS
from flightplanner.main import EXIT_ERROR, EXIT_OK, EXIT_UNKNOWN_AIRPORT, main, parse_args
from flightplanner.navigation.navdata import NAVAID_FIELDS

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def write_csv(path: Path, header, rows) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def data_files(tmp_path, make_airport_row, make_navaid_row):
    """Airport, navaid and logging files for an equatorial test world."""
    airports = write_csv(
        tmp_path / "airports.csv",
        AIRPORT_FIELDS,
        [
            make_airport_row("ORIG", "large_airport", 0.0, 0.0, "Origin Intl", "Start", "ORG"),
            make_airport_row("DEST", "large_airport", 0.0, 10.0, "Destination Intl", "Finish"),
            make_airport_row("SMAL", "small_airport", 0.0, 5.0),
        ],
    )
    navaids = write_csv(
        tmp_path / "navaids.csv",
        NAVAID_FIELDS,
        [
            make_navaid_row("NEAR", "VOR", 0.0, 0.1666),
            make_navaid_row("ALFA", "VOR", 0.0, 3.0),
            make_navaid_row("BRVO", "VORDME", 0.005, 7.0),
            make_navaid_row("NDBX", "NDB", 0.0, 6.0, frequency_khz="350"),
            make_navaid_row("BADX", "VOR", "unknown", 4.0),
        ],
    )
    log_config = tmp_path / "logging.yaml"
    log_config.write_text(
        "file:\n  enabled: false\nconsole:\n  level: CRITICAL\n", encoding="utf-8"
    )
    return {
        "airports": str(airports),
        "navaids": str(navaids),
        "log_config": str(log_config),
        "dir": tmp_path,
    }


def route_args(files, *extra):
    return [
        "--log-config",
        files["log_config"],
        "route",
        *extra,
        "--airports",
        files["airports"],
        "--navaids",
        files["navaids"],
    ]


class TestParseArgs:
    """Test argument parsing."""

    def test_route_defaults(self) -> None:
        """Test route options default to unset."""
        args = parse_args(["route", "KJFK", "EGLL", "--airports", "a.csv", "--navaids", "n.csv"])

        assert args.command == "route"
        assert args.origin == "KJFK"
        assert args.destination == "EGLL"
        assert args.format == "text"
        assert args.corridor_width is None
        assert args.callsign is None

    def test_search_query_optional(self) -> None:
        """Test the search query may be omitted."""
        args = parse_args(["search", "--airports", "a.csv"])

        assert args.command == "search"
        assert args.query == ""

    def test_config_before_or_after_command(self) -> None:
        """Test --config and --log-config are read on either side of the subcommand."""
        before = parse_args(
            ["--config", "p.yaml", "--log-config", "l.yaml", "search", "--airports", "a.csv"]
        )
        after = parse_args(
            ["search", "--airports", "a.csv", "--config", "p.yaml", "--log-config", "l.yaml"]
        )
        unset = parse_args(["search", "--airports", "a.csv"])

        assert (before.config, before.log_config) == ("p.yaml", "l.yaml")
        assert (after.config, after.log_config) == ("p.yaml", "l.yaml")
        assert (unset.config, unset.log_config) == (None, None)

    def test_command_required(self) -> None:
        """Test a subcommand is required."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestRouteCommand:
    """Test the route subcommand."""

    def test_text_output(self, data_files, capsys) -> None:
        """Test a route is printed as a leg table."""
        exit_code = main(route_args(data_files, "ORIG", "DEST"))

        out = capsys.readouterr().out
        assert exit_code == EXIT_OK
        assert out.splitlines()[0] == "ORIG -> DEST: ALFA BRVO"
        assert "BRVO    DEST" in out
        assert "Total" in out

    def test_lowercase_codes(self, data_files, capsys) -> None:
        """Test ICAO codes are accepted in any case."""
        assert main(route_args(data_files, "orig", "dest")) == EXIT_OK
        assert "ALFA BRVO" in capsys.readouterr().out

    def test_yaml_output(self, data_files, capsys) -> None:
        """Test YAML output holds the serialized route."""
        exit_code = main(route_args(data_files, "ORIG", "DEST", "--format", "yaml"))

        data = yaml.safe_load(capsys.readouterr().out)
        assert exit_code == EXIT_OK
        assert data["route"] == "ALFA BRVO"
        assert [wp["identifier"] for wp in data["waypoints"]] == ["ALFA", "BRVO"]
        assert data["origin"]["icao"] == "ORIG"

    def test_min_distance_override(self, data_files, capsys) -> None:
        """Test the endpoint margin can be set from the command line."""
        assert main(route_args(data_files, "ORIG", "DEST", "--min-distance", "0")) == EXIT_OK
        assert "NEAR ALFA BRVO" in capsys.readouterr().out

    def test_config_file(self, data_files, capsys) -> None:
        """Test settings are read from --config."""
        config = data_files["dir"] / "planner.yaml"
        config.write_text("route:\n  waypoint_types: [VOR]\n", encoding="utf-8")

        exit_code = main(["--config", str(config), *route_args(data_files, "ORIG", "DEST")])

        assert exit_code == EXIT_OK
        assert "ORIG -> DEST: ALFA\n" in capsys.readouterr().out

    def test_config_after_route_options(self, data_files, capsys) -> None:
        """Test --config is accepted after the route arguments."""
        config = data_files["dir"] / "planner.yaml"
        config.write_text("route:\n  waypoint_types: [VOR]\n", encoding="utf-8")

        exit_code = main(route_args(data_files, "ORIG", "DEST", "--config", str(config)))

        assert exit_code == EXIT_OK
        assert "ORIG -> DEST: ALFA\n" in capsys.readouterr().out

    @pytest.mark.parametrize("option", ["--corridor-width", "--min-distance"])
    def test_nan_override_rejected(self, data_files, capsys, option) -> None:
        """Test a NaN width or margin is reported instead of routing."""
        exit_code = main(route_args(data_files, "ORIG", "DEST", option, "nan"))

        assert exit_code == EXIT_ERROR
        assert "non-negative" in capsys.readouterr().err

    def test_dispatch_link(self, data_files, capsys) -> None:
        """Test a callsign adds a SimBrief dispatch link."""
        options = ["--format", "yaml", "--callsign", "baw117", "--aircraft", "b77w", "--fl", "350"]
        args = route_args(data_files, "ORIG", "DEST", *options)

        assert main(args) == EXIT_OK

        url = yaml.safe_load(capsys.readouterr().out)["dispatch_url"]
        assert "airline=BAW" in url
        assert "fltnum=117" in url
        assert "type=B77W" in url
        assert "route=ALFA%20BRVO" in url

    def test_unknown_airport(self, data_files, capsys) -> None:
        """Test an unknown airport exits with its own code."""
        exit_code = main(route_args(data_files, "ORIG", "ZZZZ"))

        assert exit_code == EXIT_UNKNOWN_AIRPORT
        assert "Airport not found: ZZZZ" in capsys.readouterr().err

    def test_filtered_airport_unknown(self, data_files) -> None:
        """Test small airports are not routable."""
        assert main(route_args(data_files, "ORIG", "SMAL")) == EXIT_UNKNOWN_AIRPORT

    def test_missing_data_file(self, data_files, capsys) -> None:
        """Test a missing CSV file is reported."""
        data_files["navaids"] = str(data_files["dir"] / "missing.csv")

        assert main(route_args(data_files, "ORIG", "DEST")) == EXIT_ERROR
        assert "missing.csv" in capsys.readouterr().err

    def test_invalid_config(self, data_files, capsys) -> None:
        """Test an invalid settings file is reported."""
        config = data_files["dir"] / "planner.yaml"
        config.write_text("route:\n  corridor_width_nm: -1\n", encoding="utf-8")

        exit_code = main(["--config", str(config), *route_args(data_files, "ORIG", "DEST")])

        assert exit_code == EXIT_ERROR
        assert "corridor_width_nm" in capsys.readouterr().err


class TestSearchCommand:
    """Test the search subcommand."""

    def _search(self, files, *extra):
        return [
            "--log-config",
            files["log_config"],
            "search",
            *extra,
            "--airports",
            files["airports"],
        ]

    def test_search(self, data_files, capsys) -> None:
        """Test matches are printed one per line."""
        assert main(self._search(data_files, "origin")) == EXIT_OK

        assert capsys.readouterr().out == "ORIG  Origin Intl - Start, XX (ORG)\n"

    def test_blank_search_lists_large_airports(self, data_files, capsys) -> None:
        """Test an empty query lists large airport suggestions."""
        assert main(self._search(data_files)) == EXIT_OK

        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in lines] == ["ORIG", "DEST"]

    def test_search_limit(self, data_files, capsys) -> None:
        """Test --limit caps the results."""
        assert main(self._search(data_files, "intl", "--limit", "1")) == EXIT_OK

        assert len(capsys.readouterr().out.splitlines()) == 1
