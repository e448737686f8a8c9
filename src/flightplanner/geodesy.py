"""Great-circle geometry on a spherical Earth.

All distances are in nautical miles and all angles in degrees. The scalar
functions work on Coordinate values; the batch functions take numpy arrays
of latitudes/longitudes and are used when scanning a whole catalog.

Typical usage:
    from flightplanner.geodesy import Coordinate, distance_nm

    kjfk = Coordinate(40.6398, -73.7789)
    egll = Coordinate(51.4706, -0.461941)
    print(distance_nm(kjfk, egll))
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

EARTH_RADIUS_NM = 3440.065


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude is non-finite or out of range."""


@dataclass(frozen=True)
class Coordinate:
    """Geographic position in decimal degrees.

    Attributes:
        latitude: Latitude in degrees, -90 to 90 (north positive)
        longitude: Longitude in degrees, -180 to 180 (east positive)

    Examples:
        >>> Coordinate(37.6213, -122.3790)
        Coordinate(latitude=37.6213, longitude=-122.379)
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _check_finite(self.latitude, self.longitude)
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinateError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinateError(f"Longitude out of range: {self.longitude}")

    def __str__(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


def _check_finite(*values: float) -> None:
    for value in values:
        try:
            finite = math.isfinite(value)
        except TypeError as e:
            raise InvalidCoordinateError(f"Coordinate value is not a number: {value!r}") from e
        if not finite:
            raise InvalidCoordinateError(f"Coordinate value is not finite: {value!r}")


def _radians(coord: Coordinate) -> tuple[float, float]:
    _check_finite(coord.latitude, coord.longitude)
    return math.radians(coord.latitude), math.radians(coord.longitude)


def distance_nm(a: Coordinate, b: Coordinate) -> float:
    """Calculate great circle distance between two positions.

    Uses the Haversine formula for accuracy over large distances.

    Args:
        a: First position
        b: Second position

    Returns:
        Distance in nautical miles (0.0 for identical positions)

    Raises:
        InvalidCoordinateError: If either position is not finite
    """
    lat1, lon1 = _radians(a)
    lat2, lon2 = _radians(b)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h just past 1 for antipodal points
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return c * EARTH_RADIUS_NM


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Calculate initial true bearing from a to b.

    Args:
        a: Start position
        b: End position

    Returns:
        Bearing in degrees, normalized to [0, 360). Identical positions
        give 0.0.

    Raises:
        InvalidCoordinateError: If either position is not finite
    """
    lat1, lon1 = _radians(a)
    lat2, lon2 = _radians(b)
    if a.latitude == b.latitude and a.longitude == b.longitude:
        return 0.0

    dlon = lon2 - lon1
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)

    result = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
    if result >= 360.0:
        result = 0.0
    return result


def cross_track_distance_nm(
    point: Coordinate, path_start: Coordinate, path_end: Coordinate
) -> float:
    """Calculate signed distance of a point from a great circle path.

    The path is the great circle through path_start and path_end. Positive
    values lie to the right of the path direction, negative to the left.
    Compare abs() of the result against a corridor half-width.

    Args:
        point: Position to measure
        path_start: First point of the path
        path_end: Second point of the path

    Returns:
        Cross-track distance in nautical miles

    Raises:
        InvalidCoordinateError: If any position is not finite
    """
    d13 = distance_nm(path_start, point) / EARTH_RADIUS_NM
    theta13 = math.radians(bearing_deg(path_start, point))
    theta12 = math.radians(bearing_deg(path_start, path_end))

    s = math.sin(d13) * math.sin(theta13 - theta12)
    return math.asin(min(max(s, -1.0), 1.0)) * EARTH_RADIUS_NM


def intermediate_point(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Find the point a given fraction of the way along the great circle a->b.

    Args:
        a: Start position
        b: End position
        fraction: 0.0 returns a, 1.0 returns b

    Returns:
        Interpolated position
    """
    _check_finite(fraction)
    lat1, lon1 = _radians(a)
    lat2, lon2 = _radians(b)
    delta = distance_nm(a, b) / EARTH_RADIUS_NM
    if delta == 0.0:
        return a

    sin_delta = math.sin(delta)
    wa = math.sin((1 - fraction) * delta) / sin_delta
    wb = math.sin(fraction * delta) / sin_delta

    x = wa * math.cos(lat1) * math.cos(lon1) + wb * math.cos(lat2) * math.cos(lon2)
    y = wa * math.cos(lat1) * math.sin(lon1) + wb * math.cos(lat2) * math.sin(lon2)
    z = wa * math.sin(lat1) + wb * math.sin(lat2)

    lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
    lon = math.degrees(math.atan2(y, x))
    return Coordinate(lat, lon)


def _check_finite_array(*arrays: npt.NDArray[np.float64]) -> None:
    for array in arrays:
        if not np.all(np.isfinite(array)):
            raise InvalidCoordinateError("Coordinate array contains non-finite values")


def distances_nm(
    origin: Coordinate, lats: npt.ArrayLike, lons: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Vectorized distance_nm from one origin to many positions.

    Args:
        origin: Reference position
        lats: Latitudes in degrees
        lons: Longitudes in degrees

    Returns:
        Array of distances in nautical miles
    """
    lat_arr = np.asarray(lats, dtype=np.float64)
    lon_arr = np.asarray(lons, dtype=np.float64)
    _check_finite_array(lat_arr, lon_arr)
    lat1, lon1 = _radians(origin)
    lat2 = np.radians(lat_arr)
    lon2 = np.radians(lon_arr)

    h = (
        np.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2
    )
    h = np.clip(h, 0.0, 1.0)
    return 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h)) * EARTH_RADIUS_NM


def bearings_deg(
    origin: Coordinate, lats: npt.ArrayLike, lons: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Vectorized bearing_deg from one origin to many positions."""
    lat_arr = np.asarray(lats, dtype=np.float64)
    lon_arr = np.asarray(lons, dtype=np.float64)
    _check_finite_array(lat_arr, lon_arr)
    lat1, lon1 = _radians(origin)
    lat2 = np.radians(lat_arr)
    dlon = np.radians(lon_arr) - lon1

    y = np.sin(dlon) * np.cos(lat2)
    x = math.cos(lat1) * np.sin(lat2) - math.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    result = (np.degrees(np.arctan2(y, x)) + 360.0) % 360.0
    result = np.where(result >= 360.0, 0.0, result)
    same = (lat_arr == origin.latitude) & (lon_arr == origin.longitude)
    return np.where(same, 0.0, result)


def cross_track_distances_nm(
    lats: npt.ArrayLike, lons: npt.ArrayLike, path_start: Coordinate, path_end: Coordinate
) -> npt.NDArray[np.float64]:
    """Vectorized cross_track_distance_nm for many positions against one path.

    Args:
        lats: Latitudes in degrees
        lons: Longitudes in degrees
        path_start: First point of the path
        path_end: Second point of the path

    Returns:
        Array of signed cross-track distances in nautical miles
    """
    d13 = distances_nm(path_start, lats, lons) / EARTH_RADIUS_NM
    theta13 = np.radians(bearings_deg(path_start, lats, lons))
    theta12 = math.radians(bearing_deg(path_start, path_end))

    s = np.clip(np.sin(d13) * np.sin(theta13 - theta12), -1.0, 1.0)
    return np.arcsin(s) * EARTH_RADIUS_NM
