# backend/geopap/services/geometry/reconstruct.py
from typing import Iterable, Optional

from shapely.geometry import LineString, MultiLineString, Point

from geopap.schemas.survey import GpsPoint


def build_point(lon: float, lat: float, drop_no_fix: bool = True) -> Optional[Point]:
    # EPSG:4326, x=lon y=lat; an exact 0 in either component is "no fix"
    if drop_no_fix and (lat == 0 or lon == 0):
        return None
    return Point(lon, lat)


def build_track(points: Iterable[GpsPoint]) -> Optional[LineString]:
    """
    Track line through the log points in the given (timestamp) order.
    Vertices map 1:1 to points: no dedup, simplification or smoothing.
    Returns None when fewer than 2 points remain.
    """
    coords = [(p.lon, p.lat) for p in points]
    if len(coords) < 2:
        return None
    return LineString(coords)


def as_multi_line(line: LineString) -> MultiLineString:
    # the lines dataset stores every track as multi-line, single-part or not
    if isinstance(line, MultiLineString):
        return line
    return MultiLineString([line])
