# backend/geopap/services/media/geotag.py
import re
from pathlib import Path
from typing import Dict, Mapping, Tuple

from geopap.config import AZIMUTH_UNSET
from geopap.errors import MediaNameError, SidecarError

_NAME_DELIMITERS = re.compile(r"[_|.]")
_PROP_SEPARATOR = re.compile(r"\s*[=:]\s*")
_PROP_ESCAPE = re.compile(r"\\(.)")


def exif_decode(text: str) -> float:
    """
    Rational degrees/minutes/seconds to decimal degrees.
    e.g. "44/1,10/1,28110/1000" -> 44 + 10/60 + 28.11/3600
    """
    try:
        terms = [t.strip().split("/") for t in text.strip().split(",")]
        d, m, s = (float(num) / float(den) for num, den in terms)
    except (ValueError, ZeroDivisionError) as exc:
        raise SidecarError(f"Bad EXIF rational coordinate: {text!r}") from exc
    return d + m / 60.0 + s / 3600.0


def exif_encode(value: float) -> str:
    """
    Decimal degrees to the rational form written by the capture app.
    Every step truncates, seconds keep three decimals:
    exif_encode(44.1736417) == "44/1,10/1,25110/1000"
    """
    degrees = int(value)
    rest = (value - degrees) * 60
    minutes = int(rest)
    rest = (rest - minutes) * 60000
    return f"{degrees}/1,{minutes}/1,{int(rest)}/1000"


def is_exif(lat_text: str) -> bool:
    return "/" in lat_text


def decode_coordinate(text: str, exif: bool) -> float:
    if exif:
        return exif_decode(text)
    try:
        return float(text)
    except ValueError as exc:
        raise SidecarError(f"Bad decimal coordinate: {text!r}") from exc


def parse_media_name(name: str) -> Tuple[str, str]:
    """IMG_20130312_101533.jpg -> ("20130312", "101533")"""
    tokens = _NAME_DELIMITERS.split(name)
    if len(tokens) < 4 or not tokens[1] or not tokens[2]:
        raise MediaNameError(f"No date/time tokens in media name: {name}")
    return tokens[1], tokens[2]


def load_sidecar(path: Path) -> Dict[str, str]:
    # java.util.Properties text format, ISO-8859-1
    props: Dict[str, str] = {}
    for raw in Path(path).read_text(encoding="latin-1").splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        parts = _PROP_SEPARATOR.split(line, maxsplit=1)
        value = parts[1] if len(parts) > 1 else ""
        props[parts[0]] = _PROP_ESCAPE.sub(r"\1", value)
    return props


def _required(props: Mapping[str, str], key: str) -> str:
    value = (props.get(key) or "").strip()
    if not value:
        raise SidecarError(f"Sidecar has no {key!r}")
    return value


def read_geotag(props: Mapping[str, str]) -> Tuple[float, float, float, float]:
    """(lat, lon, altim, azimuth) from sidecar properties."""
    azimuth = AZIMUTH_UNSET
    azimuth_text = props.get("azimuth")
    if azimuth_text:
        try:
            azimuth = float(azimuth_text)
        except ValueError:
            azimuth = AZIMUTH_UNSET

    lat_text = _required(props, "latitude")
    lon_text = _required(props, "longitude")
    alt_text = _required(props, "altim")

    # the encoding is detected on latitude and applied to both
    exif = is_exif(lat_text)
    lat = decode_coordinate(lat_text, exif)
    lon = decode_coordinate(lon_text, exif)
    try:
        altim = float(alt_text)
    except ValueError as exc:
        raise SidecarError(f"Bad altitude: {alt_text!r}") from exc
    return lat, lon, altim, azimuth
