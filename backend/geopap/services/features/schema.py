# backend/geopap/services/features/schema.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from pyproj import CRS
from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from geopap.errors import ReprojectionError, SchemaError
from geopap.logging_setup import get_logger
from geopap.schemas.commons import FieldKind, GeometryType
from geopap.services.geometry.reconstruct import as_multi_line
from geopap.services.progress import ProgressCallback, no_progress
from geopap.services.reproject.context import ReprojectionContext

log = get_logger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = "text"


@dataclass(frozen=True)
class FeatureSchema:
    """Ordered attribute fields plus geometry type and CRS of one dataset."""

    type_name: str
    geometry_type: GeometryType
    fields: Tuple[FieldSpec, ...]
    crs: Optional[CRS] = None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def bind(self, crs: CRS) -> "FeatureSchema":
        return replace(self, crs=crs)


# Field names are kept to what the mapping client already expects; numbers
# declared as text are stored stringified.
NOTES_SCHEMA = FeatureSchema(
    "geopaparazzinotes",
    "Point",
    (FieldSpec("DESCRIPTION"), FieldSpec("TIMESTAMP"), FieldSpec("ALTIM")),
)
GPS_LINES_SCHEMA = FeatureSchema(
    "geopaparazzigpslines",
    "MultiLineString",
    (FieldSpec("STARTDATE"), FieldSpec("ENDDATE"), FieldSpec("DESCR")),
)
GPS_POINTS_SCHEMA = FeatureSchema(
    "geopaparazzigpspoints",
    "Point",
    (FieldSpec("ALTIMETRY"), FieldSpec("DATE")),
)
MEDIA_SCHEMA = FeatureSchema(
    "geopaparazzimedia",
    "Point",
    (FieldSpec("ALTIMETRY"), FieldSpec("DATE"), FieldSpec("AZIMUTH", "number"), FieldSpec("IMAGE")),
)


@dataclass
class Feature:
    fid: str
    geometry: BaseGeometry
    values: Tuple[Any, ...]


@dataclass
class FeatureCollection:
    schema: FeatureSchema
    features: List[Feature] = field(default_factory=list)
    skipped: int = 0  # records dropped because their geometry could not be reprojected

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def add(self, feature: Feature) -> None:
        self.features.append(feature)

    def properties(self, feature: Feature) -> Dict[str, Any]:
        return dict(zip(self.schema.field_names, feature.values))


def as_text(value: Any) -> Optional[str]:
    """Text-field value: numbers are stringified as floats (120 -> "120.0")."""
    if value is None or isinstance(value, str):
        return value
    return str(float(value))


def _check_value(spec: FieldSpec, value: Any) -> None:
    if value is None:
        return
    if spec.kind == "text" and not isinstance(value, str):
        raise SchemaError(f"{spec.name} is a text field, got {type(value).__name__}")
    if spec.kind == "number" and (isinstance(value, bool) or not isinstance(value, Real)):
        raise SchemaError(f"{spec.name} is a number field, got {type(value).__name__}")


def build_feature(schema: FeatureSchema, geometry: BaseGeometry, values: Sequence[Any], fid: str) -> Feature:
    """Feature whose geometry type and value order/types match `schema` exactly."""
    if schema.geometry_type == "MultiLineString" and isinstance(geometry, LineString):
        geometry = as_multi_line(geometry)
    if geometry.geom_type != schema.geometry_type:
        raise SchemaError(f"{schema.type_name} expects {schema.geometry_type}, got {geometry.geom_type}")
    if len(values) != len(schema.fields):
        raise SchemaError(f"{schema.type_name} expects {len(schema.fields)} values, got {len(values)}")
    for spec, value in zip(schema.fields, values):
        _check_value(spec, value)
    return Feature(fid=fid, geometry=geometry, values=tuple(values))


def assemble_features(
    schema: FeatureSchema,
    records: Iterable[Any],
    to_geometry: Callable[[Any], Optional[BaseGeometry]],
    to_values: Callable[[Any], Sequence[Any]],
    context: ReprojectionContext,
    on_skip: Optional[Callable[[Any, Exception], None]] = None,
    progress: ProgressCallback = no_progress,
    task: str = "",
) -> FeatureCollection:
    """
    Shared by every pass: source geometry -> one reprojection -> typed feature.
    `to_geometry` returning None drops the record silently; a record whose
    geometry cannot be reprojected is counted in `skipped` and handed to
    `on_skip`.
    """
    schema = schema.bind(context.crs)
    collection = FeatureCollection(schema)
    records = list(records)
    total = len(records)
    task = task or f"Import {schema.type_name}..."
    for i, record in enumerate(records, start=1):
        geom = to_geometry(record)
        if geom is not None:
            try:
                projected = context.transform(geom)
            except ReprojectionError as exc:
                collection.skipped += 1
                log.debug("Skipping record", extra={"extra": {"schema": schema.type_name, "error": str(exc)}})
                if on_skip is not None:
                    on_skip(record, exc)
            else:
                fid = f"{schema.type_name}.{len(collection)}"
                collection.add(build_feature(schema, projected, to_values(record), fid))
        progress(task, i, total)
    return collection
