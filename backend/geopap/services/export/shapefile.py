# backend/geopap/services/export/shapefile.py
import shapefile  # pyshp
from pathlib import Path
from typing import Optional, Tuple

from geopap import config
from geopap.logging_setup import get_logger
from geopap.services.features.schema import FeatureCollection, FieldSpec
from geopap.services.reproject.context import PRJ_WKT_VERSION

log = get_logger(__name__)

_SHAPE_TYPES = {"Point": shapefile.POINT, "MultiLineString": shapefile.POLYLINE}

# DBF field definitions: (type, size, decimal)
_FIELD_TYPES = {"text": ("C", 254, 0), "number": ("N", 19, 6)}

DBF_NAME_LENGTH = 10


def dbf_name(name: str) -> str:
    """DBF headers hold 10-character field names: DESCRIPTION is stored as DESCRIPTIO."""
    return name[:DBF_NAME_LENGTH]


def _dbf_field(spec: FieldSpec) -> Tuple[str, str, int, int]:
    return (dbf_name(spec.name),) + _FIELD_TYPES[spec.kind]


class ShapefileSink:
    """Writes one fully assembled feature collection as <out_dir>/<name>.shp (+ .shx .dbf .prj .cpg)."""

    def __init__(self, out_dir: Path, encoding: Optional[str] = None):
        self.out_dir = Path(out_dir)
        self.encoding = encoding or config.SHAPEFILE_ENCODING

    def write(self, name: str, collection: FeatureCollection) -> Path:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        schema = collection.schema
        path_base = self.out_dir / name

        w = shapefile.Writer(str(path_base), shapeType=_SHAPE_TYPES[schema.geometry_type])
        w.encoding = self.encoding
        for spec in schema.fields:
            w.field(*_dbf_field(spec))
        for feat in collection:
            geom = feat.geometry
            if schema.geometry_type == "Point":
                w.point(geom.x, geom.y)
            else:
                w.line([list(part.coords) for part in geom.geoms])
            w.record(*feat.values)
        w.close()

        if schema.crs is not None:
            (path_base.with_suffix('.prj')).write_text(schema.crs.to_wkt(PRJ_WKT_VERSION))
        (path_base.with_suffix('.cpg')).write_text(self.encoding)

        out = path_base.with_suffix('.shp')
        log.info("Dataset written", extra={"extra": {"path": str(out), "features": len(collection)}})
        return out
