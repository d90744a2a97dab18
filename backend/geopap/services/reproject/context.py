# backend/geopap/services/reproject/context.py
from __future__ import annotations

import math
from typing import Union

import shapely
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError
from shapely.geometry.base import BaseGeometry

from geopap.errors import ReprojectionError, UnsupportedProjectionError

SOURCE_EPSG = 4326  # archives store WGS84 lon/lat
PRJ_WKT_VERSION = "WKT1_ESRI"


class ReprojectionContext:
    """
    WGS84 -> target CRS transform, built once per run and reused for every
    geometry of every pass. Not meant to be shared between threads.

    The target must also have an ESRI WKT form, which is what goes into
    each dataset's .prj file.
    """

    def __init__(self, target_crs: Union[int, str, CRS]):
        try:
            self.source = CRS.from_epsg(SOURCE_EPSG)
            self.crs = CRS.from_user_input(target_crs)
            self.prj_wkt = self.crs.to_wkt(PRJ_WKT_VERSION)
            self._tf = Transformer.from_crs(self.source, self.crs, always_xy=True)
        except (CRSError, ProjError) as exc:
            raise UnsupportedProjectionError(
                f"No transform from EPSG:{SOURCE_EPSG} to {target_crs!r}: {exc}"
            ) from exc
        if not self.prj_wkt:
            raise UnsupportedProjectionError(f"{target_crs!r} has no {PRJ_WKT_VERSION} representation")

    def __repr__(self) -> str:
        return f"ReprojectionContext(EPSG:{SOURCE_EPSG} -> {self.crs.to_string()})"

    def _xy(self, x, y):
        # 2D only: altitude is not carried into the datasets
        return self._tf.transform(x, y, errcheck=True)

    def transform(self, geom: BaseGeometry) -> BaseGeometry:
        try:
            out = shapely.transform(geom, self._xy, interleaved=False)
        except ProjError as exc:
            raise ReprojectionError(f"Cannot reproject {geom.wkt}: {exc}") from exc
        if out.is_empty or not all(math.isfinite(v) for v in out.bounds):
            raise ReprojectionError(f"Reprojection of {geom.wkt} gave non-finite coordinates")
        return out
