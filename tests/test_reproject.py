"""
Unit tests for the WGS84 -> target CRS reprojection context
"""

import warnings
from unittest.mock import patch

import pytest
from pyproj import Transformer
from shapely.geometry import LineString, Point

from geopap.errors import ReprojectionError, UnsupportedProjectionError
from geopap.services.reproject.context import ReprojectionContext


class TestReprojectionContext:
    """Test cases for ReprojectionContext"""

    def test_identity_keeps_lon_lat_order(self):
        """WGS84 target leaves x=lon, y=lat untouched"""
        ctx = ReprojectionContext(4326)
        p = ctx.transform(Point(11.0, 45.0))
        assert p.x == pytest.approx(11.0)
        assert p.y == pytest.approx(45.0)

    def test_utm_matches_pyproj(self):
        """Projected output equals a direct pyproj transform"""
        ctx = ReprojectionContext("EPSG:32632")
        p = ctx.transform(Point(11.0, 45.0))
        x, y = Transformer.from_crs(4326, 32632, always_xy=True).transform(11.0, 45.0)
        assert p.x == pytest.approx(x, abs=1e-6)
        assert p.y == pytest.approx(y, abs=1e-6)
        assert ctx.crs.to_epsg() == 32632

    def test_line_keeps_vertices(self):
        """Line vertices are transformed one by one, none added or removed"""
        ctx = ReprojectionContext("EPSG:3857")
        line = ctx.transform(LineString([(10.0, 45.0), (10.1, 45.1), (10.2, 45.0)]))
        assert len(line.coords) == 3

    @pytest.mark.parametrize("target", ["EPSG:999999", "not a crs"])
    def test_unknown_target_is_fatal(self, target):
        """Unknown target CRS raises UnsupportedProjectionError"""
        with pytest.raises(UnsupportedProjectionError) as ei:
            ReprojectionContext(target)
        assert ei.value.__cause__ is not None

    def test_transformer_built_once(self):
        """The transform is derived once and reused for every geometry"""
        with patch.object(Transformer, "from_crs", wraps=Transformer.from_crs) as from_crs:
            ctx = ReprojectionContext("EPSG:32632")
            for i in range(5):
                ctx.transform(Point(10.0 + i * 0.1, 45.0))
        assert from_crs.call_count == 1

    def test_out_of_domain_geometry(self):
        """A coordinate outside the projection domain raises ReprojectionError"""
        ctx = ReprojectionContext("EPSG:32632")
        with pytest.raises(ReprojectionError):
            ctx.transform(Point(11.0, 95.0))

    def test_target_without_esri_wkt_is_fatal(self):
        """A geocentric target has no .prj form and is refused up front"""
        with pytest.raises(UnsupportedProjectionError):
            ReprojectionContext("EPSG:4978")

    def test_prj_wkt(self):
        ctx = ReprojectionContext("EPSG:32632")
        assert ctx.prj_wkt.startswith("PROJCS[")

    def test_z_is_dropped(self):
        ctx = ReprojectionContext("EPSG:32632")
        assert not ctx.transform(Point(11.0, 45.0, 120.0)).has_z

    def test_no_deprecation_warning(self):
        ctx = ReprojectionContext("EPSG:32632")
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            ctx.transform(LineString([(10.0, 45.0), (10.1, 45.1)]))
