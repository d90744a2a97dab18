# scripts/validate_crs.py
# Check that WGS84 archives can be reprojected into each target CRS.
import sys

from geopap.errors import UnsupportedProjectionError
from geopap.services.reproject.context import ReprojectionContext

codes = sys.argv[1:] or ["EPSG:3857", "EPSG:32632", "EPSG:3003", "EPSG:6677"]
failed = 0
for c in codes:
    try:
        ctx = ReprojectionContext(c)
        print(c, "ok", ctx.crs.name)
    except UnsupportedProjectionError as e:
        failed += 1
        print(c, "FAILED", e)
sys.exit(1 if failed else 0)
