# backend/geopap/config.py
from pathlib import Path
import os

# Archive layout (Geopaparazzi project folder)
ARCHIVE_DB_NAME = "geopaparazzi.db"
MEDIA_FOLDER = "media"
LEGACY_MEDIA_FOLDER = "pictures"  # older Geopaparazzi releases
SIDECAR_SUFFIX = ".properties"
MEDIA_EXTENSIONS = ("jpg", "JPG", "png", "PNG", "3gp")

AZIMUTH_UNSET = -9999.0

# Output dataset names (written as <name>.shp)
NOTES_DATASET = "notes"
GPS_LINES_DATASET = "gpslines"
GPS_POINTS_DATASET = "gpspoints"
MEDIA_DATASET = "mediapoints"

# 1) GEOPAP_DATA_DIR if set
# 2) /app/data inside the container
# 3) <repo root>/data for local runs
_data_dir_env = os.getenv("GEOPAP_DATA_DIR")
if _data_dir_env:
    DATA_DIR = Path(_data_dir_env)
else:
    _container_data = Path("/app/data")
    if _container_data.exists():
        DATA_DIR = _container_data
    else:
        # backend/geopap/config.py -> ../../.. = <repo root>
        DATA_DIR = Path(__file__).resolve().parents[2] / "data"

QUERY_TIMEOUT_S = float(os.getenv("GEOPAP_QUERY_TIMEOUT", "30"))
SHAPEFILE_ENCODING = os.getenv("GEOPAP_ENCODING", "UTF-8")


def default_output_dir() -> Path:
    return DATA_DIR / "exports"
