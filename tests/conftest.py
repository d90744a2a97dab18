"""
Shared fixtures: a throwaway Geopaparazzi archive (geopaparazzi.db + media).
"""

import os
import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# keep the app's data folder out of the repository while testing
os.environ.setdefault("GEOPAP_DATA_DIR", tempfile.mkdtemp(prefix="geopap-test-"))

from geopap.models.base import Base
from geopap.models.gpslog import GpsLogData, GpsLogHeader
from geopap.models.note import Note


def create_archive(archive_dir: Path, notes=(), logs=(), points=(), sql=()) -> Path:
    """
    notes:  (lat, lon, altim, ts, text)
    logs:   (id, startts, endts, text)
    points: (logid, lat, lon, altim, ts)
    sql:    raw statements run after the inserts (for corrupt rows)
    """
    archive_dir.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{archive_dir / 'geopaparazzi.db'}")
    Base.metadata.create_all(engine)
    with Session(engine) as db:
        for lat, lon, altim, ts, text in notes:
            db.add(Note(lat=lat, lon=lon, altim=altim, ts=ts, text=text))
        for log_id, startts, endts, text in logs:
            db.add(GpsLogHeader(id=log_id, startts=startts, endts=endts, text=text))
        db.flush()
        for logid, lat, lon, altim, ts in points:
            db.add(GpsLogData(logid=logid, lat=lat, lon=lon, altim=altim, ts=ts))
        db.commit()
    with engine.begin() as conn:
        for stmt in sql:
            conn.exec_driver_sql(stmt)
    engine.dispose()
    return archive_dir


@pytest.fixture
def make_archive(tmp_path):
    def _make(**kwargs) -> Path:
        return create_archive(tmp_path / "geopaparazzi", **kwargs)
    return _make


@pytest.fixture
def write_media():
    def _write(folder: Path, name: str, props=None, content: bytes = b"\xff\xd8\xff\xe0fake") -> Path:
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(content)
        if props is not None:
            lines = [f"{k}={v}" for k, v in props.items()]
            path.with_suffix(".properties").write_text("\n".join(lines) + "\n", encoding="latin-1")
        return path
    return _write


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"
