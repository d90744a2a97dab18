# backend/geopap/services/store/reader.py
from __future__ import annotations

from typing import List, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from geopap.db import session_factory
from geopap.errors import DataSourceError
from geopap.logging_setup import get_logger
from geopap.models.gpslog import GpsLogData, GpsLogHeader
from geopap.models.note import Note
from geopap.schemas.survey import GpsLog, GpsPoint, SurveyNote

log = get_logger(__name__)


def _num(value) -> float:
    # NULL reads as 0.0, like a JDBC getDouble; text that is not a number is corruption
    if value is None:
        return 0.0
    return float(value)


class SurveyStoreReader:
    """Read-only queries against the archive's notes and GPS log tables."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session = session_factory(engine)

    def read_notes(self) -> List[SurveyNote]:
        try:
            with self._session() as db:
                rows = db.query(Note.lat, Note.lon, Note.altim, Note.ts, Note.text).all()
                return [
                    SurveyNote(lat=_num(r.lat), lon=_num(r.lon), altim=_num(r.altim), ts=r.ts, text=r.text)
                    for r in rows
                ]
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            raise DataSourceError(f"Cannot read notes from archive: {exc}") from exc

    def read_log_headers(self) -> List[GpsLog]:
        try:
            with self._session() as db:
                rows = (
                    db.query(GpsLogHeader.id.label("id"), GpsLogHeader.startts, GpsLogHeader.endts, GpsLogHeader.text)
                    .order_by(GpsLogHeader.id.asc())
                    .all()
                )
                return [GpsLog(id=r.id, start_ts=r.startts, end_ts=r.endts, text=r.text) for r in rows]
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            raise DataSourceError(f"Cannot read gps logs from archive: {exc}") from exc

    def read_log_points(self, log_id: int) -> List[GpsPoint]:
        try:
            with self._session() as db:
                rows = (
                    db.query(GpsLogData.lat, GpsLogData.lon, GpsLogData.altim, GpsLogData.ts)
                    .filter(GpsLogData.logid == log_id)
                    .order_by(GpsLogData.ts.asc())
                    .all()
                )
                return [GpsPoint(lat=_num(r.lat), lon=_num(r.lon), altim=_num(r.altim), ts=r.ts) for r in rows]
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            raise DataSourceError(f"Cannot read points of gps log {log_id}: {exc}") from exc

    def read_logs(self) -> Tuple[List[GpsLog], List[int]]:
        """
        Headers first, then one points query per log.
        A log whose points cannot be read keeps an empty point list and its
        id is returned in the failed list; the other logs are still read.
        """
        logs = self.read_log_headers()
        failed: List[int] = []
        for gps_log in logs:
            try:
                gps_log.points = self.read_log_points(gps_log.id)
            except DataSourceError as exc:
                log.warning("Skipping points of gps log", extra={"extra": {"log_id": gps_log.id, "error": str(exc)}})
                gps_log.points = []
                failed.append(gps_log.id)
        return logs, failed
