# backend/geopap/services/pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union

from pyproj import CRS

from geopap import config
from geopap.db import archive_db_path, open_archive
from geopap.errors import GeopapError, MissingArchiveError
from geopap.logging_setup import get_logger
from geopap.schemas.media import MediaAsset, MediaScan
from geopap.schemas.report import DatasetOut, ImportReport
from geopap.services.export.shapefile import ShapefileSink
from geopap.services.features.schema import (
    GPS_LINES_SCHEMA,
    GPS_POINTS_SCHEMA,
    MEDIA_SCHEMA,
    NOTES_SCHEMA,
    FeatureCollection,
    as_text,
    assemble_features,
)
from geopap.services.geometry.reconstruct import build_point, build_track
from geopap.services.media.resolver import MediaResolver, find_media_folder
from geopap.services.progress import ProgressCallback, no_progress
from geopap.services.reproject.context import ReprojectionContext
from geopap.services.store.reader import SurveyStoreReader

log = get_logger(__name__)

MEDIA_OK_MESSAGE = "All media were successfully imported."
MEDIA_UNRESOLVED_HEADER = "For the following media no usable *.properties file could be found:"


class DatasetSink(Protocol):
    def write(self, name: str, collection: FeatureCollection) -> Path: ...


class ImportPipeline:
    """
    notes -> gps lines/points -> media, run one after the other.
    Every pass shares the same reprojection context; each dataset is
    assembled in memory before it is handed to the sink.
    """

    def __init__(self, context: ReprojectionContext, sink: DatasetSink, progress: ProgressCallback = no_progress):
        self.context = context
        self.sink = sink
        self.progress = progress

    # --- passes ---

    def notes_pass(self, reader: SurveyStoreReader) -> FeatureCollection:
        notes = reader.read_notes()
        no_fix = sum(1 for n in notes if not n.is_valid)
        collection = assemble_features(
            NOTES_SCHEMA,
            notes,
            lambda n: build_point(n.lon, n.lat) if n.is_valid else None,
            lambda n: (n.text, n.ts, as_text(n.altim)),
            self.context,
            progress=self.progress,
            task="Import notes...",
        )
        log.info("Notes pass done", extra={"extra": {"rows": len(notes), "no_fix": no_fix, "features": len(collection)}})
        return collection

    def gps_pass(self, reader: SurveyStoreReader) -> Tuple[FeatureCollection, FeatureCollection, List[int]]:
        logs, failed = reader.read_logs()
        lines = assemble_features(
            GPS_LINES_SCHEMA,
            logs,
            lambda g: build_track(g.points),
            lambda g: (g.start_ts, g.end_ts, g.text),
            self.context,
            progress=self.progress,
            task="Import gps to lines...",
        )
        # every point of every log, including logs too short for a line
        points = assemble_features(
            GPS_POINTS_SCHEMA,
            [p for g in logs for p in g.points],
            lambda p: build_point(p.lon, p.lat, drop_no_fix=False),
            lambda p: (as_text(p.altim), p.ts),
            self.context,
            progress=self.progress,
            task="Import gps to points...",
        )
        log.info(
            "GPS pass done",
            extra={"extra": {"logs": len(logs), "failed_logs": failed, "lines": len(lines), "points": len(points)}},
        )
        return lines, points, failed

    def media_pass(self, archive_dir: Path, output_dir: Path) -> Optional[Tuple[FeatureCollection, MediaScan]]:
        folder = find_media_folder(archive_dir)
        if folder is None:
            log.info("No media folder in archive", extra={"extra": {"archive": str(archive_dir)}})
            return None

        resolver = MediaResolver(output_dir)
        scan = resolver.resolve(folder, self.progress)
        failed = set()

        def _unresolved(asset: MediaAsset, exc: Exception) -> None:
            failed.add(id(asset))
            scan.unresolved.append(str(Path(asset.path).resolve()))

        collection = assemble_features(
            MEDIA_SCHEMA,
            scan.assets,
            lambda a: build_point(a.lon, a.lat),
            lambda a: (as_text(a.altim), a.date_time, a.azimuth, a.relative_path),
            self.context,
            on_skip=_unresolved,
            progress=self.progress,
            task="Importing media...",
        )
        # only assets that made it into the dataset are copied
        for asset in scan.assets:
            if id(asset) not in failed:
                resolver.copy(asset)
        log.info(
            "Media pass done",
            extra={"extra": {"features": len(collection), "unresolved": len(scan.unresolved), "no_fix": len(scan.dropped)}},
        )
        return collection, scan

    # --- run ---

    def _write(self, report: ImportReport, name: str, collection: FeatureCollection) -> None:
        path = self.sink.write(name, collection)
        report.datasets.append(DatasetOut(name=name, path=str(path), feature_count=len(collection)))
        if collection.skipped:
            report.warnings.append(f"{collection.skipped} {name} record(s) could not be reprojected and were skipped")

    def run(self, archive_dir: Path, output_dir: Path) -> ImportReport:
        archive_dir = Path(archive_dir)
        output_dir = Path(output_dir)
        log.info("Import started", extra={"extra": {"archive": str(archive_dir), "context": repr(self.context)}})
        report = ImportReport()

        try:
            engine = open_archive(archive_db_path(archive_dir))
        except MissingArchiveError:
            log.error("Missing archive database", extra={"extra": {"archive": str(archive_dir)}})
            raise
        try:
            reader = SurveyStoreReader(engine)
            self._write(report, config.NOTES_DATASET, self.notes_pass(reader))

            lines, points, failed = self.gps_pass(reader)
            self._write(report, config.GPS_LINES_DATASET, lines)
            self._write(report, config.GPS_POINTS_DATASET, points)
            report.failed_logs = failed
            for log_id in failed:
                report.warnings.append(f"Points of gps log {log_id} could not be read")
        except GeopapError:
            log.exception("Import failed", extra={"extra": {"archive": str(archive_dir)}})
            raise
        finally:
            engine.dispose()

        media = self.media_pass(archive_dir, output_dir)
        messages = []
        if media is not None:
            collection, scan = media
            self._write(report, config.MEDIA_DATASET, collection)
            report.unresolved_media = list(scan.unresolved)
            if scan.unresolved:
                report.warnings.append("\n".join([MEDIA_UNRESOLVED_HEADER] + scan.unresolved))
            else:
                messages.append(MEDIA_OK_MESSAGE)

        if report.warnings:
            report.status = "success_with_warnings"
            messages = report.warnings + messages
        report.message = "\n".join(messages) or "Import completed."
        log.info("Import finished", extra={"extra": {"status": report.status, "datasets": len(report.datasets)}})
        return report


def run_import(
    archive_dir: Union[str, Path],
    target_crs: Union[int, str, CRS],
    output_dir: Optional[Union[str, Path]] = None,
    encoding: Optional[str] = None,
    progress: ProgressCallback = no_progress,
) -> ImportReport:
    """Build the reprojection context and shapefile sink, then run every pass."""
    out = Path(output_dir) if output_dir else config.default_output_dir()
    context = ReprojectionContext(target_crs)
    pipeline = ImportPipeline(context, ShapefileSink(out, encoding), progress)
    return pipeline.run(Path(archive_dir), out)
