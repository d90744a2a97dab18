# scripts/import_archive.py
# Convert a Geopaparazzi project folder into shapefiles.
#   python scripts/import_archive.py /path/to/geopaparazzi --crs EPSG:32632 --out /tmp/out
import argparse
import sys

from geopap.errors import GeopapError
from geopap.logging_setup import get_logger, setup_logging
from geopap.services.pipeline import run_import


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Import a Geopaparazzi archive folder as shapefiles")
    p.add_argument("archive_dir", help="folder holding geopaparazzi.db and media/")
    p.add_argument("--crs", required=True, help="target CRS, e.g. EPSG:32632")
    p.add_argument("--out", default=None, help="output folder (default: <data>/exports)")
    p.add_argument("--encoding", default=None, help="DBF encoding (default: GEOPAP_ENCODING or UTF-8)")
    p.add_argument("--log-level", default=None)
    args = p.parse_args(argv)

    setup_logging(args.log_level)
    log = get_logger("import_archive")

    def _progress(task, done, total):
        log.debug(task, extra={"extra": {"done": done, "total": total}})

    try:
        report = run_import(args.archive_dir, args.crs, output_dir=args.out, encoding=args.encoding, progress=_progress)
    except GeopapError as e:
        log.error("Import failed: %s", e)
        return 1
    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
