# backend/geopap/services/media/resolver.py
from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from geopap import config
from geopap.errors import GeopapError
from geopap.logging_setup import get_logger
from geopap.schemas.media import MediaAsset, MediaScan
from geopap.services.media.geotag import load_sidecar, parse_media_name, read_geotag
from geopap.services.progress import ProgressCallback, no_progress

log = get_logger(__name__)


def find_media_folder(archive_dir: Path) -> Optional[Path]:
    """`media`, or `pictures` for older archives, or None when neither exists."""
    for name in (config.MEDIA_FOLDER, config.LEGACY_MEDIA_FOLDER):
        folder = Path(archive_dir) / name
        if folder.is_dir():
            return folder
    return None


def is_media_file(name: str) -> bool:
    return name.endswith(config.MEDIA_EXTENSIONS)


def sidecar_path(media_path: Path) -> Path:
    return media_path.with_suffix(config.SIDECAR_SUFFIX)


class MediaResolver:
    """
    Pairs each media file with its .properties sidecar. Copying under
    <output_dir>/media is left to `copy`, once the asset has a feature.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.dest_dir = self.output_dir / config.MEDIA_FOLDER

    def resolve_one(self, path: Path) -> Optional[MediaAsset]:
        """
        Returns None when the sidecar carries no fix (0 lat or lon).
        Raises GeopapError/OSError for anything that makes the asset unresolved.
        """
        date_token, time_token = parse_media_name(path.name)
        info = sidecar_path(path)
        if not info.is_file():
            raise FileNotFoundError(f"No {config.SIDECAR_SUFFIX} file for {path}")
        lat, lon, altim, azimuth = read_geotag(load_sidecar(info))
        if lat == 0 or lon == 0:
            return None

        return MediaAsset(
            path=path,
            date_token=date_token,
            time_token=time_token,
            lat=lat,
            lon=lon,
            altim=altim,
            azimuth=azimuth,
            relative_path=f"{config.MEDIA_FOLDER}/{path.name}",
        )

    def copy(self, asset: MediaAsset) -> Path:
        self.dest_dir.mkdir(parents=True, exist_ok=True)
        dest = self.dest_dir / Path(asset.path).name
        shutil.copy2(asset.path, dest)
        return dest

    def resolve(self, folder: Path, progress: ProgressCallback = no_progress) -> MediaScan:
        scan = MediaScan()
        entries = sorted(p for p in Path(folder).iterdir() if p.is_file())
        total = len(entries)
        for i, path in enumerate(entries, start=1):
            if is_media_file(path.name):
                media_path = str(path.resolve())
                try:
                    asset = self.resolve_one(path)
                except (GeopapError, OSError, ValueError) as exc:
                    log.debug("Unresolved media", extra={"extra": {"path": media_path, "error": str(exc)}})
                    scan.unresolved.append(media_path)
                else:
                    if asset is None:
                        scan.dropped.append(media_path)
                    else:
                        scan.assets.append(asset)
            progress("Importing media...", i, total)
        return scan
