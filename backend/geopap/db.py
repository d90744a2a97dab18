# backend/geopap/db.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from pathlib import Path
from typing import Optional

from geopap import config
from geopap.errors import MissingArchiveError


def archive_db_path(archive_dir: Path) -> Path:
    return Path(archive_dir) / config.ARCHIVE_DB_NAME


def open_archive(db_path: Path, timeout: Optional[float] = None) -> Engine:
    """
    Read-only engine on the archive's SQLite file.
    The file must exist; SQLite would otherwise create an empty one.
    """
    db_path = Path(db_path)
    if not db_path.is_file():
        raise MissingArchiveError(
            f"The geopaparazzi database file ({config.ARCHIVE_DB_NAME}) is missing: {db_path}"
        )
    url = f"sqlite:///file:{db_path.resolve().as_posix()}?mode=ro&uri=true"
    return create_engine(
        url,
        connect_args={"timeout": timeout if timeout is not None else config.QUERY_TIMEOUT_S},
    )


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
