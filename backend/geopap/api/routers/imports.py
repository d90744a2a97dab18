# backend/geopap/api/routers/imports.py
from fastapi import APIRouter, HTTPException

from geopap.errors import DataSourceError, MissingArchiveError, UnsupportedProjectionError
from geopap.schemas.report import ImportReport, ImportRequest
from geopap.services.pipeline import run_import

router = APIRouter()


@router.get("/ping")
def ping():
    return {"ok": True, "router": "imports"}


# plain def: the import is blocking and runs in the server's worker threadpool
@router.post("")
@router.post("/")
def create_import(payload: ImportRequest) -> ImportReport:
    try:
        return run_import(
            payload.archive_dir,
            payload.target_crs,
            output_dir=payload.output_dir,
            encoding=payload.encoding,
        )
    except MissingArchiveError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedProjectionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=500, detail=f"An error occurred while reading the archive: {e}")
