# backend/geopap/schemas/media.py
from pydantic import BaseModel, Field
from pathlib import Path
from typing import List


class MediaAsset(BaseModel):
    path: Path
    date_token: str
    time_token: str
    lat: float
    lon: float
    altim: float
    azimuth: float
    relative_path: str = ""  # "media/<name>" once copied to the output folder

    @property
    def date_time(self) -> str:
        return self.date_token + self.time_token


class MediaScan(BaseModel):
    assets: List[MediaAsset] = Field(default_factory=list)
    unresolved: List[str] = Field(default_factory=list)
    dropped: List[str] = Field(default_factory=list)  # sidecar present but no fix (0 lat/lon)
