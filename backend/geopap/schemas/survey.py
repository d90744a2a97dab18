# backend/geopap/schemas/survey.py
from pydantic import BaseModel, Field
from typing import List, Optional


class SurveyNote(BaseModel):
    lat: float
    lon: float
    altim: float = 0.0
    ts: Optional[str] = None
    text: Optional[str] = None

    # 0 in either component means the device had no fix
    @property
    def is_valid(self) -> bool:
        return self.lat != 0 and self.lon != 0


class GpsPoint(BaseModel):
    lat: float
    lon: float
    altim: float = 0.0
    ts: Optional[str] = None


class GpsLog(BaseModel):
    id: int
    start_ts: Optional[str] = None
    end_ts: Optional[str] = None
    text: Optional[str] = None
    points: List[GpsPoint] = Field(default_factory=list)

    @property
    def has_track(self) -> bool:
        return len(self.points) >= 2
