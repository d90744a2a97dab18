# backend/geopap/schemas/report.py
from pydantic import BaseModel, Field
from typing import List, Optional, Union
from .commons import ImportStatus


class ImportRequest(BaseModel):
    archive_dir: str
    output_dir: Optional[str] = None  # default: <data>/exports
    target_crs: Union[int, str]  # EPSG code, "EPSG:xxxx" or WKT
    encoding: Optional[str] = None


class DatasetOut(BaseModel):
    name: str
    path: str
    feature_count: int


class ImportReport(BaseModel):
    status: ImportStatus = "success"
    datasets: List[DatasetOut] = Field(default_factory=list)
    unresolved_media: List[str] = Field(default_factory=list)
    failed_logs: List[int] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    message: str = ""

    def dataset(self, name: str) -> Optional[DatasetOut]:
        for d in self.datasets:
            if d.name == name:
                return d
        return None
