# backend/geopap/schemas/commons.py
from typing import Literal

GeometryType = Literal["Point", "MultiLineString"]
FieldKind = Literal["text", "number"]
ImportStatus = Literal["success", "success_with_warnings"]
