# backend/geopap/models/gpslog.py
from sqlalchemy import Integer, Column, ForeignKey, Float, Text
from .base import Base

class GpsLogHeader(Base):
    __tablename__ = "gpslogs"
    id = Column("_id", Integer, primary_key=True)
    startts = Column(Text, nullable=True)
    endts = Column(Text, nullable=True)
    text = Column(Text, nullable=True)


class GpsLogData(Base):
    __tablename__ = "gpslog_data"
    id = Column("_id", Integer, primary_key=True)
    logid = Column(Integer, ForeignKey("gpslogs._id", ondelete="CASCADE"), nullable=False)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    altim = Column(Float, nullable=True)
    ts = Column(Text, nullable=True)
