# backend/geopap/models/note.py
from sqlalchemy import Integer, Column, Float, Text
from .base import Base

class Note(Base):
    __tablename__ = "notes"
    id = Column("_id", Integer, primary_key=True)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    altim = Column(Float, nullable=True)
    ts = Column(Text, nullable=True)  # "yyyy-MM-dd HH:mm:ss" as written by the device
    text = Column(Text, nullable=True)
