from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text
from sqlalchemy.sql import func
from app.db.base_class import Base

class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    synopsis = Column(Text, nullable=False)
    genre = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # Minutes
    ranking = Column(Float, nullable=False, default=0.0)
    cover_url = Column(String, nullable=False)
    video_url = Column(String, nullable=False)
    is_recommended = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
