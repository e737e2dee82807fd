"""
Series -> Season -> Episode containment hierarchy.

``Series.seasons``, ``Series.episodes`` and ``Season.total_episodes`` are
denormalized counters maintained by ``app.services.counters``; they are
never written from request payloads.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base


class Series(Base):
    __tablename__ = "series"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    synopsis = Column(Text, nullable=False)
    genre = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    seasons = Column(Integer, nullable=False, default=0)
    episodes = Column(Integer, nullable=False, default=0)
    ranking = Column(Float, nullable=False, default=0.0)
    cover_url = Column(String, nullable=False)
    video_url = Column(String, nullable=False)
    is_recommended = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relations
    seasons_list = relationship(
        "Season",
        back_populates="series",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Season.number",
    )


class Season(Base):
    __tablename__ = "seasons"
    __table_args__ = (
        UniqueConstraint("series_id", "number", name="uq_season_series_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    series_id = Column(Integer, ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    cover_url = Column(String, nullable=True)
    total_episodes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relations
    series = relationship("Series", back_populates="seasons_list")
    episodes = relationship(
        "Episode",
        back_populates="season",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Episode.number",
    )


class Episode(Base):
    __tablename__ = "episodes"
    __table_args__ = (
        UniqueConstraint("season_id", "number", name="uq_episode_season_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    synopsis = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # Minutes
    video_url = Column(String, nullable=False)
    thumbnail_url = Column(String, nullable=True)
    air_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relations
    season = relationship("Season", back_populates="episodes")
