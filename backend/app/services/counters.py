"""
Counter maintenance for the Series -> Season -> Episode hierarchy.

Counters are recomputed from the current rows (read, recompute, write) and
never adjusted incrementally. Both functions only flush; the caller commits
them in the same transaction as the mutation that triggered them, so a
failed recompute rolls the mutation back with it.
"""
from sqlalchemy.orm import Session
from app.models.series import Series, Season, Episode
from app.core.exceptions import NotFound
import logging

logger = logging.getLogger(__name__)


def _lock_series(db: Session, series_id: int) -> Series:
    # Serializes concurrent recomputes of one series (no-op on SQLite)
    series = db.query(Series).filter(Series.id == series_id).with_for_update().first()
    if not series:
        raise NotFound("Series not found")
    return series


def _episode_counts(db: Session, series_id: int) -> dict:
    """Map of season id -> current episode count for every season of a series."""
    seasons = db.query(Season).filter(Season.series_id == series_id).all()
    counts = {}
    for season in seasons:
        counts[season.id] = db.query(Episode).filter(Episode.season_id == season.id).count()
    return counts


def recompute_season_counters(db: Session, season_id: int) -> Season:
    """
    Refresh a season's episode count and its series' totals.

    Run after an episode is created, deleted or moved between seasons.
    """
    db.flush()
    season = db.query(Season).filter(Season.id == season_id).first()
    if not season:
        raise NotFound("Season not found")

    series = _lock_series(db, season.series_id)
    counts = _episode_counts(db, series.id)

    season.total_episodes = counts.get(season.id, 0)
    series.seasons = len(counts)
    series.episodes = sum(counts.values())
    db.flush()

    logger.debug(
        f"Season {season.id} counters: total_episodes={season.total_episodes}; "
        f"series {series.id}: seasons={series.seasons} episodes={series.episodes}"
    )
    return season


def recompute_series_counters(db: Session, series_id: int) -> Series:
    """
    Refresh a series' totals and rewrite every season's episode count.

    Run after a season is created or deleted.
    """
    db.flush()
    series = _lock_series(db, series_id)
    counts = _episode_counts(db, series.id)

    series.seasons = len(counts)
    series.episodes = sum(counts.values())
    for season in db.query(Season).filter(Season.series_id == series.id).all():
        season.total_episodes = counts[season.id]
    db.flush()

    logger.debug(f"Series {series.id} counters: seasons={series.seasons} episodes={series.episodes}")
    return series


def season_number_taken(db: Session, series_id: int, number: int, exclude_id: int = None) -> bool:
    query = db.query(Season).filter(Season.series_id == series_id, Season.number == number)
    if exclude_id is not None:
        query = query.filter(Season.id != exclude_id)
    return db.query(query.exists()).scalar()


def episode_number_taken(db: Session, season_id: int, number: int, exclude_id: int = None) -> bool:
    query = db.query(Episode).filter(Episode.season_id == season_id, Episode.number == number)
    if exclude_id is not None:
        query = query.filter(Episode.id != exclude_id)
    return db.query(query.exists()).scalar()
