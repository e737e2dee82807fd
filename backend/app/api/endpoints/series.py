from typing import Any
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload
from app.api import deps
from app.core.exceptions import NotFound
from app.models.series import Series, Season
from app.schemas import Identity, SeriesCreate, SeriesUpdate, SeriesResponse, SeriesDetail
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def series_out(series: Series, include_seasons: bool = False) -> dict:
    schema = SeriesDetail if include_seasons else SeriesResponse
    return schema.model_validate(series).model_dump(by_alias=True)


def _get_series_or_404(db: Session, series_id: int, include_seasons: bool = False) -> Series:
    query = db.query(Series)
    if include_seasons:
        query = query.options(selectinload(Series.seasons_list).selectinload(Season.episodes))
    series = query.filter(Series.id == series_id).first()
    if not series:
        raise NotFound("Series not found")
    return series


@router.get("")
def list_series(
    include_seasons: bool = Query(False, alias="includeSeasons"),
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    """Recommended first, then by ranking, then newest. Seasons are nested on request."""
    query = db.query(Series)
    if include_seasons:
        query = query.options(selectinload(Series.seasons_list).selectinload(Season.episodes))
    series = query.order_by(
        Series.is_recommended.desc(),
        Series.ranking.desc(),
        Series.created_at.desc()
    ).all()
    return {"success": True, "series": [series_out(s, include_seasons) for s in series]}


@router.get("/{series_id}")
def get_series(
    series_id: int,
    include_seasons: bool = Query(False, alias="includeSeasons"),
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    series = _get_series_or_404(db, series_id, include_seasons)
    return {"success": True, "series": series_out(series, include_seasons)}


@router.post("")
def create_series(
    series_in: SeriesCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    # Counters start empty and only move when seasons or episodes do
    series = Series(**series_in.model_dump(), seasons=0, episodes=0)
    db.add(series)
    db.commit()
    db.refresh(series)
    return {"success": True, "series": series_out(series)}


@router.put("/{series_id}")
def update_series(
    series_id: int,
    series_in: SeriesUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    series = _get_series_or_404(db, series_id)

    update_data = series_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(series, field, value)

    db.commit()
    series = _get_series_or_404(db, series_id, include_seasons=True)
    return {"success": True, "series": series_out(series, include_seasons=True)}


@router.delete("/{series_id}")
def delete_series(
    series_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """Delete a series together with its seasons and episodes."""
    series = _get_series_or_404(db, series_id)
    db.delete(series)
    db.commit()
    logger.info(f"Series {series_id} deleted with its seasons and episodes")
    return {"success": True, "message": "Series deleted"}
