from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from app.api import deps
from app.core.exceptions import DuplicateNumber, NotFound
from app.models.series import Series, Season
from app.schemas import Identity, SeasonCreate, SeasonUpdate, SeasonDetail
from app.services.counters import recompute_series_counters, season_number_taken
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_SEASON = "A season with that number already exists"


def _season_out(season: Season) -> dict:
    return SeasonDetail.model_validate(season).model_dump(by_alias=True)


def _get_season_or_404(db: Session, season_id: int) -> Season:
    season = db.query(Season).options(selectinload(Season.episodes)).filter(Season.id == season_id).first()
    if not season:
        raise NotFound("Season not found")
    return season


def _commit_or_duplicate(db: Session):
    # The (series_id, number) constraint catches writers that raced past the pre-check
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateNumber(DUPLICATE_SEASON)


@router.get("")
def list_seasons(
    series_id: Optional[int] = Query(None, alias="seriesId"),
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    query = db.query(Season).options(selectinload(Season.episodes))
    if series_id is not None:
        query = query.filter(Season.series_id == series_id).order_by(Season.number.asc())
    else:
        query = query.join(Series).order_by(Series.title.asc(), Season.number.asc())
    return {"success": True, "seasons": [_season_out(s) for s in query.all()]}


@router.get("/{season_id}")
def get_season(
    season_id: int,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    return {"success": True, "season": _season_out(_get_season_or_404(db, season_id))}


@router.post("")
def create_season(
    season_in: SeasonCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    series = db.query(Series).filter(Series.id == season_in.series_id).first()
    if not series:
        raise NotFound("Series not found")

    if season_number_taken(db, series.id, season_in.number):
        raise DuplicateNumber(DUPLICATE_SEASON)

    season = Season(**season_in.model_dump(), total_episodes=0)
    db.add(season)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise DuplicateNumber(DUPLICATE_SEASON)

    recompute_series_counters(db, series.id)
    _commit_or_duplicate(db)
    logger.info(f"Season {season.number} created for series {series.id}")

    return {"success": True, "season": _season_out(_get_season_or_404(db, season.id))}


@router.put("/{season_id}")
def update_season(
    season_id: int,
    season_in: SeasonUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """Update season fields. Membership does not change, so counters are left alone."""
    season = _get_season_or_404(db, season_id)

    update_data = season_in.model_dump(exclude_unset=True)
    new_number = update_data.get("number")
    if new_number is not None and new_number != season.number:
        if season_number_taken(db, season.series_id, new_number, exclude_id=season.id):
            raise DuplicateNumber(DUPLICATE_SEASON)

    for field, value in update_data.items():
        # Required columns keep their value when null is sent
        if value is None and field in ("number", "title", "year"):
            continue
        setattr(season, field, value)

    _commit_or_duplicate(db)
    return {"success": True, "season": _season_out(_get_season_or_404(db, season_id))}


@router.delete("/{season_id}")
def delete_season(
    season_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """Delete a season and its episodes, then refresh the series counters."""
    season = _get_season_or_404(db, season_id)
    series_id = season.series_id

    db.delete(season)
    recompute_series_counters(db, series_id)
    db.commit()
    logger.info(f"Season {season_id} deleted from series {series_id}")

    return {"success": True, "message": "Season deleted"}
