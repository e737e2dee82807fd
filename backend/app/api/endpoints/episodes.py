from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.api import deps
from app.core.exceptions import DuplicateNumber, NotFound
from app.models.series import Series, Season, Episode
from app.schemas import Identity, EpisodeCreate, EpisodeUpdate, EpisodeResponse
from app.services.counters import recompute_season_counters, episode_number_taken
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_EPISODE = "An episode with that number already exists in this season"

REQUIRED_FIELDS = ("number", "title", "duration", "video_url")


def _episode_out(episode: Episode) -> dict:
    return EpisodeResponse.model_validate(episode).model_dump(by_alias=True)


def _get_episode_or_404(db: Session, episode_id: int) -> Episode:
    episode = db.query(Episode).filter(Episode.id == episode_id).first()
    if not episode:
        raise NotFound("Episode not found")
    return episode


def _get_season_or_404(db: Session, season_id: int) -> Season:
    season = db.query(Season).filter(Season.id == season_id).first()
    if not season:
        raise NotFound("Season not found")
    return season


def _commit_or_duplicate(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateNumber(DUPLICATE_EPISODE)


@router.get("")
def list_episodes(
    season_id: Optional[int] = Query(None, alias="seasonId"),
    series_id: Optional[int] = Query(None, alias="seriesId"),
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    query = db.query(Episode)
    if season_id is not None:
        query = query.filter(Episode.season_id == season_id).order_by(Episode.number.asc())
    elif series_id is not None:
        query = query.join(Season).filter(Season.series_id == series_id).order_by(
            Season.number.asc(), Episode.number.asc()
        )
    else:
        query = query.join(Season).join(Series).order_by(
            Series.title.asc(), Season.number.asc(), Episode.number.asc()
        )
    return {"success": True, "episodes": [_episode_out(e) for e in query.all()]}


@router.get("/{episode_id}")
def get_episode(
    episode_id: int,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    return {"success": True, "episode": _episode_out(_get_episode_or_404(db, episode_id))}


@router.post("")
def create_episode(
    episode_in: EpisodeCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    season = _get_season_or_404(db, episode_in.season_id)

    if episode_number_taken(db, season.id, episode_in.number):
        raise DuplicateNumber(DUPLICATE_EPISODE)

    episode = Episode(**episode_in.model_dump())
    db.add(episode)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise DuplicateNumber(DUPLICATE_EPISODE)

    recompute_season_counters(db, season.id)
    _commit_or_duplicate(db)
    logger.info(f"Episode {episode.number} created in season {season.id}")

    return {"success": True, "episode": _episode_out(episode)}


@router.put("/{episode_id}")
def update_episode(
    episode_id: int,
    episode_in: EpisodeUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    """
    Update an episode. Counters are only recomputed when the episode moves
    to another season.
    """
    episode = _get_episode_or_404(db, episode_id)
    old_season_id = episode.season_id

    update_data = {
        field: value for field, value in episode_in.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS + ("season_id",)
    }
    target_season_id = update_data.get("season_id", old_season_id)
    target_number = update_data.get("number", episode.number)

    if target_season_id != old_season_id:
        _get_season_or_404(db, target_season_id)
    if target_season_id != old_season_id or target_number != episode.number:
        if episode_number_taken(db, target_season_id, target_number, exclude_id=episode.id):
            raise DuplicateNumber(DUPLICATE_EPISODE)

    for field, value in update_data.items():
        setattr(episode, field, value)

    if target_season_id != old_season_id:
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise DuplicateNumber(DUPLICATE_EPISODE)
        recompute_season_counters(db, old_season_id)
        recompute_season_counters(db, target_season_id)
        logger.info(f"Episode {episode.id} moved from season {old_season_id} to {target_season_id}")

    _commit_or_duplicate(db)
    return {"success": True, "episode": _episode_out(_get_episode_or_404(db, episode_id))}


@router.delete("/{episode_id}")
def delete_episode(
    episode_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    episode = _get_episode_or_404(db, episode_id)
    season_id = episode.season_id

    db.delete(episode)
    recompute_season_counters(db, season_id)
    db.commit()
    logger.info(f"Episode {episode_id} deleted from season {season_id}")

    return {"success": True, "message": "Episode deleted"}
