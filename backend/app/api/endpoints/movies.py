from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.api import deps
from app.core.exceptions import NotFound
from app.models.movie import Movie
from app.schemas import Identity, MovieCreate, MovieUpdate, MovieResponse

router = APIRouter()


def _movie_out(movie: Movie) -> dict:
    return MovieResponse.model_validate(movie).model_dump(by_alias=True)


def _get_movie_or_404(db: Session, movie_id: int) -> Movie:
    movie = db.query(Movie).filter(Movie.id == movie_id).first()
    if not movie:
        raise NotFound("Movie not found")
    return movie


@router.get("")
def list_movies(
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    """Recommended first, then by ranking, then newest."""
    movies = db.query(Movie).order_by(
        Movie.is_recommended.desc(),
        Movie.ranking.desc(),
        Movie.created_at.desc()
    ).all()
    return {"success": True, "movies": [_movie_out(m) for m in movies]}


@router.get("/{movie_id}")
def get_movie(
    movie_id: int,
    db: Session = Depends(deps.get_db),
    current_user: Identity = Depends(deps.get_current_user)
) -> Any:
    return {"success": True, "movie": _movie_out(_get_movie_or_404(db, movie_id))}


@router.post("")
def create_movie(
    movie_in: MovieCreate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    movie = Movie(**movie_in.model_dump())
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return {"success": True, "movie": _movie_out(movie)}


@router.put("/{movie_id}")
def update_movie(
    movie_id: int,
    movie_in: MovieUpdate,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    movie = _get_movie_or_404(db, movie_id)

    update_data = movie_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(movie, field, value)

    db.commit()
    db.refresh(movie)
    return {"success": True, "movie": _movie_out(movie)}


@router.delete("/{movie_id}")
def delete_movie(
    movie_id: int,
    db: Session = Depends(deps.get_db),
    admin: Identity = Depends(deps.get_current_admin)
) -> Any:
    movie = _get_movie_or_404(db, movie_id)
    db.delete(movie)
    db.commit()
    return {"success": True, "message": "Movie deleted"}
