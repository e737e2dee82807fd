import pytest

from app.core.exceptions import NotFound
from app.models.series import Series, Season, Episode
from app.services.counters import (
    episode_number_taken,
    recompute_season_counters,
    recompute_series_counters,
    season_number_taken,
)


def add_series(db, title="Series"):
    series = Series(
        title=title, synopsis="s", genre="Drama", year=2020,
        cover_url="c", video_url="v"
    )
    db.add(series)
    db.flush()
    return series


def add_season(db, series, number):
    season = Season(series_id=series.id, number=number, title=f"S{number}", year=2020)
    db.add(season)
    db.flush()
    return season


def add_episode(db, season, number):
    episode = Episode(season_id=season.id, number=number, title=f"E{number}", duration=30, video_url="v")
    db.add(episode)
    db.flush()
    return episode


def test_recompute_repairs_drifted_counters(db):
    series = add_series(db)
    first = add_season(db, series, 1)
    second = add_season(db, series, 2)
    for n in (1, 2, 3):
        add_episode(db, first, n)
    add_episode(db, second, 1)

    series.seasons = 42
    series.episodes = -1
    first.total_episodes = 0
    second.total_episodes = 7

    recompute_series_counters(db, series.id)

    assert series.seasons == 2
    assert series.episodes == 4
    assert first.total_episodes == 3
    assert second.total_episodes == 1


def test_recompute_season_updates_series_totals(db):
    series = add_series(db)
    season = add_season(db, series, 1)
    add_episode(db, season, 1)
    add_episode(db, season, 2)

    recompute_season_counters(db, season.id)

    assert season.total_episodes == 2
    assert series.seasons == 1
    assert series.episodes == 2


def test_recompute_counts_nothing_for_empty_series(db):
    series = add_series(db)
    recompute_series_counters(db, series.id)
    assert (series.seasons, series.episodes) == (0, 0)


def test_recompute_does_not_commit(db):
    series = add_series(db)
    add_season(db, series, 1)
    recompute_series_counters(db, series.id)

    db.rollback()
    assert db.query(Series).count() == 0


def test_recompute_unknown_rows(db):
    with pytest.raises(NotFound):
        recompute_series_counters(db, 404)
    with pytest.raises(NotFound):
        recompute_season_counters(db, 404)


def test_number_taken_checks(db):
    series = add_series(db)
    season = add_season(db, series, 1)
    episode = add_episode(db, season, 3)

    assert season_number_taken(db, series.id, 1)
    assert not season_number_taken(db, series.id, 2)
    assert not season_number_taken(db, series.id, 1, exclude_id=season.id)

    assert episode_number_taken(db, season.id, 3)
    assert not episode_number_taken(db, season.id, 4)
    assert not episode_number_taken(db, season.id, 3, exclude_id=episode.id)
