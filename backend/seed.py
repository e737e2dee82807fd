"""
Reset the database and load demo data.

Usage: python seed.py   (from the backend directory, DATABASE_URL from env/.env)
"""
import logging
import sys
from datetime import datetime

from app.core.security import hash_password
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.models.channel import Channel
from app.models.movie import Movie
from app.models.series import Series, Season, Episode
from app.models.user import User
from app.services.counters import recompute_series_counters

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    stream=sys.stdout
)
logger = logging.getLogger(__name__)

SAMPLE_VIDEO = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"


def seed():
    logger.info("🌱 Resetting database...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        db.add_all([
            User(name="Administrador", password=hash_password("19801605", rounds=10), is_admin=True, allowed_devices=3),
            User(name="Usuario Demo", password=hash_password("123", rounds=10), is_admin=False, allowed_devices=1),
        ])

        db.add_all([
            Movie(
                title="Extreme Action",
                synopsis="Non-stop action and adventure that keeps you on the edge of your seat.",
                genre="Action", year=2023, duration=120, ranking=8.5,
                cover_url="https://image.tmdb.org/t/p/w500/example1.jpg",
                video_url=SAMPLE_VIDEO, is_recommended=True
            ),
            Movie(
                title="Family Comedy",
                synopsis="A comedy for the whole family with unforgettable moments.",
                genre="Comedy", year=2022, duration=95, ranking=7.8,
                cover_url="https://image.tmdb.org/t/p/w500/example2.jpg",
                video_url=SAMPLE_VIDEO, is_recommended=False
            ),
            Movie(
                title="Dark Mystery",
                synopsis="A thriller full of twists that will keep you guessing until the end.",
                genre="Thriller", year=2023, duration=110, ranking=9.0,
                cover_url="https://image.tmdb.org/t/p/w500/example3.jpg",
                video_url=SAMPLE_VIDEO, is_recommended=True
            ),
        ])

        series = Series(
            title="Lost Kingdom",
            synopsis="An epic saga about the struggle for a throne.",
            genre="Fantasy", year=2021, ranking=8.7,
            cover_url="https://image.tmdb.org/t/p/w500/series1.jpg",
            video_url=SAMPLE_VIDEO, is_recommended=True
        )
        db.add(series)
        db.flush()

        for season_number, year, episode_count in ((1, 2021, 3), (2, 2022, 2)):
            season = Season(
                series_id=series.id, number=season_number,
                title=f"Season {season_number}", year=year
            )
            db.add(season)
            db.flush()
            for episode_number in range(1, episode_count + 1):
                db.add(Episode(
                    season_id=season.id, number=episode_number,
                    title=f"Episode {episode_number}", duration=45,
                    video_url=SAMPLE_VIDEO, air_date=datetime(year, 1, episode_number)
                ))

        recompute_series_counters(db, series.id)

        db.add_all([
            Channel(name="Sports Channel", cover_url="https://image.tmdb.org/t/p/w500/sports.jpg",
                    m3u8_url="https://test-streams.mux.dev/x36xhzz/x36xhzz.m3u8"),
            Channel(name="News Channel", cover_url="https://image.tmdb.org/t/p/w500/news.jpg",
                    m3u8_url="https://test-streams.mux.dev/x36xhzz/x36xhzz.m3u8"),
        ])

        db.commit()
        logger.info("👤 Admin user: Administrador (password: 19801605)")
        logger.info("👤 Demo user: Usuario Demo (password: 123)")
        logger.info("✅ Seed complete")
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Seed failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
