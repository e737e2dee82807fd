# Import Base class
from app.db.base_class import Base

# Import all models here so that Base has them registered
# This is needed for Base.metadata.create_all()
from app.models.user import User
from app.models.session import UserSession
from app.models.movie import Movie
from app.models.series import Series, Season, Episode
from app.models.channel import Channel
from app.models.message import Message
