from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, also accepts snake_case input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _not_blank(value):
    if isinstance(value, str) and not value.strip():
        raise ValueError("must not be blank")
    return value


# bcrypt only accepts up to 72 bytes
BCRYPT_MAX_BYTES = 72


def _fits_bcrypt(value):
    if isinstance(value, str) and len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


# --- Auth ---

class LoginRequest(CamelModel):
    password: str
    device_id: Optional[str] = None

    check_password = field_validator("password")(_not_blank)

class Identity(CamelModel):
    """Resolved caller identity, the only thing handlers may trust."""
    id: int
    name: str
    is_admin: bool
    allowed_devices: int


# --- Users ---

class UserCreate(CamelModel):
    name: str
    password: str
    allowed_devices: int = Field(default=1, ge=1)
    is_admin: bool = False

    check_required = field_validator("name", "password")(_not_blank)
    check_password_length = field_validator("password")(_fits_bcrypt)

class UserUpdate(CamelModel):
    name: Optional[str] = None
    password: Optional[str] = None
    allowed_devices: Optional[int] = Field(default=None, ge=1)
    is_suspended: Optional[bool] = None
    is_admin: Optional[bool] = None

    check_password_length = field_validator("password")(_fits_bcrypt)

class UserResponse(CamelModel):
    id: int
    name: str
    allowed_devices: int
    is_suspended: bool
    is_admin: bool
    created_at: Optional[datetime] = None


# --- Movies ---

class MovieBase(CamelModel):
    title: str
    synopsis: str
    genre: str
    year: int
    duration: int
    ranking: float = 0.0
    cover_url: str
    video_url: str
    is_recommended: bool = False

    check_required = field_validator("title", "synopsis", "genre", "cover_url", "video_url")(_not_blank)

class MovieCreate(MovieBase):
    pass

class MovieUpdate(CamelModel):
    title: Optional[str] = None
    synopsis: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    duration: Optional[int] = None
    ranking: Optional[float] = None
    cover_url: Optional[str] = None
    video_url: Optional[str] = None
    is_recommended: Optional[bool] = None

    check_required = field_validator("title", "synopsis", "genre", "cover_url", "video_url")(_not_blank)

class MovieResponse(MovieBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Channels ---

class ChannelBase(CamelModel):
    name: str
    cover_url: str
    m3u8_url: str

    check_required = field_validator("name", "cover_url", "m3u8_url")(_not_blank)

class ChannelCreate(ChannelBase):
    pass

class ChannelUpdate(CamelModel):
    name: Optional[str] = None
    cover_url: Optional[str] = None
    m3u8_url: Optional[str] = None

    check_required = field_validator("name", "cover_url", "m3u8_url")(_not_blank)

class ChannelResponse(ChannelBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Series hierarchy ---

class EpisodeBase(CamelModel):
    number: int = Field(ge=1)
    title: str
    synopsis: Optional[str] = None
    duration: int
    video_url: str
    thumbnail_url: Optional[str] = None
    air_date: Optional[datetime] = None

    check_required = field_validator("title", "video_url")(_not_blank)

class EpisodeCreate(EpisodeBase):
    season_id: int

class EpisodeUpdate(CamelModel):
    season_id: Optional[int] = None
    number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = None
    synopsis: Optional[str] = None
    duration: Optional[int] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    air_date: Optional[datetime] = None

    check_required = field_validator("title", "video_url")(_not_blank)

class EpisodeResponse(EpisodeBase):
    id: int
    season_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SeasonBase(CamelModel):
    number: int = Field(ge=1)
    title: str
    year: int
    description: Optional[str] = None
    cover_url: Optional[str] = None

    check_required = field_validator("title")(_not_blank)

class SeasonCreate(SeasonBase):
    series_id: int

class SeasonUpdate(CamelModel):
    number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None

    check_required = field_validator("title")(_not_blank)

class SeasonResponse(SeasonBase):
    id: int
    series_id: int
    total_episodes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SeasonDetail(SeasonResponse):
    episodes: List[EpisodeResponse] = []

class SeriesBase(CamelModel):
    title: str
    synopsis: str
    genre: str
    year: int
    ranking: float = 0.0
    cover_url: str
    video_url: str
    is_recommended: bool = False

    check_required = field_validator("title", "synopsis", "genre", "cover_url", "video_url")(_not_blank)

class SeriesCreate(SeriesBase):
    # seasons / episodes counters are derived and ignored on input
    pass

class SeriesUpdate(CamelModel):
    title: Optional[str] = None
    synopsis: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    ranking: Optional[float] = None
    cover_url: Optional[str] = None
    video_url: Optional[str] = None
    is_recommended: Optional[bool] = None

    check_required = field_validator("title", "synopsis", "genre", "cover_url", "video_url")(_not_blank)

class SeriesResponse(SeriesBase):
    id: int
    seasons: int
    episodes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SeriesDetail(SeriesResponse):
    seasons_list: List[SeasonDetail] = []


# --- Messages / chat ---

class MessageCreate(CamelModel):
    content: str
    receiver_id: Optional[int] = None

    check_content = field_validator("content")(_not_blank)

class MessageParticipant(CamelModel):
    id: int
    name: str
    is_admin: bool

class MessageResponse(CamelModel):
    id: int
    content: str
    sender_id: int
    receiver_id: int
    is_read: bool
    created_at: Optional[datetime] = None
    sender: Optional[MessageParticipant] = None
    receiver: Optional[MessageParticipant] = None

class BotRequest(CamelModel):
    message: str

    check_message = field_validator("message")(_not_blank)
