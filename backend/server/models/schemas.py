from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _Request(BaseModel):
    # Wire format is snake_case. camelCase spellings are accepted as input
    # aliases only; responses never use them.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TelegramLoginRequest(_Request):
    """Telegram WebApp user payload (trusted as given)."""
    telegram_id: Union[int, str] = Field(validation_alias=AliasChoices("telegram_id", "telegramId", "id"))
    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("first_name", "firstName"))
    last_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("last_name", "lastName"))
    photo_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("photo_url", "photoUrl"))


class ProgressUpsertRequest(_Request):
    """播放进度上报"""
    item_id: Union[int, str] = Field(validation_alias=AliasChoices("item_id", "movie_id", "movieId"))
    current_time: float = Field(validation_alias=AliasChoices("current_time", "currentTime"))
    duration: float = 0.0
    completed: bool = False


class WatchlistAddRequest(_Request):
    item_id: Union[int, str] = Field(validation_alias=AliasChoices("item_id", "movie_id", "movieId"))


class BulkDeleteRequest(_Request):
    ids: List[Union[int, str]] = Field(min_length=1)


class UserResponse(BaseModel):
    user: Dict[str, Any]


class LoginResponse(BaseModel):
    user: Dict[str, Any]
    token: Optional[str] = None


class MoviesResponse(BaseModel):
    movies: List[Dict[str, Any]]


class MovieResponse(BaseModel):
    movie: Dict[str, Any]


class StreamResponse(BaseModel):
    stream_url: str
    title: str
    tmdb_id: int
    media_type: str


class ProgressListResponse(BaseModel):
    progress: List[Dict[str, Any]]


class ProgressResponse(BaseModel):
    progress: Dict[str, Any]


class WatchlistResponse(BaseModel):
    watchlist: List[Dict[str, Any]]


class WatchlistItemResponse(BaseModel):
    item: Dict[str, Any]


class WatchlistCheckResponse(BaseModel):
    in_watchlist: bool


class SuccessResponse(BaseModel):
    success: bool = True


class DeletedResponse(BaseModel):
    deleted: int


class ErrorBody(BaseModel):
    code: str
    message: str
    retryable: bool = False
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """统一错误响应"""
    error: ErrorBody
