"""FastAPI application exposing tennis players and their statistics."""

from __future__ import annotations

import logging
import sqlite3
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from fastapi import Depends, FastAPI, Path, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import DATABASE_PATH, ENVIRONMENT, LOG_LEVEL
from .exceptions import PlayerAlreadyExistsError, StatisticsError
from .models import Country, Player, PlayerData, Sex, StatsResult
from .repository import TennisPlayerRepository
from .statistics import compute_statistics


logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()

_repository = TennisPlayerRepository(DATABASE_PATH)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    _repository.initialize_schema()
    logger.info("Player store ready at %s (%s)", DATABASE_PATH, ENVIRONMENT)
    yield


app = FastAPI(title="Tennis Players API", version=__version__, lifespan=_lifespan)


def get_repository() -> TennisPlayerRepository:
    """Provide the repository instance for FastAPI dependencies."""

    return _repository


# Schemas -------------------------------------------------------------------
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountryPayload(BaseModel):
    picture: str = Field(..., pattern=r"^https?://.+")
    code: str = Field(..., min_length=2, max_length=3)

    @field_validator("code")
    @classmethod
    def _upper_code(cls, value: str) -> str:
        return value.upper()


class PlayerDataPayload(BaseModel):
    rank: int = Field(..., ge=1)
    points: int = Field(..., ge=0)
    weight: int = Field(..., ge=30000, le=200000, description="Weight in grams")
    height: int = Field(..., ge=140, le=250, description="Height in centimeters")
    age: int = Field(..., ge=16, le=50)
    last: List[Literal[0, 1]] = Field(
        ..., min_length=5, max_length=5, description="Last five results, 1 = win"
    )


class PlayerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(..., ge=1)
    firstname: str = Field(..., min_length=2, max_length=50)
    lastname: str = Field(..., min_length=2, max_length=50)
    shortname: str = Field(..., pattern=r"^[A-Z]\.[A-Z]{2,4}$")
    sex: Sex
    country: CountryPayload
    picture: str = Field(..., pattern=r"^https?://.+")
    data: PlayerDataPayload


class PlayerResponse(CamelModel):
    id: int
    firstname: str
    lastname: str
    shortname: str
    sex: Sex
    country: CountryPayload
    picture: str
    data: PlayerDataPayload
    created_at: datetime
    updated_at: datetime


class CountryWinRateResponse(CamelModel):
    country: str
    win_rate_percent: float
    wins: int
    total_matches: int
    players: List[str]


class StatsResponse(CamelModel):
    best_win_rate_country: CountryWinRateResponse
    average_imc: float = Field(..., alias="averageIMC")
    median_height: float
    total_players: int
    calculated_at: datetime


class PlayerEnvelope(BaseModel):
    success: bool = True
    data: PlayerResponse
    message: str


class PlayerListEnvelope(BaseModel):
    success: bool = True
    data: List[PlayerResponse]
    message: str


class StatsEnvelope(BaseModel):
    success: bool = True
    data: StatsResponse
    message: str


def _player_to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(
        id=player.id,
        firstname=player.firstname,
        lastname=player.lastname,
        shortname=player.shortname,
        sex=player.sex,
        country=CountryPayload(picture=player.country.picture, code=player.country.code),
        picture=player.picture,
        data=PlayerDataPayload(
            rank=player.data.rank,
            points=player.data.points,
            weight=player.data.weight,
            height=player.data.height,
            age=player.data.age,
            last=list(player.data.last),
        ),
        created_at=player.created_at,
        updated_at=player.updated_at,
    )


def _stats_to_response(stats: StatsResult) -> StatsResponse:
    best = stats.best_win_rate_country
    return StatsResponse(
        best_win_rate_country=CountryWinRateResponse(
            country=best.country,
            win_rate_percent=best.win_rate_percent,
            wins=best.wins,
            total_matches=best.total_matches,
            players=list(best.players),
        ),
        average_imc=stats.average_imc,
        median_height=stats.median_height,
        total_players=stats.total_players,
        calculated_at=stats.calculated_at,
    )


def _error_response(
    status_code: int, error: str, details: Optional[List[Dict[str, Any]]] = None
) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# Error handlers ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning(
        "Invalid request on %s %s: %d validation error(s)",
        request.method,
        request.url.path,
        len(details),
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data", details)


@app.exception_handler(StarletteHTTPException)
async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning("Route not found: %s %s", request.method, request.url.path)
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Health --------------------------------------------------------------------
@app.get("/api/health")
def health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": _utc_timestamp(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment": ENVIRONMENT,
        "version": __version__,
    }


@app.get("/api/health/db")
def database_health(
    repository: TennisPlayerRepository = Depends(get_repository),
) -> JSONResponse:
    connected = repository.ping()
    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if connected else "unhealthy",
            "timestamp": _utc_timestamp(),
            "database": {"connected": connected},
        },
    )


# Players -------------------------------------------------------------------
@app.get("/api/players", response_model=PlayerListEnvelope)
def list_players(
    repository: TennisPlayerRepository = Depends(get_repository),
):
    try:
        players = repository.list_players()
    except sqlite3.Error:
        logger.exception("Could not list players")
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Player store unavailable")

    return PlayerListEnvelope(
        data=[_player_to_response(player) for player in players],
        message=f"{len(players)} players retrieved",
    )


@app.get("/api/players/stats", response_model=StatsEnvelope)
def get_player_statistics(
    repository: TennisPlayerRepository = Depends(get_repository),
):
    try:
        records = repository.list_player_records()
    except sqlite3.Error:
        logger.exception("Could not load player records for statistics")
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Player store unavailable")

    try:
        stats = compute_statistics(records)
    except StatisticsError as exc:
        logger.error("Statistics computation failed: %s", exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    return StatsEnvelope(
        data=_stats_to_response(stats),
        message="Statistics computed successfully",
    )


@app.get("/api/players/{player_id}", response_model=PlayerEnvelope)
def get_player(
    player_id: int = Path(..., ge=1),
    repository: TennisPlayerRepository = Depends(get_repository),
):
    try:
        player = repository.get_player(player_id)
    except sqlite3.Error:
        logger.exception("Could not load player %s", player_id)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Player store unavailable")

    if player is None:
        logger.warning("Player %s not found", player_id)
        return _error_response(status.HTTP_404_NOT_FOUND, "Player not found")

    return PlayerEnvelope(data=_player_to_response(player), message="Player retrieved successfully")


@app.post("/api/players", response_model=PlayerEnvelope, status_code=status.HTTP_201_CREATED)
def create_player(
    payload: PlayerCreate,
    repository: TennisPlayerRepository = Depends(get_repository),
):
    try:
        player = repository.create_player(
            payload.id,
            firstname=payload.firstname,
            lastname=payload.lastname,
            shortname=payload.shortname,
            sex=payload.sex,
            country=Country(code=payload.country.code, picture=payload.country.picture),
            picture=payload.picture,
            data=PlayerData(
                rank=payload.data.rank,
                points=payload.data.points,
                weight=payload.data.weight,
                height=payload.data.height,
                age=payload.data.age,
                last=tuple(payload.data.last),
            ),
        )
    except PlayerAlreadyExistsError as exc:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))
    except sqlite3.Error:
        logger.exception("Could not store player %s", payload.id)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Player store unavailable")

    return PlayerEnvelope(data=_player_to_response(player), message="Player created successfully")
