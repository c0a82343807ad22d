"""tennis_players package exposing domain models, statistics and repository."""

__version__ = "1.0.0"

from .exceptions import (
    EmptyDataSetError,
    NoValidAnthropometricDataError,
    PlayerAlreadyExistsError,
    StatisticsError,
    TennisPlayersError,
)
from .models import (
    Country,
    CountryAggregate,
    CountryWinRate,
    Player,
    PlayerData,
    PlayerRecord,
    Sex,
    StatsResult,
)
from .repository import TennisPlayerRepository
from .statistics import compute_statistics

__all__ = [
    "Country",
    "CountryAggregate",
    "CountryWinRate",
    "EmptyDataSetError",
    "NoValidAnthropometricDataError",
    "Player",
    "PlayerAlreadyExistsError",
    "PlayerData",
    "PlayerRecord",
    "Sex",
    "StatisticsError",
    "StatsResult",
    "TennisPlayerRepository",
    "TennisPlayersError",
    "compute_statistics",
]
