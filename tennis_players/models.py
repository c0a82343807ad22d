"""Domain models for the tennis_players project.

Stored players keep the full profile served by the API, while the statistics
engine only ever sees the slimmer ``PlayerRecord`` projection. The aggregate
types are built and discarded within a single statistics computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class Sex(Enum):
    """Tour a player competes on."""

    MALE = "M"
    FEMALE = "F"


@dataclass(frozen=True)
class Country:
    code: str
    picture: str


@dataclass(frozen=True)
class PlayerData:
    """Ranking and anthropometric data of a player.

    ``weight`` is expressed in grams and ``height`` in centimeters. ``last``
    holds the five most recent match results, 1 for a win and 0 for a loss.
    """

    rank: int
    points: int
    weight: int
    height: int
    age: int
    last: Tuple[int, ...]


@dataclass(frozen=True)
class PlayerRecord:
    """Read-only view of a player consumed by the statistics engine."""

    id: int
    full_name: str
    country_code: str
    weight_grams: int
    height_cm: int
    last_five_results: Tuple[int, ...]


@dataclass(frozen=True)
class Player:
    """A stored tennis player."""

    id: int
    firstname: str
    lastname: str
    shortname: str
    sex: Sex
    country: Country
    picture: str
    data: PlayerData
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"

    def to_record(self) -> PlayerRecord:
        """Project this player onto the fields the statistics engine reads."""

        return PlayerRecord(
            id=self.id,
            full_name=self.full_name,
            country_code=self.country.code,
            weight_grams=self.data.weight,
            height_cm=self.data.height,
            last_five_results=tuple(self.data.last),
        )


@dataclass
class CountryAggregate:
    """Running win/loss totals for the players of one country."""

    country_code: str
    total_wins: int = 0
    total_matches: int = 0
    player_names: List[str] = field(default_factory=list)

    def record_player(self, record: PlayerRecord) -> None:
        """Fold ``record`` into the country totals."""

        self.total_wins += sum(record.last_five_results)
        self.total_matches += len(record.last_five_results)
        self.player_names.append(record.full_name)

    @property
    def win_rate(self) -> float:
        """Unrounded percentage of matches won, 0 when no match was played."""

        if self.total_matches <= 0:
            return 0.0
        return self.total_wins / self.total_matches * 100


@dataclass(frozen=True)
class CountryWinRate:
    country: str
    win_rate_percent: float
    wins: int
    total_matches: int
    players: Tuple[str, ...]


@dataclass(frozen=True)
class StatsResult:
    """Aggregate statistics computed over every stored player."""

    best_win_rate_country: CountryWinRate
    average_imc: float
    median_height: float
    total_players: int
    calculated_at: datetime


__all__ = [
    "Country",
    "CountryAggregate",
    "CountryWinRate",
    "Player",
    "PlayerData",
    "PlayerRecord",
    "Sex",
    "StatsResult",
]
