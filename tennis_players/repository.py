"""SQLite repository for tennis players."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Tuple

from .exceptions import PlayerAlreadyExistsError
from .models import Country, Player, PlayerData, PlayerRecord, Sex, utcnow

logger = logging.getLogger(__name__)


def _iso_datetime(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat(timespec="seconds")


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _encode_results(results: Iterable[int]) -> str:
    return ",".join(str(result) for result in results)


def _parse_results(value: str) -> Tuple[int, ...]:
    if not value:
        return ()
    return tuple(int(result) for result in value.split(","))


def _row_to_player(row: sqlite3.Row) -> Player:
    return Player(
        id=row["id"],
        firstname=row["firstname"],
        lastname=row["lastname"],
        shortname=row["shortname"],
        sex=Sex(row["sex"]),
        country=Country(code=row["country_code"], picture=row["country_picture"]),
        picture=row["picture"],
        data=PlayerData(
            rank=row["rank"],
            points=row["points"],
            weight=row["weight"],
            height=row["height"],
            age=row["age"],
            last=_parse_results(row["last_results"]),
        ),
        created_at=_parse_datetime(row["created_at"]),
        updated_at=_parse_datetime(row["updated_at"]),
    )


class TennisPlayerRepository:
    """Persistence layer backed by SQLite."""

    def __init__(self, path: str) -> None:
        self._path = path

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create tables if they do not already exist."""

        # ``id`` must not alias rowid: records are read back in insertion
        # (rowid) order.
        with self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS players (
                    id INTEGER NOT NULL UNIQUE,
                    firstname TEXT NOT NULL,
                    lastname TEXT NOT NULL,
                    shortname TEXT NOT NULL UNIQUE,
                    sex TEXT NOT NULL,
                    country_code TEXT NOT NULL,
                    country_picture TEXT NOT NULL,
                    picture TEXT NOT NULL,
                    rank INTEGER NOT NULL,
                    points INTEGER NOT NULL,
                    weight INTEGER NOT NULL,
                    height INTEGER NOT NULL,
                    age INTEGER NOT NULL,
                    last_results TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_players_rank ON players (rank);
                """
            )

    def ping(self) -> bool:
        """Return True when the database answers a trivial query."""

        try:
            with self._connection() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error:
            logger.exception("Database ping failed for %s", self._path)
            return False
        return True

    # Player operations -------------------------------------------------
    def create_player(
        self,
        player_id: int,
        *,
        firstname: str,
        lastname: str,
        shortname: str,
        sex: Sex,
        country: Country,
        picture: str,
        data: PlayerData,
    ) -> Player:
        now = utcnow()
        player = Player(
            id=player_id,
            firstname=firstname,
            lastname=lastname,
            shortname=shortname,
            sex=sex,
            country=country,
            picture=picture,
            data=data,
            created_at=now,
            updated_at=now,
        )
        self.add_player(player)
        return player

    def add_player(self, player: Player) -> None:
        with self._connection() as conn:
            self._ensure_unique(conn, player)
            try:
                conn.execute(
                    """
                    INSERT INTO players (
                        id,
                        firstname,
                        lastname,
                        shortname,
                        sex,
                        country_code,
                        country_picture,
                        picture,
                        rank,
                        points,
                        weight,
                        height,
                        age,
                        last_results,
                        created_at,
                        updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        player.id,
                        player.firstname,
                        player.lastname,
                        player.shortname,
                        player.sex.value,
                        player.country.code,
                        player.country.picture,
                        player.picture,
                        player.data.rank,
                        player.data.points,
                        player.data.weight,
                        player.data.height,
                        player.data.age,
                        _encode_results(player.data.last),
                        _iso_datetime(player.created_at),
                        _iso_datetime(player.updated_at),
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise PlayerAlreadyExistsError(
                    f"A player with id {player.id} or shortname {player.shortname} already exists"
                ) from exc

        logger.info(
            "Created player %s (%s), rank %s, country %s",
            player.id,
            player.full_name,
            player.data.rank,
            player.country.code,
        )

    def _ensure_unique(self, conn: sqlite3.Connection, player: Player) -> None:
        row = conn.execute(
            "SELECT firstname, lastname FROM players WHERE id = ?", (player.id,)
        ).fetchone()
        if row is not None:
            logger.warning(
                "Rejected player %s: id already used by %s %s",
                player.id,
                row["firstname"],
                row["lastname"],
            )
            raise PlayerAlreadyExistsError(f"A player with id {player.id} already exists")

        row = conn.execute(
            "SELECT firstname, lastname FROM players WHERE shortname = ?",
            (player.shortname,),
        ).fetchone()
        if row is not None:
            logger.warning(
                "Rejected player %s: shortname %s already used by %s %s",
                player.id,
                player.shortname,
                row["firstname"],
                row["lastname"],
            )
            raise PlayerAlreadyExistsError(
                f"A player with shortname {player.shortname} already exists"
            )

    def get_player(self, player_id: int) -> Optional[Player]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        if row is None:
            return None
        return _row_to_player(row)

    def list_players(self) -> List[Player]:
        """Return every player, best ranked first."""

        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY rank, rowid").fetchall()
        return [_row_to_player(row) for row in rows]

    # Statistics source -------------------------------------------------
    def list_player_records(self) -> List[PlayerRecord]:
        """Snapshot of every stored player in insertion order."""

        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY rowid").fetchall()
        return [_row_to_player(row).to_record() for row in rows]


__all__ = ["TennisPlayerRepository"]
