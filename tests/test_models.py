"""Tests for the domain models."""

from tennis_players.models import (
    Country,
    CountryAggregate,
    Player,
    PlayerData,
    PlayerRecord,
    Sex,
)


def _player():
    return Player(
        id=52,
        firstname="Novak",
        lastname="Djokovic",
        shortname="N.DJO",
        sex=Sex.MALE,
        country=Country(code="SRB", picture="https://tenisu.latelier.co/resources/Serbie.png"),
        picture="https://tenisu.latelier.co/resources/Djokovic.png",
        data=PlayerData(
            rank=2,
            points=2542,
            weight=80000,
            height=188,
            age=31,
            last=(1, 1, 1, 1, 1),
        ),
    )


class TestPlayer:
    """Tests for Player."""

    def test_full_name(self):
        assert _player().full_name == "Novak Djokovic"

    def test_to_record(self):
        record = _player().to_record()

        assert record == PlayerRecord(
            id=52,
            full_name="Novak Djokovic",
            country_code="SRB",
            weight_grams=80000,
            height_cm=188,
            last_five_results=(1, 1, 1, 1, 1),
        )

    def test_timestamps_default_to_utc(self):
        player = _player()
        assert player.created_at.tzinfo is not None
        assert player.updated_at.tzinfo is not None


class TestCountryAggregate:
    """Tests for CountryAggregate."""

    def test_empty_aggregate_has_zero_rate(self):
        assert CountryAggregate(country_code="ESP").win_rate == 0.0

    def test_record_player(self):
        aggregate = CountryAggregate(country_code="SRB")
        aggregate.record_player(_player().to_record())

        assert aggregate.total_wins == 5
        assert aggregate.total_matches == 5
        assert aggregate.player_names == ["Novak Djokovic"]
        assert aggregate.win_rate == 100.0
