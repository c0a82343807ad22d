"""Aggregate statistics over tennis player records.

Three independent aggregations are computed over the same record set:

* the country whose players won the largest share of their last matches,
* the average Body Mass Index (IMC) of players with usable measurements,
* the median height of every player.

Every function is pure: the record set is an explicit argument and all
intermediate accumulators live only for the duration of one call.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence

from .exceptions import EmptyDataSetError, NoValidAnthropometricDataError
from .models import CountryAggregate, CountryWinRate, PlayerRecord, StatsResult

logger = logging.getLogger(__name__)


def round_half_away_from_zero(value: float, places: int = 2) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero.

    The shortest decimal representation of the float is rounded, so
    ``24.845`` becomes ``24.85`` even though its binary value sits slightly
    below the midpoint.
    """

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def aggregate_by_country(records: Sequence[PlayerRecord]) -> Dict[str, CountryAggregate]:
    """Group win/loss totals by country, keeping first-seen country order."""

    aggregates: Dict[str, CountryAggregate] = {}
    for record in records:
        aggregate = aggregates.get(record.country_code)
        if aggregate is None:
            aggregate = CountryAggregate(country_code=record.country_code)
            aggregates[record.country_code] = aggregate
        aggregate.record_player(record)
    return aggregates


def best_win_rate_country(records: Sequence[PlayerRecord]) -> CountryWinRate:
    """Return the country with the highest aggregate win rate.

    On equal rates the country met first in ``records`` is kept.
    """

    if not records:
        raise EmptyDataSetError()

    aggregates = list(aggregate_by_country(records).values())
    best = aggregates[0]
    for aggregate in aggregates[1:]:
        if aggregate.win_rate > best.win_rate:
            best = aggregate

    return CountryWinRate(
        country=best.country_code,
        win_rate_percent=round_half_away_from_zero(best.win_rate),
        wins=best.total_wins,
        total_matches=best.total_matches,
        players=tuple(best.player_names),
    )


def body_mass_index(weight_grams: float, height_cm: float) -> float:
    """IMC in kg/m² for a weight in grams and a height in centimeters."""

    weight_kg = weight_grams / 1000
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def _has_valid_measurements(record: PlayerRecord) -> bool:
    if record.weight_grams <= 0:
        logger.warning(
            "Excluding player %s (%s) from IMC average: invalid weight %s",
            record.id,
            record.full_name,
            record.weight_grams,
        )
        return False
    if record.height_cm <= 0:
        logger.warning(
            "Excluding player %s (%s) from IMC average: invalid height %s",
            record.id,
            record.full_name,
            record.height_cm,
        )
        return False
    return True


def average_imc(records: Sequence[PlayerRecord]) -> float:
    """Mean IMC over players with a positive weight and height, 2 decimals."""

    valid = [record for record in records if _has_valid_measurements(record)]
    if not valid:
        raise NoValidAnthropometricDataError()

    values = [body_mass_index(record.weight_grams, record.height_cm) for record in valid]
    return round_half_away_from_zero(sum(values) / len(values))


def median_height(records: Sequence[PlayerRecord]) -> float:
    """Median height in centimeters over every record."""

    if not records:
        raise EmptyDataSetError()

    heights: List[int] = sorted(record.height_cm for record in records)
    middle = len(heights) // 2
    if len(heights) % 2 == 1:
        return heights[middle]
    return (heights[middle - 1] + heights[middle]) / 2


def compute_statistics(records: Sequence[PlayerRecord]) -> StatsResult:
    """Compute the best win-rate country, average IMC and median height.

    Raises:
        EmptyDataSetError: ``records`` is empty.
        NoValidAnthropometricDataError: no record has both a positive weight
            and a positive height.
    """

    if not records:
        raise EmptyDataSetError()

    best_country = best_win_rate_country(records)
    imc = average_imc(records)
    median = median_height(records)

    result = StatsResult(
        best_win_rate_country=best_country,
        average_imc=imc,
        median_height=median,
        total_players=len(records),
        calculated_at=datetime.now(timezone.utc),
    )

    logger.info(
        "Computed statistics for %d players: best country %s (%.2f%%), "
        "average IMC %.2f, median height %s",
        result.total_players,
        best_country.country,
        best_country.win_rate_percent,
        result.average_imc,
        result.median_height,
    )
    return result


__all__ = [
    "aggregate_by_country",
    "average_imc",
    "best_win_rate_country",
    "body_mass_index",
    "compute_statistics",
    "median_height",
    "round_half_away_from_zero",
]
