"""Custom exceptions for the tennis_players package."""


class TennisPlayersError(Exception):
    """Base exception for tennis_players errors."""
    pass


class StatisticsError(TennisPlayersError):
    """Raised when player statistics cannot be computed."""
    pass


class EmptyDataSetError(StatisticsError):
    """Raised when no player records were supplied."""

    def __init__(self, message: str = "no players found") -> None:
        super().__init__(message)


class NoValidAnthropometricDataError(StatisticsError):
    """Raised when no player has both a positive weight and a positive height."""

    def __init__(
        self, message: str = "no player has valid data to compute average BMI"
    ) -> None:
        super().__init__(message)


class PlayerAlreadyExistsError(TennisPlayersError):
    """Raised when a player id or shortname is already stored."""
    pass
