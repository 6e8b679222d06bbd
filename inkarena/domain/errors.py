"""Domain error taxonomy

Validation errors are raised before any state change and subclass
``ValueError``; state errors signal a sequencing problem on the caller's side.
"""

from typing import Optional


class GameError(Exception):
    """Base class for every error raised by the game core"""

    code = "GAME_ERROR"
    default_message = "Game error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# Validation errors


class GameValidationError(GameError, ValueError):
    """Input rejected before any mutation"""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidNameError(GameValidationError):
    code = "INVALID_NAME"
    default_message = "Player name is empty or too long"


class InvalidSizeError(GameValidationError):
    code = "INVALID_SIZE"
    default_message = "Ink mark size is out of bounds"


class InvalidMarkSizeError(InvalidSizeError):
    code = "INVALID_MARK_SIZE"
    default_message = "Invalid ink mark size"


class InvalidDurationError(GameValidationError):
    code = "INVALID_DURATION"
    default_message = "Game duration is out of bounds"


class NoPlayersError(GameValidationError):
    code = "NO_PLAYERS"
    default_message = "At least one player is required to start a game"


class InvalidPlayerCountError(GameValidationError):
    code = "INVALID_PLAYER_COUNT"
    default_message = "Invalid player count"


class DuplicatePlayerNamesError(GameValidationError):
    code = "DUPLICATE_PLAYER_NAMES"
    default_message = "All players must have unique names"


class DuplicatePlayerColorsError(GameValidationError):
    code = "DUPLICATE_PLAYER_COLORS"
    default_message = "All players must have unique colors"


class InvalidFieldSizeError(GameValidationError):
    code = "INVALID_FIELD_SIZE"
    default_message = "Field area must be finite and positive"


class InvalidRulesError(GameValidationError):
    code = "INVALID_RULES"
    default_message = "Game rules are inconsistent"


class InvalidScoreError(GameValidationError):
    code = "INVALID_SCORE"
    default_message = "Painted area must be between 0.0 and 100.0"


class InvalidPositionError(GameValidationError):
    code = "INVALID_POSITION"
    default_message = "Position is not finite or lies outside the field"


class MarkLimitExceededError(GameValidationError):
    code = "MARK_LIMIT_EXCEEDED"
    default_message = "Player has reached the maximum number of ink marks"


# State errors


class GameStateError(GameError):
    """Operation does not fit the current session state"""

    code = "STATE_ERROR"
    default_message = "Invalid game state"


class NoActiveGameError(GameStateError):
    code = "NO_ACTIVE_GAME"
    default_message = "No active game session"


class GameNotActiveError(GameStateError):
    code = "GAME_NOT_ACTIVE"
    default_message = "Game is not currently active"


class GameTimeExpiredError(GameStateError):
    code = "GAME_TIME_EXPIRED"
    default_message = "Game time has expired"


class GameSessionNotFoundError(GameStateError):
    code = "GAME_SESSION_NOT_FOUND"
    default_message = "Game session not found"


class PlayerNotFoundError(GameStateError):
    code = "PLAYER_NOT_FOUND"
    default_message = "Player not found"


class PlayerNotInGameError(GameStateError):
    code = "PLAYER_NOT_IN_GAME"
    default_message = "Player is not part of this game"


class PlayerNotActiveError(GameStateError):
    code = "PLAYER_NOT_ACTIVE"
    default_message = "Player is not currently active"


class StaleIntentError(GameStateError):
    code = "STALE_INTENT"
    default_message = "Intent is older than the last applied intent for this game"
