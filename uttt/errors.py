"""
UTTT Error Hierarchy

Unified exception hierarchy for the game core. All custom exceptions inherit
from UTTTError so callers can catch and filter them in one place.

Invalid moves on the normal play path are not exceptional: the engine
signals them by returning the unmodified state. Exceptions are reserved for
bad persisted records, bad configuration and the strict move API.

Usage:
    from uttt.errors import StateValidationError

    try:
        state = deserialize_state(record)
    except StateValidationError as e:
        logger.warning(f"Discarding saved game: {e.message}")
"""

from typing import Any

__all__ = [
    # AI errors
    "AIError",
    "AIFallbackError",
    "AITimeoutError",
    "ConfigurationError",
    "InvalidMoveError",
    # Game rules errors
    "RulesViolationError",
    "StateValidationError",
    # Base error
    "UTTTError",
    # Validation errors
    "ValidationError",
]


class UTTTError(Exception):
    """Base exception for all game core errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "UTTT_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Game Rules Errors
# =============================================================================


class RulesViolationError(UTTTError):
    """Move rejected by the turn-order rules."""
    code: str = "RULES_VIOLATION"


class InvalidMoveError(RulesViolationError):
    """Move that cannot be applied to the current state.

    Only raised by ``GameEngine.apply_move_strict``; the regular
    ``apply_move`` returns the input state instead.

    Attributes:
        reason: Short machine-readable reason (e.g. "occupied", "wrong_board")
    """
    code: str = "INVALID_MOVE"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.reason = reason
        if reason:
            self.context["reason"] = reason


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(UTTTError):
    """Input failed validation."""
    code: str = "VALIDATION_ERROR"


class StateValidationError(ValidationError):
    """Persisted game record is malformed.

    Attributes:
        field: Name of the offending record field, when known
    """
    code: str = "STATE_VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.field = field
        if field:
            self.context["field"] = field


class ConfigurationError(ValidationError):
    """Invalid configuration value (player count, env knob, threshold)."""
    code: str = "CONFIGURATION_ERROR"


# =============================================================================
# AI Errors
# =============================================================================


class AIError(UTTTError):
    """Base class for move-selection errors."""
    code: str = "AI_ERROR"


class AIFallbackError(AIError):
    """Primary move-selection path failed and a fallback was used.

    Attributes:
        original_error: The error that caused the fallback
        fallback_method: Name of the fallback path taken
    """
    code: str = "AI_FALLBACK"

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        fallback_method: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.original_error = original_error
        self.fallback_method = fallback_method
        if original_error:
            self.context["original_error"] = str(original_error)
        if fallback_method:
            self.context["fallback_method"] = fallback_method


class AITimeoutError(AIError):
    """Background move selection did not finish within its budget.

    Attributes:
        timeout_seconds: The timeout that was exceeded
    """
    code: str = "AI_TIMEOUT"

    def __init__(
        self,
        message: str,
        timeout_seconds: float | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None:
            self.context["timeout_seconds"] = timeout_seconds
