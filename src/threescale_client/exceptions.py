"""Custom exception hierarchy for the 3scale client."""
from __future__ import annotations

from typing import Any


class ThreeScaleError(RuntimeError):
    """Base error for 3scale client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InvalidInputError(ThreeScaleError, ValueError):
    """Raised when the caller supplies unusable parameters."""


class ConfigurationError(ThreeScaleError):
    """Raised when client configuration cannot be resolved."""


class TransportError(ThreeScaleError):
    """Raised when an HTTP request cannot be delivered."""


class ServerError(ThreeScaleError):
    """Raised when the service answers with a 5xx status."""


class UnexpectedResponseError(ThreeScaleError):
    """Raised when the service returns a body we cannot interpret."""


class UnknownValueKindError(ThreeScaleError):
    """Raised when a parameter entry carries an unrecognized value tag."""
