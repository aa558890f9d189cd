# path: archroute-api/app/services/errors.py

from __future__ import annotations


class InsufficientWaypointsError(ValueError):
    """Raised before any I/O when fewer than two waypoints are supplied."""

    def __init__(self, count: int):
        super().__init__(f"At least 2 waypoints are required to build a route, got {count}")
        self.count = count


class ProviderError(RuntimeError):
    """Base for directions-provider failures. `code` is stable and safe to expose."""

    code = "unavailable"
    retryable = False


class InvalidCredentialError(ProviderError):
    code = "invalid_credential"


class UnroutableError(ProviderError):
    code = "unroutable"


class RateLimitedError(ProviderError):
    code = "rate_limited"
    retryable = True


class ProviderUnavailableError(ProviderError):
    code = "unavailable"
    retryable = True


class GenerationError(ValueError):
    """Raised when a generated route cannot be assembled from the given request."""


class PointProviderError(GenerationError):
    """The AI point provider could not be reached or refused the request."""
