"""Exceptions raised by the Riot client and the analysis pipeline."""

from __future__ import annotations

from typing import Optional


class ConfigurationError(RuntimeError):
    """A required setting (the Riot API key) is missing."""


class InvalidSummonerInput(ValueError):
    """The summoner input is not a usable Riot ID or summoner name."""


class RiotApiError(Exception):
    """A Riot API request failed. ``status_code`` is the upstream status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamNotFound(RiotApiError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, 404)


class UpstreamUnauthorized(RiotApiError):
    def __init__(self, message: str = "API key unauthorized - check validity"):
        super().__init__(message, 401)


class UpstreamForbidden(RiotApiError):
    def __init__(self, message: str = "API key forbidden - check permissions"):
        super().__init__(message, 403)


class UpstreamRateLimited(RiotApiError):
    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, 429)


class NetworkError(RiotApiError):
    def __init__(self, message: str):
        super().__init__(message, 500)


STATUS_ERRORS: dict[int, type[RiotApiError]] = {
    401: UpstreamUnauthorized,
    403: UpstreamForbidden,
    404: UpstreamNotFound,
    429: UpstreamRateLimited,
}


def error_for_status(status_code: int, url: str) -> RiotApiError:
    """Map a non-2xx status to its typed error."""
    error_cls = STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls()
    return RiotApiError(f"API request failed: {status_code} for {url}", status_code)
