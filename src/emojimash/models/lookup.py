"""Lookup result model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class LookupStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_INITIALIZED = "not_initialized"
    INVALID_INPUT = "invalid_input"
    ERROR = "error"


class LookupResult(BaseModel):
    """Answer to a pair query.

    ``url`` is set only for :attr:`LookupStatus.FOUND`; ``reason`` carries
    the explanation for every other status.
    """

    model_config = ConfigDict(frozen=True)

    status: LookupStatus
    url: str | None = None
    reason: str | None = None

    @classmethod
    def found(cls, url: str) -> LookupResult:
        return cls(status=LookupStatus.FOUND, url=url)

    @classmethod
    def not_found(cls) -> LookupResult:
        return cls(status=LookupStatus.NOT_FOUND, reason="no image for this pair")

    @classmethod
    def not_initialized(cls, reason: str = "mapping not loaded yet, try again shortly") -> LookupResult:
        return cls(status=LookupStatus.NOT_INITIALIZED, reason=reason)

    @classmethod
    def invalid_input(cls, reason: str) -> LookupResult:
        return cls(status=LookupStatus.INVALID_INPUT, reason=reason)

    @classmethod
    def error(cls, reason: str) -> LookupResult:
        return cls(status=LookupStatus.ERROR, reason=reason)

    @property
    def message(self) -> str:
        """Human readable text for the response body."""
        if self.status == LookupStatus.FOUND and self.url is not None:
            return self.url
        if self.status == LookupStatus.NOT_FOUND:
            return "No combined image found for this pair."
        if self.status == LookupStatus.INVALID_INPUT:
            return f"Invalid pair format: {self.reason}"
        if self.status == LookupStatus.NOT_INITIALIZED:
            return f"Not initialized: {self.reason}"
        return f"Lookup failed: {self.reason}"
