"""Custom exception hierarchy for emojimash."""

from __future__ import annotations


class EmojiMashError(Exception):
    """Base exception for all emojimash errors."""


class EmojiMashConfigError(EmojiMashError):
    """Invalid or missing configuration."""


class InputFormatError(EmojiMashError):
    """A lookup query did not decompose into exactly two non-empty tokens."""


class NotInitializedError(EmojiMashError):
    """The mapping store has never been populated."""


class RefreshError(EmojiMashError):
    """A refresh failed at one of its stages.

    The previous snapshot (or the uninitialized state) is left untouched.
    ``stage`` names the failing step so callers can report it.
    """

    stage: str = "refresh"

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class RefreshNetworkError(RefreshError):
    """Transport failure: DNS, connection or timeout."""

    stage = "network"


class RefreshHttpStatusError(RefreshError):
    """The remote answered with a non-success status."""

    stage = "http"

    def __init__(self, message: str, *, status_code: int, url: str = "") -> None:
        self.status_code = status_code
        super().__init__(message, url=url)


class RefreshDecodeError(RefreshError):
    """Response body is not UTF-8 JSON of the expected shape."""

    stage = "decode"


class RefreshPersistError(RefreshError):
    """The local copy of the raw document could not be written or read."""

    stage = "persist"


class RefreshStoreError(RefreshError):
    """Replacing the mapping snapshot failed."""

    stage = "store"
