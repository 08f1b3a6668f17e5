"""Service configuration for emojimash."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from emojimash._constants import (
    ARCHIVE_NAME,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    METADATA_URL,
    PAIR_SEPARATOR,
)
from emojimash.exceptions import EmojiMashConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise EmojiMashConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class EmojiMashConfig:
    """Service configuration.

    Parameters
    ----------
    metadata_url : str
        Location of the upstream combination document.
    data_dir : Path
        Directory holding the archived copy of the last fetched document.
    archive_name : str
        File name of the archived document inside ``data_dir``.
    host : str
        Interface the HTTP server binds to.
    port : int
        Port the HTTP server listens on.
    fetch_timeout : float
        Upper bound in seconds for one download of the document,
        connection and body included.
    bootstrap_on_startup : bool
        Warm the store when the server starts, from the archive if one
        exists, otherwise from the remote document.
    pair_separator : str
        Separator between the two tokens of a ``pair`` query.
    """

    metadata_url: str = METADATA_URL
    data_dir: Path = Path(".")
    archive_name: str = ARCHIVE_NAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    bootstrap_on_startup: bool = True
    pair_separator: str = PAIR_SEPARATOR

    def __post_init__(self) -> None:
        if self.fetch_timeout <= 0:
            raise EmojiMashConfigError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if not self.pair_separator:
            raise EmojiMashConfigError("pair_separator must be non-empty")

    @property
    def archive_path(self) -> Path:
        """Full path of the archived raw document."""
        return Path(self.data_dir) / self.archive_name

    @classmethod
    def from_env(cls, **overrides: Any) -> EmojiMashConfig:
        """Create configuration from ``EMOJIMASH_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "EMOJIMASH_METADATA_URL": "metadata_url",
            "EMOJIMASH_ARCHIVE_NAME": "archive_name",
            "EMOJIMASH_HOST": "host",
            "EMOJIMASH_PAIR_SEPARATOR": "pair_separator",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir_env = env.get("EMOJIMASH_DATA_DIR")
        if data_dir_env is not None:
            config_kwargs["data_dir"] = Path(data_dir_env)

        port_env = env.get("EMOJIMASH_PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_number("EMOJIMASH_PORT", port_env, int)

        timeout_env = env.get("EMOJIMASH_FETCH_TIMEOUT")
        if timeout_env is not None and "fetch_timeout" not in overrides:
            config_kwargs["fetch_timeout"] = _env_number("EMOJIMASH_FETCH_TIMEOUT", timeout_env, float)

        if "bootstrap_on_startup" not in overrides:
            config_kwargs["bootstrap_on_startup"] = _env_bool(env.get("EMOJIMASH_BOOTSTRAP_ON_STARTUP"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
