"""Metadata document decoding + flattening.

Document shape::

    {"data": {"<codepoint>": {"emoji": "😀",
                              "combinations": {"<other>": [record, ...]}}}}

Policy: skip-and-continue. A record that is not an object, or lacks a
non-empty ``leftEmoji``, ``rightEmoji`` or ``gStaticUrl``, is dropped and
counted; the rest of the document is still ingested. Only a body that is
not JSON, or has no ``data`` object at the top, fails the whole parse.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from emojimash._constants import COMBINATIONS_KEY, DATA_KEY, EMOJI_KEY
from emojimash.exceptions import RefreshDecodeError
from emojimash.models.combination import CombinationRecord

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParsedMetadata:
    records: list[CombinationRecord] = field(default_factory=list)
    skipped: int = 0


def decode_document(body: bytes) -> dict[str, Any]:
    """Decode *body* as UTF-8 JSON and return the ``data`` object."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RefreshDecodeError(f"Metadata is not valid UTF-8: {exc}") from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RefreshDecodeError(f"Metadata is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise RefreshDecodeError("Metadata is nested too deeply to decode") from exc

    if not isinstance(document, dict):
        raise RefreshDecodeError(f"Metadata top level must be an object, got {type(document).__name__}")
    data = document.get(DATA_KEY)
    if not isinstance(data, dict):
        raise RefreshDecodeError(f"Metadata is missing the '{DATA_KEY}' object")
    return data


def _parse_record(raw: Any, base_emoji: str) -> CombinationRecord | None:
    if not isinstance(raw, dict):
        return None
    record = CombinationRecord.model_validate({**raw, "base_emoji": base_emoji})
    return record if record.is_complete else None


def parse_metadata(body: bytes) -> ParsedMetadata:
    """Flatten every combination group of every base emoji into one list."""
    data = decode_document(body)
    parsed = ParsedMetadata()

    for key, entry in data.items():
        if not isinstance(entry, dict):
            _logger.debug("Ignoring non-object entry %r", key)
            continue
        base_emoji = entry.get(EMOJI_KEY)
        if not isinstance(base_emoji, str):
            base_emoji = ""
        groups = entry.get(COMBINATIONS_KEY)
        if not isinstance(groups, dict):
            continue
        for group_key, group in groups.items():
            if not isinstance(group, list):
                _logger.debug("Ignoring non-list combination group %r/%r", key, group_key)
                continue
            for raw in group:
                record = _parse_record(raw, base_emoji)
                if record is None:
                    parsed.skipped += 1
                    continue
                parsed.records.append(record)

    if parsed.skipped:
        _logger.warning("Skipped %d malformed combination record(s)", parsed.skipped)
    return parsed
