"""In-memory mapping store.

This is the only component that owns the pair -> image mapping. The mapping
is never mutated in place: :meth:`MappingStore.replace_all` builds a new
snapshot off to the side and publishes it with a single reference swap, so a
reader sees either the old snapshot in full or the new one in full.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from emojimash.exceptions import NotInitializedError, RefreshStoreError
from emojimash.models.combination import CombinationRecord
from emojimash.pair_key import PairKey, normalize

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class MappingSnapshot:
    """Immutable view of every usable combination at one point in time."""

    entries: Mapping[PairKey, str]
    record_count: int
    duplicate_count: int = 0
    ignored_count: int = 0
    loaded_at: datetime = field(default_factory=_utcnow)

    def get(self, key: PairKey) -> str | None:
        return self.entries.get(key)

    def __len__(self) -> int:
        return len(self.entries)


def build_snapshot(records: Iterable[CombinationRecord]) -> MappingSnapshot:
    """Index *records* by normalized pair.

    Duplicate policy: the last record for a pair wins, in input order.
    Incomplete records are ignored and counted.
    """
    entries: dict[PairKey, str] = {}
    record_count = 0
    duplicates = 0
    ignored = 0
    for record in records:
        if not isinstance(record, CombinationRecord):
            raise TypeError(f"expected CombinationRecord, got {type(record).__name__}")
        record_count += 1
        if not record.is_complete:
            ignored += 1
            continue
        # is_complete guarantees the three fields are non-empty strings.
        key = normalize(record.left_emoji, record.right_emoji)  # type: ignore[arg-type]
        if key in entries:
            duplicates += 1
        entries[key] = record.image_url  # type: ignore[assignment]
    return MappingSnapshot(
        entries=MappingProxyType(entries),
        record_count=record_count,
        duplicate_count=duplicates,
        ignored_count=ignored,
    )


class MappingStore:
    """Holds the current :class:`MappingSnapshot`.

    Lookups are plain dictionary reads against whatever snapshot is
    published at call time and never block on a refresh.
    """

    def __init__(self) -> None:
        self._snapshot: MappingSnapshot | None = None

    @property
    def snapshot(self) -> MappingSnapshot | None:
        """The published snapshot, or ``None`` before the first replace."""
        return self._snapshot

    def is_initialized(self) -> bool:
        return self._snapshot is not None

    def __len__(self) -> int:
        snapshot = self._snapshot
        return 0 if snapshot is None else len(snapshot)

    def lookup(self, token_a: str, token_b: str) -> str | None:
        """Return the image URL for the unordered pair, or ``None``.

        Raises :class:`NotInitializedError` when no snapshot has been
        published yet, which is distinct from "not found".
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise NotInitializedError("mapping store has not been populated")
        return snapshot.get(normalize(token_a, token_b))

    def prepare(self, records: Iterable[CombinationRecord]) -> MappingSnapshot:
        """Build a snapshot from *records* without publishing it.

        Raises :class:`RefreshStoreError` if the snapshot cannot be built.
        """
        try:
            return build_snapshot(records)
        except Exception as exc:
            raise RefreshStoreError(f"Failed to build mapping snapshot: {exc}") from exc

    def publish(self, snapshot: MappingSnapshot) -> None:
        """Make *snapshot* the one lookups read, in a single reference swap."""
        self._snapshot = snapshot
        _logger.debug(
            "Published snapshot with %d pairs (%d records, %d duplicates, %d ignored)",
            len(snapshot),
            snapshot.record_count,
            snapshot.duplicate_count,
            snapshot.ignored_count,
        )

    def replace_all(self, records: Iterable[CombinationRecord]) -> MappingSnapshot:
        """Discard the current snapshot and publish one built from *records*.

        Raises :class:`RefreshStoreError` if the new snapshot cannot be
        built; the previous snapshot stays published in that case.
        """
        snapshot = self.prepare(records)
        self.publish(snapshot)
        return snapshot
