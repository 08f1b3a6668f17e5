"""Data models for emojimash."""

from emojimash.models.combination import CombinationRecord
from emojimash.models.lookup import LookupResult, LookupStatus
from emojimash.models.refresh import RefreshOutcome, RefreshSource, RefreshStatus

__all__ = [
    "CombinationRecord",
    "LookupResult",
    "LookupStatus",
    "RefreshOutcome",
    "RefreshSource",
    "RefreshStatus",
]
