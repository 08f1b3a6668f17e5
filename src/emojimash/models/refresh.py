"""Refresh outcome model."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RefreshStatus(StrEnum):
    COMPLETED = "completed"
    ALREADY_IN_PROGRESS = "already_in_progress"


class RefreshSource(StrEnum):
    REMOTE = "remote"
    ARCHIVE = "archive"


class RefreshOutcome(BaseModel):
    """Result of a refresh call that did not fail."""

    model_config = ConfigDict(frozen=True)

    status: RefreshStatus
    source: RefreshSource = RefreshSource.REMOTE
    record_count: int = 0
    skipped_count: int = Field(default=0, description="Malformed records left out of the snapshot.")
    duplicate_count: int = Field(default=0, description="Records that replaced an earlier one for the same pair.")
    document_bytes: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    duration_s: float = 0.0

    @classmethod
    def already_in_progress(cls) -> RefreshOutcome:
        return cls(status=RefreshStatus.ALREADY_IN_PROGRESS)

    @property
    def completed(self) -> bool:
        return self.status == RefreshStatus.COMPLETED
