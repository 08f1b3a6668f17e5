"""Combination record as published in the upstream metadata document."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CombinationRecord(BaseModel):
    """One ``(left, right) -> image`` entry.

    The upstream document uses camelCase keys (``leftEmoji``,
    ``rightEmoji``, ``gStaticUrl``). Missing or non-string values become
    ``None`` so a defect in one record never fails validation of the
    document; :attr:`is_complete` tells whether the record is usable.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    base_emoji: str = ""
    left_emoji: str | None = Field(default=None, alias="leftEmoji")
    right_emoji: str | None = Field(default=None, alias="rightEmoji")
    image_url: str | None = Field(default=None, alias="gStaticUrl")

    @model_validator(mode="before")
    @classmethod
    def _drop_non_strings(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if isinstance(value, str)}

    @property
    def is_complete(self) -> bool:
        """Whether both tokens and the image URL are present and non-empty."""
        return bool(self.left_emoji and self.right_emoji and self.image_url)
