"""Base model for platform response records.

Every response model inherits from :class:`MinappBaseModel` which
provides:

* Frozen instances, so a parsed record is never mutated in place.
* ``extra="ignore"`` so new platform fields do not break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used instead.
* A ``raw`` dict that captures the original payload.

Field names follow the platform's JSON keys; where the platform uses
camelCase (decrypted user payloads) the model declares an explicit
alias and keeps a snake_case attribute.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MinappBaseModel(BaseModel):
    """Base for platform response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an API dict).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
