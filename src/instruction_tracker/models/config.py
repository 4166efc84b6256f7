"""Configuration models for the instruction tracker.

TrackerConfig holds per-instance settings that never leave the process.
TrackerSettings is the persisted state blob: the auto-hide flag and the
per-chat retention mapping.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Only the last RECENT_WINDOW messages are exempt from hiding.
RECENT_WINDOW = 2

# Number of body characters that go into a fingerprint.
FINGERPRINT_BODY_LENGTH = 50

DEFAULT_CHAT_ID = "default"

SETTINGS_KEY = "instruction_tracker"


class TrackerConfig(BaseModel):
    """Per-tracker configuration."""

    db_path: str = ":memory:"
    settings_key: str = SETTINGS_KEY
    default_chat_id: str = DEFAULT_CHAT_ID
    recent_window: int = Field(default=RECENT_WINDOW, ge=0)
    fingerprint_length: int = Field(default=FINGERPRINT_BODY_LENGTH, ge=1)
    immediate_persist: bool = False
    """Write on every persistence request instead of coalescing until flush()."""


class TrackerSettings(BaseModel):
    """Persisted tracker state.

    Serialized by alias so the stored layout is
    ``{"autoHide": bool, "keptInstructions": {chat_id: {fingerprint: true}}}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    auto_hide: bool = Field(default=False, alias="autoHide")
    kept_instructions: dict[str, dict[str, bool]] = Field(
        default_factory=dict, alias="keptInstructions"
    )

    @field_validator("kept_instructions", mode="before")
    @classmethod
    def _drop_unkept(cls, value: object) -> object:
        """Presence encodes "kept": discard entries that are not ``True``."""
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        cleaned: dict[str, dict[str, bool]] = {}
        for chat_id, entries in value.items():
            if not isinstance(entries, dict):
                cleaned[chat_id] = entries
                continue
            cleaned[chat_id] = {fp: True for fp, kept in entries.items() if kept is True}
        return cleaned

    def to_payload(self) -> dict:
        """Return the JSON-ready stored layout."""
        return self.model_dump(mode="json", by_alias=True)
