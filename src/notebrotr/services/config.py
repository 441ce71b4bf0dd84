"""Archiver configuration models.

Loaded from YAML through [load_yaml()][notebrotr.core.yaml.load_yaml] and
validated by Pydantic:

```yaml
batch:
  size: 50
  delay_ms: 250
directories:
  notes: nostr/notes
  replies: nostr/replies
  profiles: nostr/profiles
render:
  include_profile_references: false
verify_signatures: false
```

See Also:
    [Archiver][notebrotr.services.archiver.Archiver]: Consumes
        [ArchiverConfig][notebrotr.services.config.ArchiverConfig].
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class BatchConfig(BaseModel):
    """Chunking of the event stream handed to the dispatcher."""

    size: int = Field(default=50, ge=1, description="Events per chunk")
    delay_ms: int | None = Field(
        default=None,
        ge=0,
        description="Pause after each chunk in milliseconds (None disables it)",
    )


class DirectoriesConfig(BaseModel):
    """Vault-relative directories documents are written to.

    ``replies`` set to None stores replies next to top-level notes.
    """

    notes: str = Field(default="nostr/notes")
    replies: str | None = Field(default="nostr/replies")
    profiles: str = Field(default="nostr/profiles")

    @field_validator("notes", "replies", "profiles")
    @classmethod
    def _normalize(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().strip("/")
        if not value:
            raise ValueError("directory must not be empty")
        if ".." in value.split("/"):
            raise ValueError("directory must stay inside the vault")
        return value


class RenderConfig(BaseModel):
    include_profile_references: bool = Field(
        default=False,
        description="Append the References scaffold to profile documents",
    )


class ArchiverConfig(BaseModel):
    """Top-level archiver configuration."""

    batch: BatchConfig = Field(default_factory=BatchConfig)
    directories: DirectoriesConfig = Field(default_factory=DirectoriesConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    verify_signatures: bool = Field(
        default=False,
        description="Reject events whose Schnorr signature does not verify",
    )
