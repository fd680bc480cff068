"""Baseline Resolver - Pydantic models for build inputs and the manifest.

CompatibilityManifest mirrors AppSourceCop.json. Its five known keys are
explicit fields; any other keys found in a hand-edited manifest are kept
as extras and written back after the known keys.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from baseline.config import DEFAULT_PUBLISHER


class BuildMode(str, Enum):
    """Baseline resolution strategy selected by the pipeline."""

    CLEAN = "Clean"
    DEFAULT = "Default"

    @classmethod
    def parse(cls, value: str) -> "BuildMode":
        """Case-insensitive lookup by value ("clean", "Default", ...)."""
        for mode in cls:
            if mode.value.lower() == value.strip().lower():
                return mode
        choices = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Unknown build mode '{value}' (expected one of: {choices})")


class ExtensionDescriptor(BaseModel):
    """Extension identity read from the project's app.json."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1, description="Extension name")
    folder: Path = Field(..., description="Extension project folder")
    publisher: str = Field(default=DEFAULT_PUBLISHER, description="Extension publisher")
    version: str | None = Field(default=None, description="Extension version from app.json")


class CompatibilityManifest(BaseModel):
    """AppSourceCop.json content.

    Serialized with JSON key names (camelCase) via by_alias.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = Field(default="", description="Baseline version, four-part dotted")
    name: str = Field(default="", description="Extension name")
    publisher: str = Field(default="", description="Extension publisher")
    obsolete_tag_version: str = Field(
        default="",
        alias="obsoleteTagVersion",
        description="Version used for new obsolete tags",
    )
    obsolete_tag_allowed_versions: str = Field(
        default="",
        alias="obsoleteTagAllowedVersions",
        description="Comma-joined '<major>.0' tokens, ascending",
    )

    def to_json_dict(self) -> dict:
        """Known keys in declaration order, then preserved extra keys."""
        return self.model_dump(by_alias=True)
