"""Pydantic model for the execute-many step configuration.

Keys mirror the workflow operation definition (``exec``, ``source-flavor``,
``target-tags`` ...). Hyphenated keys are accepted by alias and Python
attribute names are accepted as well. Values usually arrive as plain
strings from a workflow definition, so list-valued keys accept
comma-separated text and boolean keys accept ``true``/``false`` text.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from execmany.domain.enums import ElementType
from execmany.domain.models import Flavor

logger = logging.getLogger(__name__)

DEFAULT_LOAD = 1.0


def _split_list(v: Any) -> list[str]:
    """Normalize a comma-separated string or a list into stripped items."""
    if v is None:
        return []
    if isinstance(v, str):
        items = v.split(",")
    else:
        items = [str(item) for item in v]
    return [item.strip() for item in items if item.strip()]


def _parse_optional_bool(v: Any) -> bool | None:
    """Blank means unset; any text other than "true" is False."""
    if v is None or isinstance(v, bool):
        return v
    text = str(v).strip()
    if not text:
        return None
    return text.casefold() == "true"


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v.strip() if isinstance(v, str) else v


class ExecuteManyConfig(BaseModel):
    """Configuration of one execute-many workflow step."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    command: str = Field(validation_alias=AliasChoices("exec", "command"))
    params: str | None = None
    load: float = DEFAULT_LOAD
    source_flavors: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "source-flavor", "source-flavors", "source_flavor", "source_flavors"
        ),
    )
    source_tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "source-tag", "source-tags", "source_tag", "source_tags"
        ),
    )
    source_audio: bool | None = Field(
        default=None, validation_alias=AliasChoices("source-audio", "source_audio")
    )
    source_video: bool | None = Field(
        default=None, validation_alias=AliasChoices("source-video", "source_video")
    )
    source_subtitle: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("source-subtitle", "source_subtitle"),
    )
    target_flavors: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "target-flavor", "target-flavors", "target_flavor", "target_flavors"
        ),
    )
    target_tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "target-tag", "target-tags", "target_tag", "target_tags"
        ),
    )
    output_filename: str | None = Field(
        default=None,
        validation_alias=AliasChoices("output-filename", "output_filename"),
    )
    expected_type: ElementType | None = Field(
        default=None,
        validation_alias=AliasChoices("expected-type", "expected_type"),
    )
    set_workflow_properties: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "set-workflow-properties", "set_workflow_properties"
        ),
    )

    @field_validator("command", mode="before")
    @classmethod
    def require_command(cls, v: Any) -> Any:
        """Reject a blank command."""
        if v is None or not str(v).strip():
            raise ValueError("exec must name the command to run")
        return str(v).strip()

    @field_validator("params", "output_filename", mode="before")
    @classmethod
    def strip_optional_text(cls, v: Any) -> Any:
        """Treat blank text as unset."""
        return _blank_to_none(v)

    @field_validator("load", mode="before")
    @classmethod
    def parse_load(cls, v: Any) -> float:
        """Fall back to the default load for blank or unparseable values."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LOAD
        try:
            return float(v)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid load value '%s' on execute operation", v)
            return DEFAULT_LOAD

    @field_validator(
        "source_flavors", "source_tags", "target_flavors", "target_tags", mode="before"
    )
    @classmethod
    def split_lists(cls, v: Any) -> list[str]:
        """Accept comma-separated text as well as lists."""
        return _split_list(v)

    @field_validator("source_flavors", "target_flavors")
    @classmethod
    def validate_flavors(cls, v: list[str]) -> list[str]:
        """Reject malformed flavor text early."""
        for flavor in v:
            Flavor.parse(flavor)
        return v

    @field_validator(
        "source_audio", "source_video", "source_subtitle", mode="before"
    )
    @classmethod
    def parse_requirements(cls, v: Any) -> bool | None:
        """Parse tri-state stream requirements."""
        return _parse_optional_bool(v)

    @field_validator("set_workflow_properties", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> bool:
        """Parse the property-mode flag; unset means False."""
        return bool(_parse_optional_bool(v))

    @field_validator("expected_type", mode="before")
    @classmethod
    def parse_expected_type(cls, v: Any) -> ElementType | None:
        """Parse the expected element type case-insensitively."""
        v = _blank_to_none(v)
        if v is None or isinstance(v, ElementType):
            return v
        return ElementType.parse(str(v))

    @property
    def source_flavor(self) -> Flavor | None:
        """Effective source flavor: the first configured one, if any."""
        return Flavor.parse(self.source_flavors[0]) if self.source_flavors else None

    @property
    def target_flavor(self) -> Flavor | None:
        """Effective target flavor: the first configured one, if any."""
        return Flavor.parse(self.target_flavors[0]) if self.target_flavors else None
