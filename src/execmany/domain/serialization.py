"""JSON serialization of elements and media packages.

Elements travel between this step and the execution/inspection services as
JSON text. A None or blank document is the sentinel for "no element".
Documents are validated with Pydantic schemas before being turned into
domain objects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from execmany.core.json_utils import parse_json_with_schema, serialize_json_safe
from execmany.domain.enums import ElementType
from execmany.domain.models import (
    ELEMENT_CLASSES,
    Element,
    Flavor,
    MediaPackage,
    Track,
)
from execmany.exceptions import SerializationError


class ElementSchema(BaseModel):
    """Wire schema for a single element."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: ElementType
    id: str = Field(min_length=1)
    flavor: str | None = None
    tags: list[str] = Field(default_factory=list)
    uri: str | None = None
    mimetype: str | None = None
    derived_from: str | None = None
    # Track-only fields, ignored for other element types
    has_audio: bool = False
    has_video: bool = False
    has_subtitle: bool = False
    duration_seconds: float | None = Field(default=None, ge=0)

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> ElementType:
        """Accept element type names case-insensitively."""
        if isinstance(v, ElementType):
            return v
        return ElementType.parse(str(v))

    @field_validator("flavor")
    @classmethod
    def validate_flavor(cls, v: str | None) -> str | None:
        """Reject malformed flavor text."""
        if v is not None:
            Flavor.parse(v)
        return v


class PackageSchema(BaseModel):
    """Wire schema for a media package."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    elements: list[ElementSchema] = Field(default_factory=list)


def element_to_dict(element: Element) -> dict[str, Any]:
    """Convert an element to a JSON-compatible dict."""
    data: dict[str, Any] = {
        "type": element.element_type.value,
        "id": element.id,
        "flavor": str(element.flavor) if element.flavor else None,
        "tags": sorted(element.tags),
        "uri": element.uri,
        "mimetype": element.mimetype,
        "derived_from": element.derived_from,
    }
    if element.element_type is ElementType.TRACK:
        assert isinstance(element, Track)
        data.update(
            has_audio=element.has_audio,
            has_video=element.has_video,
            has_subtitle=element.has_subtitle,
            duration_seconds=element.duration_seconds,
        )
    return data


def _element_from_schema(schema: ElementSchema) -> Element:
    common: dict[str, Any] = {
        "id": schema.id,
        "flavor": Flavor.parse(schema.flavor) if schema.flavor else None,
        "tags": set(schema.tags),
        "uri": schema.uri,
        "mimetype": schema.mimetype,
        "derived_from": schema.derived_from,
    }
    if schema.type is ElementType.TRACK:
        return Track(
            **common,
            has_audio=schema.has_audio,
            has_video=schema.has_video,
            has_subtitle=schema.has_subtitle,
            duration_seconds=schema.duration_seconds,
        )
    return ELEMENT_CLASSES[schema.type](**common)


def element_to_json(element: Element) -> str:
    """Serialize an element to JSON text."""
    text = serialize_json_safe(element_to_dict(element), context="element")
    assert text is not None
    return text


def element_from_json(text: str | None) -> Element | None:
    """Deserialize an element from JSON text.

    Args:
        text: Serialized element. None or blank means "no element".

    Returns:
        The element, or None for the empty sentinel.

    Raises:
        SerializationError: If the text is not a valid serialized element.
    """
    result = parse_json_with_schema(text, ElementSchema, context="element")
    if not result.success:
        raise SerializationError(
            f"Some result element couldn't be deserialized: {result.error}"
        )
    if result.value is None:
        return None
    return _element_from_schema(result.value)


def package_to_json(package: MediaPackage, indent: int | None = 2) -> str:
    """Serialize a media package to JSON text."""
    text = serialize_json_safe(
        {
            "id": package.id,
            "elements": [element_to_dict(e) for e in package.elements],
        },
        context="package",
        indent=indent,
    )
    assert text is not None
    return text


def package_from_json(text: str) -> MediaPackage:
    """Deserialize a media package from JSON text.

    Raises:
        SerializationError: If the text is empty or not a valid package.
    """
    result = parse_json_with_schema(text, PackageSchema, context="package")
    if not result.success:
        raise SerializationError(f"Invalid media package: {result.error}")
    if result.value is None:
        raise SerializationError("Invalid media package: empty document")
    return MediaPackage(
        id=result.value.id,
        elements=[_element_from_schema(e) for e in result.value.elements],
    )
