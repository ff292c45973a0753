"""Domain models for execmany.

Elements form a closed tagged union: every concrete element class carries a
class-level ``element_type`` and only the fields relevant to that kind.
Code branches on ``element.element_type`` rather than on the class.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import ClassVar

from execmany.domain.enums import ElementType

WILDCARD = "*"
SEPARATOR = "/"


@dataclass(frozen=True)
class Flavor:
    """Type/subtype classification of an element, e.g. ``presentation/source``.

    Either component may be the wildcard ``*``, which matches any value on
    the other side.
    """

    type: str
    subtype: str

    @classmethod
    def parse(cls, text: str) -> Flavor:
        """Parse ``"<type>/<subtype>"``.

        Args:
            text: Flavor text. Surrounding whitespace is ignored.

        Returns:
            Parsed Flavor.

        Raises:
            ValueError: If the text is not exactly two non-empty components.
        """
        parts = text.strip().split(SEPARATOR)
        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            raise ValueError(f"Invalid flavor '{text}': expected '<type>/<subtype>'")
        return cls(parts[0].strip(), parts[1].strip())

    def matches(self, other: Flavor | None) -> bool:
        """Check structural equality with wildcard support on both sides."""
        if other is None:
            return False
        return _component_matches(self.type, other.type) and _component_matches(
            self.subtype, other.subtype
        )

    def __str__(self) -> str:
        return f"{self.type}{SEPARATOR}{self.subtype}"


def _component_matches(left: str, right: str) -> bool:
    return left == right or left == WILDCARD or right == WILDCARD


@dataclass
class Element:
    """Base for all media package elements."""

    element_type: ClassVar[ElementType]

    id: str
    flavor: Flavor | None = None
    tags: set[str] = field(default_factory=set)
    uri: str | None = None
    mimetype: str | None = None
    # ID of the element this one was derived from
    derived_from: str | None = None

    def add_tag(self, tag: str) -> None:
        self.tags.add(tag)

    def remove_tag(self, tag: str) -> None:
        self.tags.discard(tag)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


@dataclass
class Track(Element):
    """Audio/video element with stream presence flags."""

    element_type: ClassVar[ElementType] = ElementType.TRACK

    has_audio: bool = False
    has_video: bool = False
    has_subtitle: bool = False
    duration_seconds: float | None = None


@dataclass
class Attachment(Element):
    """Opaque file attached to a package (images, property files, ...)."""

    element_type: ClassVar[ElementType] = ElementType.ATTACHMENT


@dataclass
class Catalog(Element):
    """Structured metadata document."""

    element_type: ClassVar[ElementType] = ElementType.CATALOG


@dataclass
class Publication(Element):
    """Reference to a published distribution of the package."""

    element_type: ClassVar[ElementType] = ElementType.PUBLICATION


ELEMENT_CLASSES: dict[ElementType, type[Element]] = {
    ElementType.TRACK: Track,
    ElementType.ATTACHMENT: Attachment,
    ElementType.CATALOG: Catalog,
    ElementType.PUBLICATION: Publication,
}


@dataclass
class MediaPackage:
    """Ordered collection of elements sharing a package identifier."""

    id: str
    elements: list[Element] = field(default_factory=list)

    def get_element(self, element_id: str) -> Element | None:
        """Return the element with the given ID, or None."""
        return next((e for e in self.elements if e.id == element_id), None)

    def add(self, element: Element) -> None:
        """Append an element.

        Raises:
            ValueError: If an element with the same ID already exists.
        """
        if self.get_element(element.id) is not None:
            raise ValueError(
                f"Package {self.id} already contains element {element.id}"
            )
        self.elements.append(element)

    def add_derived(self, element: Element, source: Element) -> None:
        """Add ``element`` as a derivative of ``source``.

        A fresh ID is assigned when the element's ID is empty or already
        taken in this package.
        """
        if not element.id or self.get_element(element.id) is not None:
            element.id = str(uuid.uuid4())
        element.derived_from = source.id
        self.elements.append(element)

    def elements_by_tags(self, tags: list[str]) -> list[Element]:
        """Return elements selected by a tag expression.

        An empty list selects every element. Tags prefixed with ``-`` exclude
        elements carrying that tag; the remaining tags include elements
        carrying at least one of them. With only exclusions, every element
        not excluded is selected.

        Args:
            tags: Inclusion and ``-``-prefixed exclusion tags.

        Returns:
            Matching elements in package order.
        """
        if not tags:
            return list(self.elements)

        keep = {t for t in tags if not t.startswith("-")}
        drop = {t.lstrip("-") for t in tags if t.startswith("-")}

        selected = []
        for element in self.elements:
            if element.tags & drop:
                continue
            if keep and not element.tags & keep:
                continue
            selected.append(element)
        return selected

    def checkout(self) -> MediaPackage:
        """Return a deep copy owned exclusively by one operation run."""
        return copy.deepcopy(self)
