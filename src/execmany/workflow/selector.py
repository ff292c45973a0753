"""Selection of the package elements a step operates on."""

from __future__ import annotations

from dataclasses import dataclass, field

from execmany.config.step import ExecuteManyConfig
from execmany.domain.enums import ElementType
from execmany.domain.models import Element, Flavor, MediaPackage, Track


@dataclass(frozen=True)
class SelectionCriteria:
    """Source filters of one step.

    Attributes:
        source_tags: Tag expression passed to MediaPackage.elements_by_tags.
        source_flavor: Required flavor (wildcards allowed), or None.
        audio: Required audio presence for tracks, or None for any.
        video: Required video presence for tracks, or None for any.
        subtitle: Required subtitle presence for tracks, or None for any.
    """

    source_tags: tuple[str, ...] = field(default_factory=tuple)
    source_flavor: Flavor | None = None
    audio: bool | None = None
    video: bool | None = None
    subtitle: bool | None = None

    @classmethod
    def from_config(cls, config: ExecuteManyConfig) -> SelectionCriteria:
        return cls(
            source_tags=tuple(config.source_tags),
            source_flavor=config.source_flavor,
            audio=config.source_audio,
            video=config.source_video,
            subtitle=config.source_subtitle,
        )

    def describe(self) -> str:
        """Short human-readable form used in log messages."""
        parts = [
            f"tags={list(self.source_tags)}",
            f"flavor={self.source_flavor}",
        ]
        for name in ("audio", "video", "subtitle"):
            value = getattr(self, name)
            if value is not None:
                parts.append(f"{name}={str(value).lower()}")
        return ", ".join(parts)


def matches_element(
    element: Element,
    source_flavor: Flavor | None,
    audio: bool | None = None,
    video: bool | None = None,
    subtitle: bool | None = None,
) -> bool:
    """Decide whether an element satisfies the source filters.

    Stream requirements only apply to tracks. An element without a flavor
    never matches a configured flavor filter.
    """
    if source_flavor is not None and not source_flavor.matches(element.flavor):
        return False

    if element.element_type is not ElementType.TRACK:
        return True

    assert isinstance(element, Track)
    for required, actual in (
        (audio, element.has_audio),
        (video, element.has_video),
        (subtitle, element.has_subtitle),
    ):
        if required is not None and required != actual:
            return False
    return True


def select_elements(package: MediaPackage, criteria: SelectionCriteria) -> list[Element]:
    """Select the elements a step runs on.

    Args:
        package: Package to select from.
        criteria: Source filters.

    Returns:
        Matching elements in package order, each at most once.
    """
    selected: list[Element] = []
    seen: set[int] = set()
    for element in package.elements_by_tags(list(criteria.source_tags)):
        if id(element) in seen:
            continue
        if matches_element(
            element,
            criteria.source_flavor,
            audio=criteria.audio,
            video=criteria.video,
            subtitle=criteria.subtitle,
        ):
            seen.add(id(element))
            selected.append(element)
    return selected
