"""Domain models and enums for execmany.

This package contains the media package data model shared by every layer:

- Domain models: Flavor, Element (Track, Attachment, Catalog, Publication),
  MediaPackage
- Domain enums: ElementType, Action, JobStatus
- Serialization: element/package JSON conversion

Usage:
    from execmany.domain import MediaPackage, Track, Flavor
"""

from .enums import Action, ElementType, JobStatus
from .models import (
    ELEMENT_CLASSES,
    SEPARATOR,
    WILDCARD,
    Attachment,
    Catalog,
    Element,
    Flavor,
    MediaPackage,
    Publication,
    Track,
)
from .serialization import (
    element_from_json,
    element_to_dict,
    element_to_json,
    package_from_json,
    package_to_json,
)

__all__ = [
    # Models
    "Element",
    "Track",
    "Attachment",
    "Catalog",
    "Publication",
    "ELEMENT_CLASSES",
    "Flavor",
    "MediaPackage",
    "WILDCARD",
    "SEPARATOR",
    # Enums
    "Action",
    "ElementType",
    "JobStatus",
    # Serialization
    "element_from_json",
    "element_to_dict",
    "element_to_json",
    "package_from_json",
    "package_to_json",
]
