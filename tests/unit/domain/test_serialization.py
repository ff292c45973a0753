"""Tests for element and package JSON serialization."""

import json

import pytest

from execmany.domain import (
    Catalog,
    ElementType,
    Flavor,
    MediaPackage,
    Track,
    element_from_json,
    element_to_json,
    package_from_json,
    package_to_json,
)
from execmany.exceptions import SerializationError


class TestElementFromJson:
    """Tests for element_from_json."""

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_blank_is_no_element(self, text) -> None:
        assert element_from_json(text) is None

    def test_track_fields_survive(self) -> None:
        track = Track(
            id="t1",
            flavor=Flavor("presenter", "mp4"),
            tags={"b", "a"},
            uri="file:///tmp/out.mp4",
            has_audio=True,
            duration_seconds=12.5,
        )

        restored = element_from_json(element_to_json(track))

        assert restored == track

    def test_type_is_case_insensitive(self) -> None:
        element = element_from_json('{"type": "Catalog", "id": "c1"}')

        assert isinstance(element, Catalog)
        assert element.element_type is ElementType.CATALOG

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(SerializationError, match="couldn't be deserialized"):
            element_from_json("{not json")

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(SerializationError):
            element_from_json('{"type": "subtitle-file", "id": "x"}')

    def test_malformed_flavor_raises(self) -> None:
        with pytest.raises(SerializationError):
            element_from_json('{"type": "attachment", "id": "x", "flavor": "bad"}')


class TestElementToJson:
    """Tests for element_to_json."""

    def test_tags_are_sorted(self) -> None:
        data = json.loads(element_to_json(Catalog(id="c1", tags={"z", "a", "m"})))

        assert data["tags"] == ["a", "m", "z"]

    def test_track_fields_only_on_tracks(self) -> None:
        data = json.loads(element_to_json(Catalog(id="c1")))

        assert "has_audio" not in data


class TestPackageJson:
    """Tests for package_to_json and package_from_json."""

    def test_round_trip(self, sample_package: MediaPackage) -> None:
        restored = package_from_json(package_to_json(sample_package))

        assert restored == sample_package

    def test_empty_text_raises(self) -> None:
        with pytest.raises(SerializationError):
            package_from_json("")

    def test_missing_id_raises(self) -> None:
        with pytest.raises(SerializationError):
            package_from_json('{"elements": []}')
