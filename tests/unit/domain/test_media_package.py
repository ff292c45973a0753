"""Tests for MediaPackage and element tag operations."""

import pytest

from execmany.domain import Attachment, ElementType, MediaPackage, Track


class TestElementTags:
    """Tests for element tag helpers."""

    def test_add_and_remove(self) -> None:
        element = Attachment(id="a1")

        element.add_tag("engage")
        assert element.has_tag("engage")

        element.remove_tag("engage")
        assert not element.has_tag("engage")

    def test_remove_missing_tag_is_noop(self) -> None:
        element = Attachment(id="a1", tags={"archive"})

        element.remove_tag("engage")

        assert element.tags == {"archive"}

    def test_element_type_tags(self) -> None:
        assert Track(id="t").element_type is ElementType.TRACK
        assert Attachment(id="a").element_type is ElementType.ATTACHMENT


class TestElementsByTags:
    """Tests for MediaPackage.elements_by_tags."""

    def test_empty_tags_select_everything(self, sample_package: MediaPackage) -> None:
        assert sample_package.elements_by_tags([]) == sample_package.elements

    def test_inclusion_tags(self, sample_package: MediaPackage) -> None:
        ids = [e.id for e in sample_package.elements_by_tags(["engage"])]

        assert ids == ["c1"]

    def test_any_inclusion_tag_qualifies(self, sample_package: MediaPackage) -> None:
        ids = [e.id for e in sample_package.elements_by_tags(["engage", "archive"])]

        assert ids == ["t1", "t2", "a1", "c1"]

    def test_exclusion_tags_remove_elements(self, sample_package: MediaPackage) -> None:
        """Elements carrying an excluded tag are dropped."""
        ids = [e.id for e in sample_package.elements_by_tags(["-archive"])]

        assert ids == ["c1"]

    def test_exclusion_wins_over_inclusion(self, sample_package: MediaPackage) -> None:
        sample_package.get_element("t1").add_tag("engage")

        ids = [e.id for e in sample_package.elements_by_tags(["engage", "-archive"])]

        assert ids == ["c1"]


class TestMediaPackageMutation:
    """Tests for add, add_derived and checkout."""

    def test_add_rejects_duplicate_id(self, sample_package: MediaPackage) -> None:
        with pytest.raises(ValueError, match="already contains"):
            sample_package.add(Attachment(id="a1"))

    def test_add_derived_records_source(self, sample_package: MediaPackage) -> None:
        source = sample_package.get_element("t1")
        derived = Attachment(id="new")

        sample_package.add_derived(derived, source)

        assert derived.derived_from == "t1"
        assert sample_package.get_element("new") is derived

    def test_add_derived_reassigns_colliding_id(
        self, sample_package: MediaPackage
    ) -> None:
        source = sample_package.get_element("t1")
        derived = Attachment(id="a1")

        sample_package.add_derived(derived, source)

        assert derived.id != "a1"
        assert len({e.id for e in sample_package.elements}) == 5

    def test_checkout_is_independent(self, sample_package: MediaPackage) -> None:
        copy = sample_package.checkout()

        copy.get_element("t1").add_tag("changed")
        copy.add(Attachment(id="extra"))

        assert not sample_package.get_element("t1").has_tag("changed")
        assert sample_package.get_element("extra") is None
