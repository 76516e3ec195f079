"""Tests for labels.py - label lookup with name fallback."""

import pytest

from migration_console.events import SegmentType
from migration_console.labels import LabelCatalog, identifier_name, load_label_file
from tests.conftest import Outcome


class TestLabelLookup:
    """Lookup and fallback behaviour."""

    def test_bundled_labels_loaded(self, labels):
        assert labels.lookup("MigrationProgress") == "Migration progress"
        assert labels.label(SegmentType.GARBAGE_COLLECTION) == "Garbage collection"

    def test_missing_label_returns_none(self, labels):
        assert labels.lookup("NoSuchKey") is None

    def test_missing_label_falls_back_to_name(self):
        catalog = LabelCatalog({})
        assert catalog.label(Outcome.CREATED) == "CREATED"
        assert catalog.label("Orphaned") == "Orphaned"

    def test_enum_members_resolved_by_name(self):
        catalog = LabelCatalog({"UPDATED": "Aktualisiert"})
        assert catalog.label(Outcome.UPDATED) == "Aktualisiert"

    def test_identifier_name(self):
        assert identifier_name(Outcome.FAILED) == "FAILED"
        assert identifier_name("Delete") == "Delete"

    def test_contains(self, labels):
        assert "Loading" in labels
        assert "Nope" not in labels


class TestCountMessage:
    """Singular/plural message selection."""

    @pytest.fixture
    def catalog(self):
        return LabelCatalog(
            {"One": "1 entity loaded.", "Many": "{count:,} entities loaded."}
        )

    def test_one_uses_singular(self, catalog):
        assert catalog.count_message(1, "One", "Many") == "1 entity loaded."

    def test_zero_uses_plural(self, catalog):
        assert catalog.count_message(0, "One", "Many") == "0 entities loaded."

    def test_two_uses_plural(self, catalog):
        assert catalog.count_message(2, "One", "Many") == "2 entities loaded."

    def test_thousands_separator(self, catalog):
        assert catalog.count_message(12345, "One", "Many") == "12,345 entities loaded."


class TestOrphanMappingLabels:
    """Behavior-specific orphan mapping labels."""

    def test_registered_behavior(self, labels):
        assert (
            labels.orphan_mappings("Delete", 1500)
            == "Deleting 1,500 orphan identifier mappings: "
        )

    def test_unregistered_behavior_uses_generic_format(self, labels):
        assert (
            labels.orphan_mappings("Archive", 1500)
            == "1,500 orphan identifier mappings: "
        )

    def test_no_formats_falls_back_to_count(self):
        assert LabelCatalog().orphan_mappings("Archive", 1500) == "1,500"

    def test_enum_behavior(self):
        from enum import Enum

        class Behavior(Enum):
            Retain = 1

        catalog = LabelCatalog({"RetainOrphanMappings": "Retaining {count}: "})
        assert catalog.orphan_mappings(Behavior.Retain, 3) == "Retaining 3: "


class TestOverrides:
    """Override files merged over bundled labels."""

    def test_override_replaces_and_adds(self, tmp_path):
        override = tmp_path / "labels_de.yaml"
        override.write_text(
            'MigrationProgress: "Migrationsfortschritt"\nCUSTOM: "Eigen"\n',
            encoding="utf-8",
        )
        catalog = LabelCatalog.load(override)
        assert catalog.label("MigrationProgress") == "Migrationsfortschritt"
        assert catalog.label("CUSTOM") == "Eigen"
        assert catalog.label("DeletionProgress") == "Deletion progress"

    def test_empty_override(self, tmp_path):
        override = tmp_path / "empty.yaml"
        override.write_text("", encoding="utf-8")
        assert load_label_file(override) == {}

    def test_non_mapping_rejected(self, tmp_path):
        override = tmp_path / "bad.yaml"
        override.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_label_file(override)
