"""Unit tests for SectionService, the deep module owning section writes.

Tests call the service directly, bypassing the HTTP stack. Covers section
creation, archive-before-mutate, idempotent saves, numbering, metadata and
change notification.
"""

import logging

import pytest

from sectionvault.exceptions import (
    InvalidKindError,
    SectionMismatchError,
    SectionNotFoundError,
    ValidationError,
    VersionNotFoundError,
)
from sectionvault.models import SectionKind
from sectionvault.services import SectionService
from tests.conftest import FailingNotifier


def _numbers_and_contents(listing):
    return [(v.version_number, v.content) for v in listing.versions]


class TestFirstSave:
    """Lazy creation: ABSENT -> EXISTS."""

    def test_creates_section(self, db):
        svc = SectionService(db)
        result = svc.save("proj-1", SectionKind.CONTEXT, "A", actor_id="alice")
        assert result.created is True
        assert result.changed is True
        assert result.section.content == "A"
        assert result.section.title == "Context"

    def test_archives_baseline_version(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.CONTEXT, "A", actor_id="alice")
        listing = svc.list_versions("proj-1", SectionKind.CONTEXT)
        assert _numbers_and_contents(listing) == [(1, "A")]
        assert listing.versions[0].author_id == "alice"
        assert listing.current_content == "A"

    def test_creation_emits_event(self, db, notifier):
        svc = SectionService(db, notifier=notifier)
        svc.save("proj-1", SectionKind.SCOPE, "A", actor_id="alice")
        assert len(notifier.events) == 1
        event = notifier.events[0]
        assert event.action == "created"
        assert event.kind == SectionKind.SCOPE
        assert event.owner_id == "proj-1"
        assert event.actor_id == "alice"
        assert event.version_number == 1
        assert event.summary == "created the scope"

    def test_kind_accepts_name_in_any_case(self, db):
        svc = SectionService(db)
        result = svc.save("proj-1", "architecture", "A")
        assert result.section.kind == SectionKind.ARCHITECTURE

    def test_invalid_kind_rejected(self, db):
        svc = SectionService(db)
        with pytest.raises(InvalidKindError):
            svc.save("proj-1", "BUDGET", "A")

    def test_non_string_content_rejected(self, db):
        svc = SectionService(db)
        with pytest.raises(ValidationError):
            svc.save("proj-1", SectionKind.SCOPE, None)
        with pytest.raises(SectionNotFoundError):
            svc.get_section("proj-1", SectionKind.SCOPE)

    def test_non_dict_metadata_rejected(self, db):
        svc = SectionService(db)
        with pytest.raises(ValidationError):
            svc.save("proj-1", SectionKind.SCOPE, "A", metadata=["figma"])

    def test_metadata_stored(self, db):
        svc = SectionService(db)
        links = {"figma": "https://figma.com/f/1", "github": None, "other": []}
        result = svc.save("proj-1", SectionKind.FRONTEND_PROTOTYPE, "A", metadata=links)
        assert result.section.extra_metadata == links


class TestScenarios:
    """The canonical edit / restore walk-through."""

    def test_scenario_a_edits_archive_previous_content(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.CONTEXT, "A")
        svc.save("proj-1", SectionKind.CONTEXT, "B")
        listing = svc.list_versions("proj-1", SectionKind.CONTEXT)
        assert _numbers_and_contents(listing) == [(2, "A"), (1, "A")]
        assert listing.current_content == "B"

        svc.save("proj-1", SectionKind.CONTEXT, "C")
        listing = svc.list_versions("proj-1", SectionKind.CONTEXT)
        assert _numbers_and_contents(listing) == [(3, "B"), (2, "A"), (1, "A")]
        assert listing.current_content == "C"

    def test_scenario_c_resaving_current_content_is_free(self, db, notifier):
        svc = SectionService(db, notifier=notifier)
        for content in ("A", "B", "C"):
            svc.save("proj-1", SectionKind.CONTEXT, content)
        before = _numbers_and_contents(svc.list_versions("proj-1", SectionKind.CONTEXT))
        events_before = len(notifier.events)

        result = svc.save("proj-1", SectionKind.CONTEXT, "C")

        assert result.changed is False
        assert result.archived is None
        assert result.event is None
        assert len(notifier.events) == events_before
        assert _numbers_and_contents(svc.list_versions("proj-1", SectionKind.CONTEXT)) == before


class TestSaveSemantics:

    def test_archive_holds_prior_content_not_new(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.SCOPE, "first draft")
        result = svc.save("proj-1", SectionKind.SCOPE, "second draft")
        assert result.archived.content == "first draft"
        assert result.section.content == "second draft"

    def test_identical_save_twice_archives_once(self, db, notifier):
        svc = SectionService(db, notifier=notifier)
        svc.save("proj-1", SectionKind.SCOPE, "A")
        svc.save("proj-1", SectionKind.SCOPE, "B")
        svc.save("proj-1", SectionKind.SCOPE, "B")
        listing = svc.list_versions("proj-1", SectionKind.SCOPE)
        assert [v.version_number for v in listing.versions] == [2, 1]
        assert [e.action for e in notifier.events] == ["created", "updated"]

    def test_update_event_describes_change(self, db, notifier):
        svc = SectionService(db, notifier=notifier)
        svc.save("proj-1", SectionKind.ROLES, "A", actor_id="alice")
        svc.save("proj-1", SectionKind.ROLES, "B", actor_id="bob")
        event = notifier.events[-1]
        assert event.action == "updated"
        assert event.actor_id == "bob"
        assert event.version_number == 2
        assert event.summary == "updated the roles"

    def test_numbering_is_contiguous(self, db):
        svc = SectionService(db)
        for i in range(12):
            svc.save("proj-1", SectionKind.BACKEND_DIAGRAMS, f"rev {i}")
        numbers = [v.version_number for v in svc.list_versions("proj-1", SectionKind.BACKEND_DIAGRAMS).versions]
        assert sorted(numbers) == list(range(1, 13))
        assert numbers == sorted(numbers, reverse=True)

    def test_unchanged_content_still_updates_metadata(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.ARCHITECTURE, "A", metadata={"github": "old"})
        result = svc.save("proj-1", SectionKind.ARCHITECTURE, "A", metadata={"github": "new"})
        assert result.changed is False
        assert result.section.extra_metadata == {"github": "new"}

    def test_missing_metadata_keeps_stored_value(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.ARCHITECTURE, "A", metadata={"github": "repo"})
        result = svc.save("proj-1", SectionKind.ARCHITECTURE, "B")
        assert result.section.extra_metadata == {"github": "repo"}

    def test_empty_content_is_a_value(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.SCOPE, "A")
        result = svc.save("proj-1", SectionKind.SCOPE, "")
        assert result.changed is True
        assert result.section.content == ""


class TestIsolation:
    """Sections are keyed by (owner, kind) and never share history."""

    def test_kinds_of_one_owner_are_independent(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.CONTEXT, "ctx")
        svc.save("proj-1", SectionKind.SCOPE, "scope")
        svc.save("proj-1", SectionKind.SCOPE, "scope v2")
        assert len(svc.list_versions("proj-1", SectionKind.CONTEXT).versions) == 1
        assert len(svc.list_versions("proj-1", SectionKind.SCOPE).versions) == 2

    def test_owners_are_independent(self, db):
        svc = SectionService(db)
        a = svc.save("proj-1", SectionKind.CONTEXT, "x").section
        b = svc.save("proj-2", SectionKind.CONTEXT, "x").section
        assert a.id != b.id

    def test_list_sections_of_owner(self, db):
        svc = SectionService(db)
        svc.save("proj-1", SectionKind.SCOPE, "s")
        svc.save("proj-1", SectionKind.CONTEXT, "c")
        svc.save("proj-2", SectionKind.ROLES, "r")
        kinds = {s.kind for s in svc.list_sections("proj-1")}
        assert kinds == {SectionKind.SCOPE, SectionKind.CONTEXT}


class TestReads:

    def test_list_versions_of_missing_section(self, db):
        svc = SectionService(db)
        with pytest.raises(SectionNotFoundError):
            svc.list_versions("proj-1", SectionKind.CONTEXT)

    def test_get_section_missing(self, db):
        svc = SectionService(db)
        with pytest.raises(SectionNotFoundError):
            svc.get_section("proj-1", SectionKind.CONTEXT)

    def test_get_version_checks_ownership(self, db):
        svc = SectionService(db)
        version = svc.save("proj-1", SectionKind.CONTEXT, "A").archived
        assert svc.get_version("proj-1", SectionKind.CONTEXT, version.id).content == "A"
        with pytest.raises(SectionMismatchError):
            svc.get_version("proj-2", SectionKind.CONTEXT, version.id)
        with pytest.raises(SectionMismatchError):
            svc.get_version("proj-1", SectionKind.SCOPE, version.id)

    def test_get_version_unknown_id(self, db):
        svc = SectionService(db)
        with pytest.raises(VersionNotFoundError):
            svc.get_version("proj-1", SectionKind.CONTEXT, "no-such-version")

    def test_reads_have_no_side_effects(self, db, notifier):
        svc = SectionService(db, notifier=notifier)
        svc.save("proj-1", SectionKind.CONTEXT, "A")
        svc.list_versions("proj-1", SectionKind.CONTEXT)
        svc.list_versions("proj-1", SectionKind.CONTEXT)
        assert len(svc.list_versions("proj-1", SectionKind.CONTEXT).versions) == 1
        assert len(notifier.events) == 1


class TestNotifierFailures:
    """A broken notifier is logged, never surfaced."""

    def test_save_succeeds_when_notifier_raises(self, db, caplog):
        failing = FailingNotifier()
        svc = SectionService(db, notifier=failing)
        with caplog.at_level(logging.ERROR, logger="sectionvault.services.change_notifier"):
            svc.save("proj-1", SectionKind.SCOPE, "A")
            result = svc.save("proj-1", SectionKind.SCOPE, "B")
        assert failing.calls == 2
        assert result.changed is True
        assert svc.get_section("proj-1", SectionKind.SCOPE).content == "B"
        assert "Change notification failed" in caplog.text

    def test_failed_notification_keeps_archive(self, db):
        svc = SectionService(db, notifier=FailingNotifier())
        svc.save("proj-1", SectionKind.SCOPE, "A")
        svc.save("proj-1", SectionKind.SCOPE, "B")
        listing = svc.list_versions("proj-1", SectionKind.SCOPE)
        assert _numbers_and_contents(listing) == [(2, "A"), (1, "A")]
