"""Deck persistence tests.

These tests validate tier routing and degradation of the persistence pipeline.
The key invariant is:
    create(deck) -> read(returned id) == deck, whichever tier accepted the write

Primary failures are simulated with FakeProjectStore (see conftest.py).
"""

import asyncio
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from promptdeck.agents.generation.exceptions import (
    AIAuthError,
    InvalidProjectDataError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceTimeoutError,
    UnavailableError,
)
from promptdeck.agents.persistence.project_ref import ProjectRef
from promptdeck.models.project import DeckKind, StorageTier


def ticking_clock(start=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)):
    """Clock that advances one minute per call."""
    state = {"now": start}

    def clock():
        current = state["now"]
        state["now"] = current + timedelta(minutes=1)
        return current

    return clock


class TestCreate:
    """Tests for DeckPersistence.create"""

    @pytest.mark.asyncio
    async def test_create_primary_returns_bare_id(self, persistence, fake_primary, sample_deck):
        ref = await persistence.create(sample_deck, "user-1", prompt="q3 review")

        assert ref.tier == StorageTier.PRIMARY
        assert not str(ref).startswith(("local_", "temp_"))
        stored = fake_primary.projects[str(ref)]
        assert stored["userId"] == "user-1"
        assert stored["slideCount"] == 4
        assert "storageTier" not in stored
        await persistence.drain()
        assert fake_primary.users["user-1"]["projectCount"] == 1

    @pytest.mark.asyncio
    async def test_create_degrades_to_local_on_unavailable(self, persistence, fake_primary, sample_deck):
        fake_primary.fail_with = UnavailableError("database offline")

        ref = await persistence.create(sample_deck, "user-1")

        assert str(ref).startswith("local_")
        project = await persistence.read(str(ref))
        assert project.slideData == sample_deck
        assert project.isLocal is True
        assert project.storageTier == StorageTier.DURABLE_LOCAL

    @pytest.mark.asyncio
    async def test_create_degrades_to_local_on_timeout(self, persistence, fake_primary, sample_deck):
        fake_primary.delay = 0.5

        ref = await persistence.create(sample_deck, "user-1")

        assert ref.tier == StorageTier.DURABLE_LOCAL
        project = await persistence.read(ref)
        assert project.slideData.title == sample_deck.title
        assert project.pendingPrimaryId is not None

    @pytest.mark.asyncio
    async def test_create_while_offline_skips_primary(self, persistence, fake_primary, online_flag, sample_deck):
        online_flag.online = False

        ref = await persistence.create(sample_deck, "user-1")

        assert ref.tier == StorageTier.DURABLE_LOCAL
        assert fake_primary.calls == []

    @pytest.mark.asyncio
    async def test_permission_denied_never_degrades(self, persistence, fake_primary, durable_store, sample_deck):
        fake_primary.fail_with = PermissionDeniedError("row level security")

        with pytest.raises(PermissionDeniedError):
            await persistence.create(sample_deck, "user-1")

        assert durable_store.load() == []

    @pytest.mark.asyncio
    async def test_auth_error_never_degrades(self, persistence, fake_primary, durable_store, sample_deck):
        fake_primary.fail_with = AIAuthError("bad credentials")

        with pytest.raises(AIAuthError):
            await persistence.create(sample_deck, "user-1")

        assert durable_store.load() == []

    @pytest.mark.asyncio
    async def test_counter_failure_does_not_fail_create(self, persistence, fake_primary, sample_deck):
        fake_primary.adjust_project_count = MagicMock(side_effect=UnavailableError("counter down"))

        ref = await persistence.create(sample_deck, "user-1")

        assert ref.tier == StorageTier.PRIMARY
        assert str(ref) in fake_primary.projects

    @pytest.mark.asyncio
    async def test_create_does_not_wait_for_counter(self, persistence, fake_primary, sample_deck):
        release = threading.Event()
        counter_calls = []

        def slow_counter(user_id, delta):
            release.wait(timeout=1)
            counter_calls.append((user_id, delta))
            return 1

        fake_primary.adjust_project_count = slow_counter

        ref = await persistence.create(sample_deck, "user-1")

        assert str(ref) in fake_primary.projects
        assert counter_calls == []

        release.set()
        await persistence.drain()
        assert counter_calls == [("user-1", 1)]

    @pytest.mark.asyncio
    async def test_create_temporary(self, persistence, sample_deck):
        ref = await persistence.create_temporary(sample_deck, "user-1", kind=DeckKind.PLANNER)

        assert str(ref).startswith("temp_")
        project = await persistence.read(ref)
        assert project.isTemporary is True
        assert project.type == DeckKind.PLANNER


class TestRead:
    """Tests for DeckPersistence.read"""

    @pytest.mark.asyncio
    async def test_read_primary(self, persistence, sample_deck):
        ref = await persistence.create(sample_deck, "user-1")

        project = await persistence.read(str(ref))

        assert project.id == str(ref)
        assert project.slideData == sample_deck

    @pytest.mark.asyncio
    async def test_not_found_and_timeout_are_distinct(self, persistence, fake_primary):
        with pytest.raises(NotFoundError):
            await persistence.read("missing-id")

        fake_primary.delay = 0.5
        with pytest.raises(PersistenceTimeoutError):
            await persistence.read("missing-id")

    @pytest.mark.asyncio
    async def test_read_primary_offline_is_unavailable(self, persistence, online_flag):
        online_flag.online = False

        with pytest.raises(UnavailableError):
            await persistence.read("some-id")

    @pytest.mark.asyncio
    async def test_local_ids_never_touch_primary(self, persistence, fake_primary):
        with pytest.raises(NotFoundError):
            await persistence.read("local_123_abc")
        with pytest.raises(NotFoundError):
            await persistence.read("temp_123_abc")

        assert fake_primary.calls == []


class TestUpdateDelete:
    """Tests for DeckPersistence.update and delete"""

    @pytest.mark.asyncio
    async def test_update_local_recomputes_slide_count(self, persistence, fake_primary, sample_deck):
        fake_primary.fail_with = UnavailableError("offline")
        ref = await persistence.create(sample_deck, "user-1")
        smaller = sample_deck.with_slide_removed(4)

        updated = await persistence.update(ref, {"slideData": smaller, "title": "Renamed"})

        assert updated.slideCount == 3
        assert updated.title == "Renamed"
        assert (await persistence.read(ref)).slideCount == 3

    @pytest.mark.asyncio
    async def test_update_primary_refreshes_updated_at(self, persistence, fake_primary, sample_deck):
        ref = await persistence.create(sample_deck, "user-1")

        updated = await persistence.update(ref, {"title": "New title", "id": "ignored"})

        assert updated.id == str(ref)
        assert updated.title == "New title"
        assert updated.updatedAt.year == 2030

    @pytest.mark.asyncio
    async def test_invalid_slide_data_is_rejected_before_primary_write(self, persistence, fake_primary, sample_deck):
        ref = await persistence.create(sample_deck, "user-1")
        stored_before = dict(fake_primary.projects[str(ref)])

        with pytest.raises(InvalidProjectDataError):
            await persistence.update(ref, {"slideData": {"title": "broken", "slides": []}})

        assert "update_project" not in fake_primary.calls
        assert fake_primary.projects[str(ref)] == stored_before
        assert fake_primary.projects[str(ref)]["slideCount"] == 4

    @pytest.mark.asyncio
    async def test_invalid_slide_data_leaves_local_tiers_unchanged(self, persistence, fake_primary, sample_deck):
        temp_ref = await persistence.create_temporary(sample_deck, "user-1")
        fake_primary.fail_with = UnavailableError("offline")
        local_ref = await persistence.create(sample_deck, "user-1")

        for ref in (temp_ref, local_ref):
            with pytest.raises(InvalidProjectDataError):
                await persistence.update(ref, {"slideData": {"title": "broken", "slides": []}})

            project = await persistence.read(ref)
            assert project.slideCount == 4
            assert project.slideData == sample_deck

    @pytest.mark.asyncio
    async def test_delete_primary_decrements_counter(self, persistence, fake_primary, sample_deck):
        ref = await persistence.create(sample_deck, "user-1")

        await persistence.delete(ref, "user-1")
        await persistence.drain()

        assert str(ref) not in fake_primary.projects
        assert fake_primary.users["user-1"]["projectCount"] == 0

    @pytest.mark.asyncio
    async def test_delete_routes_by_prefix(self, persistence, fake_primary, sample_deck):
        temp_ref = await persistence.create_temporary(sample_deck, "user-1")
        fake_primary.fail_with = UnavailableError("offline")
        local_ref = await persistence.create(sample_deck, "user-1")
        fake_primary.fail_with = None
        calls_before = list(fake_primary.calls)

        await persistence.delete(str(temp_ref), "user-1")
        await persistence.delete(str(local_ref), "user-1")

        assert fake_primary.calls == calls_before
        with pytest.raises(NotFoundError):
            await persistence.read(local_ref)
        with pytest.raises(NotFoundError):
            await persistence.delete(temp_ref, "user-1")

    @pytest.mark.asyncio
    async def test_delete_of_another_owners_local_project_is_denied(self, persistence, fake_primary, sample_deck):
        temp_ref = await persistence.create_temporary(sample_deck, "user-1")
        fake_primary.fail_with = UnavailableError("offline")
        local_ref = await persistence.create(sample_deck, "user-1")

        for ref in (temp_ref, local_ref):
            with pytest.raises(PermissionDeniedError):
                await persistence.delete(ref, "user-2")

            assert (await persistence.read(ref)).userId == "user-1"


class TestListing:
    """Tests for list_for_owner and the derived queries"""

    @pytest.mark.asyncio
    async def test_merges_three_tiers_newest_first(self, persistence, fake_primary, sample_deck):
        persistence.clock = ticking_clock()

        primary_ref = await persistence.create(sample_deck, "user-1")
        fake_primary.fail_with = UnavailableError("offline")
        local_ref = await persistence.create(sample_deck, "user-1")
        fake_primary.fail_with = None
        temp_ref = await persistence.create_temporary(sample_deck, "user-1")

        projects = await persistence.list_for_owner("user-1")

        assert [p.id for p in projects] == [str(temp_ref), str(local_ref), str(primary_ref)]
        assert [p.storageTier for p in projects] == [
            StorageTier.EPHEMERAL, StorageTier.DURABLE_LOCAL, StorageTier.PRIMARY,
        ]

    @pytest.mark.asyncio
    async def test_other_owners_are_filtered(self, persistence, fake_primary, sample_deck):
        await persistence.create_temporary(sample_deck, "user-2")
        fake_primary.fail_with = UnavailableError("offline")
        await persistence.create(sample_deck, "user-2")
        fake_primary.fail_with = None

        assert await persistence.list_for_owner("user-1") == []

    @pytest.mark.asyncio
    async def test_primary_failure_degrades_to_local_results(self, persistence, fake_primary, sample_deck):
        await persistence.create(sample_deck, "user-1")
        temp_ref = await persistence.create_temporary(sample_deck, "user-1")
        fake_primary.fail_with = UnavailableError("offline")

        projects = await persistence.list_for_owner("user-1")

        assert [p.id for p in projects] == [str(temp_ref)]

    @pytest.mark.asyncio
    async def test_mixed_timestamp_representations_sort_together(self, persistence, fake_primary, durable_store, sample_deck):
        deck = sample_deck.to_wire()
        fake_primary.projects["p1"] = {
            "id": "p1", "userId": "user-1", "title": "iso", "slideData": deck,
            "createdAt": "2024-03-01T10:00:00Z",
        }
        durable_store.save([{
            "id": "local_1", "userId": "user-1", "title": "epoch-ms", "slideData": deck,
            "createdAt": 1714557600000, "isLocal": True,
        }])
        persistence.ephemeral.put("temp_1", {
            "id": "temp_1", "userId": "user-1", "title": "seconds-map", "slideData": deck,
            "createdAt": {"seconds": 1704067200, "nanoseconds": 0}, "isTemporary": True,
        })

        projects = await persistence.list_for_owner("user-1")

        # 2024-05-01 > 2024-03-01 > 2024-01-01
        assert [p.title for p in projects] == ["epoch-ms", "iso", "seconds-map"]

    @pytest.mark.asyncio
    async def test_late_primary_write_shadows_local_copy(self, persistence, fake_primary, sample_deck):
        fake_primary.delay = 0.4
        local_ref = await persistence.create(sample_deck, "user-1")
        # Let the abandoned insert finish in its worker thread
        await asyncio.sleep(0.6)
        fake_primary.delay = 0.0

        projects = await persistence.list_for_owner("user-1")

        assert len(projects) == 1
        assert projects[0].storageTier == StorageTier.PRIMARY
        assert projects[0].id != str(local_ref)

    @pytest.mark.asyncio
    async def test_list_by_type_search_and_stats(self, persistence, sample_deck):
        persistence.clock = ticking_clock()
        await persistence.create(sample_deck, "user-1", prompt="quarterly numbers")
        planner = sample_deck.model_copy(update={"title": "Monday plan"})
        await persistence.create(planner, "user-1", prompt="my day", kind=DeckKind.PLANNER)

        planners = await persistence.list_by_type("user-1", "planner")
        assert [p.title for p in planners] == ["Monday plan"]

        found = await persistence.search("user-1", "QUARTERLY")
        assert [p.title for p in found] == ["Quarterly Review"]

        stats = await persistence.get_owner_stats("user-1")
        assert stats.totalProjects == 2
        assert stats.totalSlides == 8
        assert stats.presentationCount == 1
        assert stats.plannerCount == 1
        assert stats.recentProjects[0].title == "Monday plan"


class TestUserProfiles:

    @pytest.mark.asyncio
    async def test_profile_round_trip(self, persistence):
        assert await persistence.get_user_profile("user-1") is None

        profile = await persistence.update_user_profile(
            "user-1", {"displayName": "Sam", "email": "sam@example.com", "projectCount": 99}
        )

        assert profile.displayName == "Sam"
        assert profile.projectCount == 0
        fetched = await persistence.get_user_profile("user-1")
        assert fetched.email == "sam@example.com"


class TestProjectRef:

    def test_parse_routes_by_prefix(self):
        assert ProjectRef.parse("local_17_abc") == ProjectRef(StorageTier.DURABLE_LOCAL, "17_abc")
        assert ProjectRef.parse("temp_17_abc") == ProjectRef(StorageTier.EPHEMERAL, "17_abc")
        assert ProjectRef.parse("0f8e").tier == StorageTier.PRIMARY

    def test_string_form_round_trips(self):
        for ref in (ProjectRef.new_primary(), ProjectRef.new_local(), ProjectRef.new_temporary()):
            assert ProjectRef.parse(str(ref)) == ref

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            ProjectRef.parse("")
