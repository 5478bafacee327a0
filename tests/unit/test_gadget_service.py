"""Unit tests for GadgetService lifecycle operations."""

import random
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from imf_gadgets.errors import InvalidStateTransition, NotFound
from imf_gadgets.models.gadget import GadgetStatus, GadgetUpdate
from imf_gadgets.services.codename_service import CODENAMES
from imf_gadgets.services.gadget_service import GadgetService

T0 = datetime(2025, 2, 5, 12, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(T0)


@pytest.fixture
def service(gadget_store, clock):
    return GadgetService(gadget_store, rng=random.Random(1234), clock=clock)


class TestCreate:
    async def test_creates_available_gadget(self, service, gadget_store):
        gadget = await service.create()

        assert gadget.status == GadgetStatus.AVAILABLE
        assert gadget.name in CODENAMES
        assert gadget.decommissioned_at is None
        assert gadget_store.gadgets[gadget.id] == gadget

    async def test_eleventh_gadget_gets_generated_name(self, service):
        names = [(await service.create()).name for _ in range(11)]

        assert sorted(names[:10]) == sorted(CODENAMES)
        assert re.match(r"^Codename-[0-9a-f]{8}$", names[10])

    async def test_uses_allocated_codename(self, gadget_store):
        allocator = MagicMock()
        allocator.allocate = AsyncMock(return_value="The Kraken")
        service = GadgetService(gadget_store, allocator=allocator)

        gadget = await service.create()

        assert gadget.name == "The Kraken"
        allocator.allocate.assert_awaited_once()


class TestList:
    async def test_adds_probability_to_every_gadget(self, service, gadget_store):
        gadget_store.add("The Kraken")
        gadget_store.add("Black Hawk", GadgetStatus.DEPLOYED)

        gadgets = await service.list_gadgets()

        assert len(gadgets) == 2
        for gadget in gadgets:
            assert re.match(r"^\d{1,2}%$", gadget.mission_success_probability)
            assert 0 <= int(gadget.mission_success_probability[:-1]) < 100

    async def test_probability_is_not_stored(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken")

        await service.list_gadgets()

        assert not hasattr(gadget_store.gadgets[gadget.id], "mission_success_probability")

    async def test_status_filter(self, service, gadget_store):
        gadget_store.add("The Kraken")
        deployed = gadget_store.add("Black Hawk", GadgetStatus.DEPLOYED)

        gadgets = await service.list_gadgets(GadgetStatus.DEPLOYED)

        assert [g.id for g in gadgets] == [deployed.id]

    async def test_empty_inventory(self, service):
        assert await service.list_gadgets() == []


class TestUpdate:
    async def test_applies_partial_fields(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken")

        updated = await service.update(gadget.id, GadgetUpdate(status=GadgetStatus.DEPLOYED))

        assert updated.status == GadgetStatus.DEPLOYED
        assert updated.name == "The Kraken"

    async def test_rename(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken")

        updated = await service.update(gadget.id, GadgetUpdate(name="Night Stalker"))

        assert updated.name == "Night Stalker"
        assert updated.status == GadgetStatus.AVAILABLE

    async def test_unknown_id(self, service):
        with pytest.raises(NotFound):
            await service.update(uuid4(), GadgetUpdate(name="x"))

    @pytest.mark.parametrize(
        "patch",
        [
            GadgetUpdate(),
            GadgetUpdate(name="Night Stalker"),
            GadgetUpdate(status=GadgetStatus.AVAILABLE),
            GadgetUpdate(status=GadgetStatus.DECOMMISSIONED),
            GadgetUpdate(name="x", status=GadgetStatus.DEPLOYED),
        ],
    )
    async def test_decommissioned_gadget_is_frozen(self, service, gadget_store, patch):
        gadget = gadget_store.add(
            "The Kraken", GadgetStatus.DECOMMISSIONED, decommissioned_at=T0
        )

        with pytest.raises(InvalidStateTransition) as exc_info:
            await service.update(gadget.id, patch)

        assert exc_info.value.status_code == 400
        assert gadget_store.gadgets[gadget.id] == gadget

    async def test_destroyed_gadget_is_still_editable(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken", GadgetStatus.DESTROYED)

        updated = await service.update(gadget.id, GadgetUpdate(status=GadgetStatus.AVAILABLE))

        assert updated.status == GadgetStatus.AVAILABLE


class TestRetire:
    @pytest.mark.parametrize("status", list(GadgetStatus))
    async def test_decommissions_from_any_status(self, service, gadget_store, status):
        gadget = gadget_store.add("The Kraken", status)

        retired = await service.retire(gadget.id)

        assert retired.status == GadgetStatus.DECOMMISSIONED
        assert retired.decommissioned_at == T0

    async def test_repeat_refreshes_timestamp(self, service, gadget_store, clock):
        gadget = gadget_store.add("The Kraken")
        await service.retire(gadget.id)

        clock.now = T0 + timedelta(minutes=5)
        again = await service.retire(gadget.id)

        assert again.status == GadgetStatus.DECOMMISSIONED
        assert again.decommissioned_at == T0 + timedelta(minutes=5)

    async def test_unknown_id(self, service):
        with pytest.raises(NotFound):
            await service.retire(uuid4())


class TestSelfDestruct:
    async def test_marks_destroyed_and_returns_code(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken")

        code = await service.self_destruct(gadget.id)

        assert 1000 <= code <= 9999
        stored = gadget_store.gadgets[gadget.id]
        assert stored.status == GadgetStatus.DESTROYED
        assert stored.decommissioned_at is None

    async def test_codes_stay_in_range(self, service, gadget_store):
        gadget = gadget_store.add("The Kraken")
        codes = [await service.self_destruct(gadget.id) for _ in range(200)]
        assert all(1000 <= c <= 9999 for c in codes)

    async def test_leaves_decommissioned_at_untouched(self, service, gadget_store):
        gadget = gadget_store.add(
            "The Kraken", GadgetStatus.DECOMMISSIONED, decommissioned_at=T0
        )

        await service.self_destruct(gadget.id)

        stored = gadget_store.gadgets[gadget.id]
        assert stored.status == GadgetStatus.DESTROYED
        assert stored.decommissioned_at == T0

    async def test_unknown_id(self, service):
        with pytest.raises(NotFound):
            await service.self_destruct(uuid4())

    async def test_kraken_example(self, gadget_store):
        allocator = MagicMock()
        allocator.allocate = AsyncMock(return_value="The Kraken")
        rng = MagicMock(spec=random.Random)
        rng.randint.return_value = 4821
        rng.randrange.return_value = 50
        service = GadgetService(gadget_store, allocator=allocator, rng=rng)

        gadget = await service.create()
        code = await service.self_destruct(gadget.id)
        listed = await service.list_gadgets()

        assert gadget.name == "The Kraken"
        assert gadget.status == GadgetStatus.AVAILABLE
        assert code == 4821
        assert [g.status for g in listed] == [GadgetStatus.DESTROYED]
        rng.randint.assert_called_with(1000, 9999)
