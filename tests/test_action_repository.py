import pytest

from app.routes.agent.domain.action import ActionRecord
from app.routes.agent.infra.repository import ActionRepository


def make_record(timestamp: int, finished: bool = True) -> ActionRecord:
    record = ActionRecord(prompt=f"prompt {timestamp}", timestamp=timestamp)
    if finished:
        record.mark_executing()
        record.mark_success(f"sig-{timestamp}")
    return record


class TestActionRepository:
    @pytest.mark.asyncio
    async def test_save_and_fetch(self):
        repo = ActionRepository()
        record = make_record(1)

        await repo.save_action(record)

        assert await repo.fetch_action(record.id) is record
        assert await repo.fetch_action("missing") is None

    @pytest.mark.asyncio
    async def test_fetch_actions_most_recent_first(self):
        repo = ActionRepository()
        for timestamp in (20, 10, 30):
            await repo.save_action(make_record(timestamp))

        actions = await repo.fetch_actions()

        assert [a.timestamp for a in actions] == [30, 20, 10]

    @pytest.mark.asyncio
    async def test_same_timestamp_lists_latest_saved_first(self):
        repo = ActionRepository()
        first = make_record(1000)
        second = make_record(1000)
        await repo.save_action(first)
        await repo.save_action(second)

        actions = await repo.fetch_actions()

        assert [a.id for a in actions] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_uses_injected_store(self):
        store = {}
        repo = ActionRepository(store=store)
        record = make_record(1)

        await repo.save_action(record)

        assert store == {record.id: record}

    @pytest.mark.asyncio
    async def test_saving_twice_overwrites(self):
        repo = ActionRepository()
        record = ActionRecord(prompt="p", timestamp=1)
        await repo.save_action(record)
        record.mark_executing()
        await repo.save_action(record)

        assert len(await repo.fetch_actions()) == 1

    @pytest.mark.asyncio
    async def test_max_records_evicts_oldest_finished(self):
        repo = ActionRepository(max_records=2)
        oldest = make_record(1)
        in_flight = make_record(2, finished=False)
        await repo.save_action(oldest)
        await repo.save_action(in_flight)
        await repo.save_action(make_record(3))

        remaining = {a.timestamp for a in await repo.fetch_actions()}

        assert remaining == {2, 3}
        assert await repo.fetch_action(oldest.id) is None

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self):
        repo = ActionRepository()
        for timestamp in range(50):
            await repo.save_action(make_record(timestamp))

        assert len(await repo.fetch_actions()) == 50
