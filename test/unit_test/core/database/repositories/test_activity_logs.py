"""Unit tests for the audit and profile repositories."""

import uuid
from datetime import timedelta

import pytest

from legal_chatbot.core.database.entities import Profile, QueryLog, UserActivity
from legal_chatbot.core.database.repositories import ProfileRepository, QueryLogRepository, UserActivityRepository

from ..factories import BASE_TIME

pytestmark = pytest.mark.asyncio


async def test_query_log_keeps_matched_ids(session, owner_id):
    repo = QueryLogRepository(session)

    log = await repo.create(
        QueryLog(user_id=owner_id, query="luật thuế", response="...", sources_count=2, matched_ids=[1, "tvpl_001"])
    )

    stored = await repo.get_by_id(log.id)
    assert stored.matched_ids == [1, "tvpl_001"]
    assert stored.sources_count == 2


async def test_list_filters(session, owner_id):
    repo = QueryLogRepository(session)
    await repo.create(QueryLog(user_id=owner_id, query="a"))
    await repo.create(QueryLog(user_id=uuid.uuid4(), query="b"))

    logs = await repo.list(filters={"user_id": owner_id})

    assert [log.query for log in logs] == ["a"]


async def test_activities_most_recent_first(session, owner_id):
    repo = UserActivityRepository(session)
    for minutes in (0, 10, 5):
        await repo.create(
            UserActivity(
                user_id=owner_id,
                activity_type="query",
                action="chat_query",
                details={"minutes": minutes},
                created_at=BASE_TIME + timedelta(minutes=minutes),
            )
        )

    activities = await repo.list_for_user(owner_id, limit=2)

    assert [a.details["minutes"] for a in activities] == [10, 5]
    assert activities[0].risk_level == "low"


async def test_profile_exists(session, owner_id):
    repo = ProfileRepository(session)
    await repo.create(Profile(id=owner_id, full_name="Nguyễn Văn A"))

    assert await repo.exists(owner_id) is True
    assert await repo.exists(uuid.uuid4()) is False


async def test_base_delete(session, owner_id):
    repo = ProfileRepository(session)
    await repo.create(Profile(id=owner_id))

    assert await repo.delete(owner_id) is True
    assert await repo.delete(owner_id) is False
