from uuid import uuid4

import pytest
from sqlalchemy import select

from lp.errors import (
    AuthenticationRequired,
    Forbidden,
    NotFound,
    ReferentialIntegrityFailure,
    ValidationFailed,
)
from lp.models import Segment, Task, TaskPriority
from lp.services.plans import PlanService
from lp.services.segments import SegmentService
from lp.services.tasks import TaskService


@pytest.fixture
def make_plan(db_session, plan_payload, caller_for):
    async def _make_plan(owner, **overrides):
        return await PlanService(db_session).create_plan(
            caller_for(owner), plan_payload(**overrides)
        )

    return _make_plan


@pytest.mark.asyncio
async def test_create_segment_appends(db_session, make_user, make_plan, caller_for):
    owner = await make_user()
    plan_id = await make_plan(owner)

    segment = await SegmentService(db_session).create_segment(
        caller_for(owner),
        {"learningPlanId": str(plan_id), "title": "Ownership", "start": "2026-03-01T00:00:00Z"},
    )
    assert segment.learning_plan_id == plan_id
    assert segment.position == 2
    assert segment.tasks == []


@pytest.mark.asyncio
async def test_create_segment_unknown_plan(db_session, make_user, caller_for):
    owner = await make_user()
    with pytest.raises(ReferentialIntegrityFailure) as exc_info:
        await SegmentService(db_session).create_segment(
            caller_for(owner),
            {"learningPlanId": str(uuid4()), "title": "Orphan", "start": "2026-03-01T00:00:00Z"},
        )
    assert exc_info.value.message == "Learning plan does not exist"


@pytest.mark.asyncio
async def test_create_segment_requires_plan_owner(
    db_session, make_user, make_plan, caller_for
):
    owner = await make_user()
    stranger = await make_user("Grace")
    plan_id = await make_plan(owner)
    payload = {"learningPlanId": str(plan_id), "title": "Sneaky", "start": "2026-03-01T00:00:00Z"}
    service = SegmentService(db_session)

    with pytest.raises(Forbidden):
        await service.create_segment(caller_for(stranger), payload)
    with pytest.raises(AuthenticationRequired):
        await service.create_segment(None, payload)


@pytest.mark.asyncio
async def test_update_segment(db_session, make_user, make_plan, caller_for):
    owner = await make_user()
    plan_id = await make_plan(owner)
    service = SegmentService(db_session)
    segment_id = (await PlanService(db_session).get_plan(caller_for(owner), plan_id)).segments[0].id

    updated = await service.update_segment(
        caller_for(owner),
        segment_id,
        {
            "learningPlanId": str(plan_id),
            "title": "Basics, revised",
            "start": "2026-01-02T00:00:00Z",
        },
    )
    assert updated.title == "Basics, revised"
    assert updated.end is None
    assert len(updated.tasks) == 3

    with pytest.raises(ValidationFailed) as exc_info:
        await service.update_segment(
            caller_for(owner),
            segment_id,
            {
                "learningPlanId": str(plan_id),
                "title": "Backwards",
                "start": "2026-02-01T00:00:00Z",
                "end": "2026-01-01T00:00:00Z",
            },
        )
    assert exc_info.value.issues == {"end": ["End must not be before start"]}


@pytest.mark.asyncio
async def test_delete_segment_removes_only_its_tasks(
    db_session, make_user, make_plan, caller_for
):
    owner = await make_user()
    plan_id = await make_plan(owner)
    other_plan_id = await make_plan(owner, title="Other")
    plan = await PlanService(db_session).get_plan(caller_for(owner), plan_id)
    basics = plan.segments[0]

    result = await SegmentService(db_session).delete_segment(caller_for(owner), basics.id)
    assert (result.segments, result.tasks) == (1, 3)

    with pytest.raises(NotFound):
        await SegmentService(db_session).get_segment(caller_for(owner), basics.id)

    segments = (await db_session.execute(select(Segment))).scalars().all()
    assert sorted(s.learning_plan_id == plan_id for s in segments) == [False, False, True]
    tasks = (await db_session.execute(select(Task))).scalars().all()
    assert len(tasks) == 3
    other = await PlanService(db_session).get_plan(caller_for(owner), other_plan_id)
    assert {t.segment_id for t in tasks} == {other.segments[0].id}


@pytest.mark.asyncio
async def test_private_segment_hidden_from_others(
    db_session, make_user, make_plan, caller_for
):
    owner = await make_user()
    stranger = await make_user("Grace")
    plan_id = await make_plan(owner, isPublic=False)
    plan = await PlanService(db_session).get_plan(caller_for(owner), plan_id)
    service = SegmentService(db_session)

    assert (await service.get_segment(caller_for(owner), plan.segments[0].id)).title == "Basics"
    with pytest.raises(Forbidden):
        await service.get_segment(caller_for(stranger), plan.segments[0].id)


@pytest.mark.asyncio
async def test_create_task_defaults(db_session, make_user, make_plan, caller_for):
    owner = await make_user()
    plan_id = await make_plan(owner)
    plan = await PlanService(db_session).get_plan(caller_for(owner), plan_id)
    segment = plan.segments[1]

    task = await TaskService(db_session).create_task(
        caller_for(owner), {"segmentId": str(segment.id), "title": "Tokio tutorial"}
    )
    assert task.segment_id == segment.id
    assert task.priority is TaskPriority.medium
    assert task.is_complete is False
    assert task.position == 0


@pytest.mark.asyncio
async def test_create_task_unknown_segment(db_session, make_user, caller_for):
    owner = await make_user()
    with pytest.raises(ReferentialIntegrityFailure) as exc_info:
        await TaskService(db_session).create_task(
            caller_for(owner), {"segmentId": str(uuid4()), "title": "Orphan"}
        )
    assert exc_info.value.message == "Segment does not exist"


@pytest.mark.asyncio
async def test_update_and_delete_task(db_session, make_user, make_plan, caller_for):
    owner = await make_user()
    stranger = await make_user("Grace")
    plan_id = await make_plan(owner)
    plan = await PlanService(db_session).get_plan(caller_for(owner), plan_id)
    segment = plan.segments[0]
    task_id = segment.tasks[0].id
    service = TaskService(db_session)

    updated = await service.update_task(
        caller_for(owner),
        task_id,
        {"segmentId": str(segment.id), "title": "Read the book", "isComplete": True, "priority": "low"},
    )
    assert updated.is_complete is True
    assert updated.priority is TaskPriority.low

    with pytest.raises(Forbidden):
        await service.delete_task(caller_for(stranger), task_id)

    await service.delete_task(caller_for(owner), task_id)
    with pytest.raises(NotFound):
        await service.get_task(caller_for(owner), task_id)
    remaining = (await db_session.execute(select(Task.id))).scalars().all()
    assert len(remaining) == 2


@pytest.mark.asyncio
async def test_positions_stay_ordered_after_deletes(
    db_session, make_user, make_plan, caller_for
):
    owner = await make_user()
    caller = caller_for(owner)
    plan_id = await make_plan(owner)
    segments = SegmentService(db_session)
    tasks = TaskService(db_session)

    third = await segments.create_segment(
        caller,
        {"learningPlanId": str(plan_id), "title": "Third", "start": "2026-03-01T00:00:00Z"},
    )
    plan = await PlanService(db_session).get_plan(caller, plan_id)
    basics, middle = plan.segments[0], plan.segments[1]
    await segments.delete_segment(caller, middle.id)

    fourth = await segments.create_segment(
        caller,
        {"learningPlanId": str(plan_id), "title": "Fourth", "start": "2026-04-01T00:00:00Z"},
    )
    assert (third.position, fourth.position) == (2, 3)

    await tasks.delete_task(caller, basics.tasks[0].id)
    new_task = await tasks.create_task(
        caller, {"segmentId": str(basics.id), "title": "New"}
    )
    assert new_task.position == 3

    # Moving a task appends it after the target segment's last task
    moved = await tasks.update_task(
        caller, basics.tasks[1].id, {"segmentId": str(fourth.id), "title": "Rustlings"}
    )
    assert moved.position == 0
    back = await tasks.update_task(
        caller, moved.id, {"segmentId": str(basics.id), "title": "Rustlings"}
    )
    assert back.position == 4

    plan = await PlanService(db_session).get_plan(caller, plan_id)
    assert [(s.title, s.position) for s in plan.segments] == [
        ("Basics", 0),
        ("Third", 2),
        ("Fourth", 3),
    ]
    assert [(t.title, t.position) for t in plan.segments[0].tasks] == [
        ("Write a CLI", 2),
        ("New", 3),
        ("Rustlings", 4),
    ]
