import asyncio

import pytest
from sqlalchemy import text

from lp.db import base


@pytest.mark.asyncio
async def test_concurrent_first_use_initialises_once(monkeypatch):
    monkeypatch.setattr(base, "_init_lock", asyncio.Lock())
    await base.close_db()
    sessions = base.get_db()

    try:
        _, _, session = await asyncio.gather(
            base.init_db(), base.init_db(), sessions.__anext__()
        )
        engine = base.engine
        assert engine is not None
        assert session.bind is engine
        # Same URL, so the resource catalog shares the primary engine
        assert base.resource_engine is engine

        await base.init_db()
        assert base.engine is engine
        assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
    finally:
        await sessions.aclose()
        await base.close_db()

    assert base.engine is None
    assert base.AsyncSessionLocal is None
