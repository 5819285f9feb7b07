"""Demo catalogue seeding."""

from __future__ import annotations

import pytest

from sweepstakes_hub.filtering import FilterSpec
from sweepstakes_hub.seed import DEMO_COMPETITIONS, seed_demo
from sweepstakes_hub.services.competition_service import CompetitionService


@pytest.mark.asyncio
async def test_seed_populates_empty_table_once(db):
    assert await seed_demo(db) == len(DEMO_COMPETITIONS)
    assert await seed_demo(db) == 0

    service = CompetitionService(db)
    assert len(await service.list()) == len(DEMO_COMPETITIONS)
    photography = await service.list(FilterSpec(category="Photography"))
    assert sorted(c.title for c in photography) == ["Summer Photography Contest", "Travel Photography Contest"]
    past = await service.list(FilterSpec.parse({"status": "past"}))
    assert [c.title for c in past] == ["Travel Photography Contest"]
