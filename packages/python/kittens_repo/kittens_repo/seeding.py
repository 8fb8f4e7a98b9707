"""Dummy kitten generation for demos and load checks."""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta
from typing import List, Optional

from db_core import DataAccessError
from loguru import logger

from .filetime import filetime_from_datetime
from .models import Kitten
from .repository import KittenRepository

DUMMY_NAMES = ("mk1", "mk2", "mk3", "nabi", "coco", "luna", "milo", "tofu")


def make_dummy_kittens(count: int, rng: Optional[random.Random] = None, now: Optional[datetime] = None) -> List[Kitten]:
    rng = rng or random.Random()
    now = now or datetime.now(UTC)
    kittens = []
    for _ in range(count):
        born = now - timedelta(days=rng.randint(30, 20 * 365), seconds=rng.randint(0, 86_399))
        kittens.append(
            Kitten(
                name=rng.choice(DUMMY_NAMES),
                age=max(0, (now - born).days // 365),
                height=rng.randint(100, 220),
                birth=filetime_from_datetime(born),
            )
        )
    return kittens


async def seed_dummy_kittens(
    repo: KittenRepository,
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Kitten]:
    """Insert ``count`` dummy kittens one after another.

    The batch is all-or-nothing: on the first failed insert the kittens saved
    so far are deleted again and the original error is re-raised.
    """

    saved: List[Kitten] = []
    try:
        for kitten in make_dummy_kittens(count, rng):
            saved.append(await repo.save(kitten))
    except DataAccessError:
        logger.error("seeding aborted after {done}/{total} kitten(s), rolling back", done=len(saved), total=count)
        try:
            await repo.delete_many([k.id for k in saved if k.id])
        except DataAccessError:
            logger.exception("rollback of {done} seeded kitten(s) failed", done=len(saved))
        raise

    logger.info("seeded {count} kitten(s)", count=len(saved))
    return saved
