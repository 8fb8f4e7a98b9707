"""Demo run: connect, save a kitten, optionally seed dummies, query, disconnect.

Run with:

    python -m kitten_demo

MongoDB is configured with ``MONGO_URI``; the run itself with ``KITTEN_DEMO_*``.
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Union

from db_core import DocumentStore, MongoConnection, MongoSettings, RangeFilter
from dotenv import find_dotenv, load_dotenv
from kittens_repo import Kitten, KittenRepository, seed_dummy_kittens, speak
from loguru import logger

from .config import DemoSettings

QueryResult = Union[int, List[Kitten]]


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )


@contextmanager
def timed(label: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("{label} took {ms:.1f} ms", label=label, ms=elapsed_ms)


def _birth_range(settings: DemoSettings) -> Optional[RangeFilter]:
    if settings.birth_min is None and settings.birth_max is None:
        return None
    return RangeFilter(gte=settings.birth_min, lte=settings.birth_max)


async def run_query(repo: KittenRepository, settings: DemoSettings) -> QueryResult:
    if settings.query == "count_range":
        count = await repo.count_in_range(
            height=RangeFilter.closed(settings.height_min, settings.height_max),
            birth=_birth_range(settings),
        )
        logger.info("{count} kitten(s) in range", count=count)
        return count

    if settings.query == "by_name":
        kittens = await repo.find_by_name(settings.kitten_name)
    else:
        kittens = await repo.list_all()
    for kitten in kittens:
        logger.info("{kitten}", kitten=kitten.model_dump(by_alias=True))
    logger.info("{count} kitten(s) found", count=len(kittens))
    return kittens


async def run(settings: DemoSettings, connection: MongoConnection) -> QueryResult:
    logger.info("Start Main")
    with timed("connect"):
        await connection.connect()

    try:
        repo = KittenRepository(DocumentStore(connection))
        await repo.setup(start_at=settings.idx_start_at, increment=settings.idx_increment)

        if settings.kitten_name:
            with timed("save"):
                kitten = await repo.save(Kitten(name=settings.kitten_name))
            speak(kitten)

        if settings.seed_count > 0:
            with timed(f"seed {settings.seed_count} kitten(s)"):
                await seed_dummy_kittens(repo, settings.seed_count, random.Random(settings.seed))

        with timed(f"query {settings.query}"):
            return await run_query(repo, settings)
    finally:
        await connection.disconnect()


def main() -> None:
    # Search for the nearest .env so MONGO_URI is picked up from the project root.
    load_dotenv(find_dotenv(usecwd=True))
    settings = DemoSettings()
    _configure_logging(settings.log_level)

    connection = MongoConnection(MongoSettings())
    try:
        asyncio.run(run(settings, connection))
    except Exception:
        logger.exception("kitten demo failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
