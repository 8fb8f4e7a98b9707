from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class DemoSettings(BaseSettings):
    """Knobs for the demo run, read from ``KITTEN_DEMO_*`` env vars or ``.env``.

    MongoDB itself is configured through ``db_core.MongoSettings``.
    """

    model_config = SettingsConfigDict(env_prefix="KITTEN_DEMO_", env_file=".env", extra="ignore")

    log_level: str = "INFO"

    # Saved before the query runs; empty string skips it.
    kitten_name: str = "mk3"
    seed_count: int = 0
    seed: Optional[int] = None

    idx_start_at: int = 1
    idx_increment: int = 1

    query: Literal["all", "by_name", "count_range"] = "all"
    height_min: int = 180
    height_max: int = 200
    birth_min: Optional[int] = None
    birth_max: Optional[int] = None
