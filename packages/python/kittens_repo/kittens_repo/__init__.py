"""Kitten repository: typed records over the shared db_core data access layer."""

from .filetime import datetime_from_filetime, filetime_from_datetime, filetime_now
from .models import Kitten
from .repository import MODEL_NAME, KittenRepository
from .seeding import make_dummy_kittens, seed_dummy_kittens
from .service import greeting, speak

__all__ = [
    "Kitten",
    "KittenRepository",
    "MODEL_NAME",
    "datetime_from_filetime",
    "filetime_from_datetime",
    "filetime_now",
    "greeting",
    "make_dummy_kittens",
    "seed_dummy_kittens",
    "speak",
]
