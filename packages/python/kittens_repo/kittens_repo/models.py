"""Pydantic model describing Kitten records."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Kitten(BaseModel):
    """Representation of a kitten stored in MongoDB.

    ``id`` and ``idx`` stay ``None`` until the record has been saved.
    ``birth`` is a FILETIME timestamp (see ``kittens_repo.filetime``).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    idx: Optional[int] = None
    name: str
    age: Optional[int] = None
    height: Optional[int] = None  # centimeters
    birth: Optional[int] = None
