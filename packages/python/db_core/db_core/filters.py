"""Numeric range predicates used by ``DocumentStore.count_in_range``."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, model_validator

from .typing import Number


class RangeFilter(BaseModel):
    """Bounds on one numeric field.

    ``gte``/``gt`` give the lower bound (inclusive/exclusive) and ``lte``/``lt``
    the upper bound. Bounds are rendered as given, never widened or narrowed.
    """

    gte: Optional[Number] = None
    gt: Optional[Number] = None
    lte: Optional[Number] = None
    lt: Optional[Number] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "RangeFilter":
        if self.gte is not None and self.gt is not None:
            raise ValueError("use either gte or gt for the lower bound, not both")
        if self.lte is not None and self.lt is not None:
            raise ValueError("use either lte or lt for the upper bound, not both")
        if all(bound is None for bound in (self.gte, self.gt, self.lte, self.lt)):
            raise ValueError("a range filter needs at least one bound")
        return self

    @classmethod
    def closed(cls, low: Number, high: Number) -> "RangeFilter":
        """``low <= value <= high``"""

        return cls(gte=low, lte=high)

    @classmethod
    def half_open(cls, low: Number, high: Number) -> "RangeFilter":
        """``low <= value < high``"""

        return cls(gte=low, lt=high)

    def to_query(self) -> dict[str, Any]:
        return {f"${op}": value for op, value in self.model_dump(exclude_none=True).items()}
