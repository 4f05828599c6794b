from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from staffplan.records import OptimizationMethod

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConstraintPolicy(Enum):
    """What the scheduler does with a candidate that would break a labor rule."""

    ENFORCE = "enforce"  # skip the candidate
    RECORD = "record"  # assign anyway and record a violation


class SchedulingMethod(str, Enum):
    GREEDY = "greedy"
    LOCAL_SEARCH = "local_search"
    SOLVER = "solver"

    @property
    def policy(self) -> ConstraintPolicy:
        if self is SchedulingMethod.GREEDY:
            return ConstraintPolicy.RECORD
        return ConstraintPolicy.ENFORCE

    @property
    def enforces_constraints(self) -> bool:
        return self.policy is ConstraintPolicy.ENFORCE


class CandidateRanking(Enum):
    """
    Order in which eligible staff are offered a skill's open slots, by
    ascending (SPECIALISTS_FIRST) or descending (GENERALISTS_FIRST) count of
    relevant skills. Plans that allow skill switching rank generalists first.
    Ties keep pool order.
    """

    SPECIALISTS_FIRST = "specialists_first"
    GENERALISTS_FIRST = "generalists_first"

    @classmethod
    def for_plan(cls, allow_skill_switch: bool) -> "CandidateRanking":
        return cls.GENERALISTS_FIRST if allow_skill_switch else cls.SPECIALISTS_FIRST

    def rank(self, candidates: Iterable[T], skill_count: Callable[[T], int]) -> list[T]:
        """Stable sort of `candidates` by `skill_count(candidate)`."""
        reverse = self is CandidateRanking.GENERALISTS_FIRST
        # sorted() is stable for reverse=True as well
        return sorted(candidates, key=skill_count, reverse=reverse)


def resolve_method(
    methods: Sequence[OptimizationMethod], method_id: Optional[int]
) -> SchedulingMethod:
    """
    Map a run's method id to a SchedulingMethod. A run with no known method id
    falls back to greedy; an unrecognised key enforces labor rules like the
    solver.
    """
    key = next((m.method_key for m in methods if m.id == method_id), None)
    if key is None:
        logger.debug("No optimization method with id %s; using greedy.", method_id)
        return SchedulingMethod.GREEDY
    try:
        return SchedulingMethod(key.strip().lower())
    except ValueError:
        logger.warning("Unknown optimization method %r; using solver.", key)
        return SchedulingMethod.SOLVER
