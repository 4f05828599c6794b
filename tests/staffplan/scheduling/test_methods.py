from __future__ import annotations

import logging

from staffplan.records import OptimizationMethod
from staffplan.scheduling.methods import (
    CandidateRanking,
    ConstraintPolicy,
    SchedulingMethod,
    resolve_method,
)

METHODS = [
    OptimizationMethod(1, "greedy"),
    OptimizationMethod(2, "local_search"),
    OptimizationMethod(3, " Solver "),
    OptimizationMethod(4, "annealing"),
]


def test_policies():
    assert SchedulingMethod.GREEDY.policy is ConstraintPolicy.RECORD
    assert SchedulingMethod.LOCAL_SEARCH.enforces_constraints
    assert SchedulingMethod.SOLVER.enforces_constraints
    assert not SchedulingMethod.GREEDY.enforces_constraints


def test_resolve_method():
    assert resolve_method(METHODS, 1) is SchedulingMethod.GREEDY
    assert resolve_method(METHODS, 2) is SchedulingMethod.LOCAL_SEARCH
    assert resolve_method(METHODS, 3) is SchedulingMethod.SOLVER
    assert resolve_method(METHODS, 99) is SchedulingMethod.GREEDY
    assert resolve_method([], None) is SchedulingMethod.GREEDY


def test_unrecognised_method_key_enforces_rules(caplog):
    with caplog.at_level(logging.WARNING, logger="staffplan"):
        method = resolve_method(METHODS, 4)
    assert method is SchedulingMethod.SOLVER
    assert method.policy is ConstraintPolicy.ENFORCE
    assert "annealing" in caplog.text
    assert resolve_method([OptimizationMethod(9, "tabu")], 9).enforces_constraints


def test_ranking_by_plan():
    assert CandidateRanking.for_plan(False) is CandidateRanking.SPECIALISTS_FIRST
    assert CandidateRanking.for_plan(True) is CandidateRanking.GENERALISTS_FIRST


def test_ranking_is_stable():
    pool = [("a", 2), ("b", 1), ("c", 2), ("d", 1)]
    count = lambda c: c[1]  # noqa: E731
    assert [c[0] for c in CandidateRanking.SPECIALISTS_FIRST.rank(pool, count)] == ["b", "d", "a", "c"]
    assert [c[0] for c in CandidateRanking.GENERALISTS_FIRST.rank(pool, count)] == ["a", "c", "b", "d"]
