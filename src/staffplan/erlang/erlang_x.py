"""
Erlang X: abandonment with retrials.

Some abandoned contacts call back, inflating the offered load. The load the
agents actually see (virtual traffic) and the abandonment rate depend on each
other, so they are solved together with a bounded fixed-point iteration:

    ASA(V) -> retrial probability -> V = A / (1 - abandonment * retrial)
           -> abandonment = C(n, V) * (1 - exp(-(wait / patience) ** shape))

The loop stops when the abandonment rate moves less than the configured
tolerance, or after the iteration cap, in which case the last estimate is
returned with ``converged=False``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from staffplan.config import cfg
from staffplan.erlang.erlang_c import erlang_c

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquilibriumResult:
    abandonment_rate: float
    virtual_traffic: float
    retrial_probability: float
    iterations: int
    converged: bool


def retrial_probability(wait_time: float, average_patience: float) -> float:
    """Share of abandoned contacts that retry; grows with frustration (wait / patience)."""
    if average_patience <= 0:
        return cfg.MAX_RETRIAL_RATE
    frustration = min(wait_time / average_patience, 2.0)
    return min(
        cfg.BASE_RETRIAL_RATE + frustration * cfg.RETRIAL_FRUSTRATION_SLOPE,
        cfg.MAX_RETRIAL_RATE,
    )


def virtual_traffic(traffic: float, abandonment_rate: float, retrial_prob: float) -> float:
    feedback = abandonment_rate * retrial_prob
    if feedback >= 0.99:
        return math.inf
    return traffic / (1 - feedback)


def abandonment_rate_x(
    agents: int,
    traffic: float,
    aht: float,
    average_patience: float,
    patience_shape: float | None = None,
) -> float:
    if traffic <= 0:
        return 0.0
    if agents <= traffic:
        return 1.0
    pwait = erlang_c(agents, traffic)
    if pwait == 0:
        return 0.0
    if average_patience <= 0:
        return pwait

    shape = cfg.PATIENCE_SHAPE if patience_shape is None else patience_shape
    avg_wait = pwait * aht / (agents - traffic)
    abandon_given_wait = 1 - math.exp(-((avg_wait / average_patience) ** shape))
    return pwait * abandon_given_wait


def _mean_wait(agents: int, traffic: float, aht: float) -> float:
    if math.isinf(traffic):
        return aht / 0.01
    return erlang_c(agents, traffic) * aht / max(agents - traffic, 0.01)


def solve_equilibrium(
    traffic: float,
    agents: int,
    aht: float,
    average_patience: float,
    tolerance: float | None = None,
    max_iterations: int | None = None,
) -> EquilibriumResult:
    tol = cfg.EQUILIBRIUM_TOLERANCE if tolerance is None else tolerance
    cap = cfg.EQUILIBRIUM_MAX_ITERATIONS if max_iterations is None else max_iterations

    if traffic <= 0:
        return EquilibriumResult(0.0, 0.0, cfg.BASE_RETRIAL_RATE, 0, True)

    abandonment = cfg.EQUILIBRIUM_INITIAL_ABANDONMENT
    v_traffic = traffic
    retrial = cfg.BASE_RETRIAL_RATE

    for i in range(1, cap + 1):
        new_abandonment = abandonment_rate_x(agents, v_traffic, aht, average_patience)
        retrial = retrial_probability(_mean_wait(agents, v_traffic, aht), average_patience)
        new_v_traffic = virtual_traffic(traffic, new_abandonment, retrial)

        delta = abs(new_abandonment - abandonment)
        abandonment = new_abandonment
        v_traffic = new_v_traffic
        if delta < tol:
            return EquilibriumResult(abandonment, v_traffic, retrial, i, True)

    logger.debug(
        "Erlang X equilibrium did not converge for %d agents at %.3f Erlangs "
        "after %d iterations (abandonment %.5f).",
        agents,
        traffic,
        cap,
        abandonment,
    )
    return EquilibriumResult(abandonment, v_traffic, retrial, cap, False)


def service_level(
    agents: int, equilibrium: EquilibriumResult, aht: float, threshold: float
) -> float:
    """SL at the virtual traffic of a solved equilibrium."""
    v = equilibrium.virtual_traffic
    if v <= 0:
        return 1.0
    if agents <= v:
        return 0.0
    pwait = erlang_c(agents, v)
    sl = 1 - pwait * math.exp(-(agents - v) * threshold / aht)
    return min(1.0, max(0.0, sl))


def asa(agents: int, equilibrium: EquilibriumResult, aht: float) -> float:
    v = equilibrium.virtual_traffic
    if v <= 0:
        return 0.0
    if agents <= v:
        return math.inf
    return max(0.0, erlang_c(agents, v) * aht / (agents - v))
