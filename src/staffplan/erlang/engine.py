# staffplan/erlang/engine.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from staffplan.config import cfg
from staffplan.erlang import erlang_a, erlang_c, erlang_x
from staffplan.erlang.erlang_b import erlang_b
from staffplan.erlang.traffic import effective_aht, fte, occupancy, traffic_intensity
from staffplan.inputs import CalculationInputs, ErlangModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineResult:
    """
    Staffing requirement for one interval.

    ``service_level`` and ``occupancy`` are percentages (0-100); ``asa`` is in
    seconds and is ``inf`` when the best-effort agent count leaves the queue
    unstable.
    """

    model: ErlangModel
    traffic_intensity: float
    required_agents: int
    total_fte: float
    service_level: float
    asa: float
    occupancy: float
    can_achieve_target: bool
    abandonment_rate: Optional[float] = None
    expected_abandonments: Optional[float] = None
    answered_contacts: Optional[float] = None
    retrial_probability: Optional[float] = None
    virtual_traffic: Optional[float] = None
    blocking_probability: Optional[float] = None
    converged: Optional[bool] = None


@dataclass(frozen=True)
class AchievableMetrics:
    """Performance of a fixed roster against the workload (percentages 0-100)."""

    model: ErlangModel
    traffic_intensity: float
    fixed_agents: int
    actual_agents: int
    total_fte: float
    service_level: float
    asa: float
    occupancy: float
    actual_occupancy: float
    occupancy_cap_applied: bool
    required_agents_for_max_occupancy: int
    occupancy_penalty: float
    abandonment_rate: Optional[float] = None
    expected_abandonments: Optional[float] = None
    answered_contacts: Optional[float] = None
    retrial_probability: Optional[float] = None
    virtual_traffic: Optional[float] = None
    blocking_probability: Optional[float] = None
    converged: Optional[bool] = None


@dataclass(frozen=True)
class _Evaluation:
    agents: int
    service_level: float  # fraction
    asa: float
    occupancy: float  # fraction
    abandonment_rate: Optional[float] = None
    retrial_probability: Optional[float] = None
    virtual_traffic: Optional[float] = None
    blocking_probability: Optional[float] = None
    converged: Optional[bool] = None


def _patience(inputs: CalculationInputs) -> float:
    if inputs.average_patience is None:
        return cfg.DEFAULT_AVERAGE_PATIENCE_SECONDS
    return inputs.average_patience


def _evaluate(
    model: ErlangModel,
    agents: int,
    traffic: float,
    aht: float,
    threshold: float,
    patience: float,
) -> _Evaluation:
    """All model metrics at a given agent count."""
    if model is ErlangModel.B:
        blocking = erlang_b(agents, traffic)
        carried = traffic * (1 - blocking)
        occ = carried / agents if agents > 0 else 0.0
        return _Evaluation(agents, 1 - blocking, 0.0, occ, blocking_probability=blocking)

    occ = occupancy(traffic, agents)
    if model is ErlangModel.A:
        return _Evaluation(
            agents,
            erlang_a.service_level(agents, traffic, aht, threshold, patience),
            erlang_a.asa(agents, traffic, aht, patience),
            occ,
            abandonment_rate=erlang_a.abandonment_probability(
                agents, traffic, erlang_a.theta(patience, aht)
            ),
        )
    if model is ErlangModel.X:
        eq = erlang_x.solve_equilibrium(traffic, agents, aht, patience)
        return _Evaluation(
            agents,
            erlang_x.service_level(agents, eq, aht, threshold),
            erlang_x.asa(agents, eq, aht),
            occ,
            abandonment_rate=eq.abandonment_rate,
            retrial_probability=eq.retrial_probability,
            virtual_traffic=eq.virtual_traffic,
            converged=eq.converged,
        )
    return _Evaluation(
        agents,
        erlang_c.service_level(agents, traffic, aht, threshold),
        erlang_c.asa(agents, traffic, aht),
        occ,
    )


def search_bounds(traffic: float) -> tuple[int, int]:
    """Inclusive range of agent counts tried by the solver."""
    lo = max(1, math.ceil(traffic))
    hi = max(math.ceil(traffic * cfg.MAX_AGENTS_MULTIPLIER), cfg.MIN_AGENTS_SEARCH_UPPER)
    return lo, max(lo, hi)


def solve_agents(
    model: ErlangModel,
    traffic: float,
    aht: float,
    target_sl: float,
    threshold: float,
    max_occupancy: float,
    patience: float,
) -> tuple[_Evaluation, bool]:
    """
    Smallest agent count meeting both the service level target and the
    occupancy cap (fractions). Queued models also need n > traffic.

    Falls back to the highest service level seen in the search range and
    reports the target as unachievable.
    """
    lo, hi = search_bounds(traffic)
    best: Optional[_Evaluation] = None
    for n in range(lo, hi + 1):
        ev = _evaluate(model, n, traffic, aht, threshold, patience)
        stable = model is ErlangModel.B or n > traffic
        if stable and ev.service_level >= target_sl and ev.occupancy <= max_occupancy:
            return ev, True
        if best is None or ev.service_level > best.service_level:
            best = ev

    assert best is not None
    logger.debug(
        "Erlang %s: no agent count in [%d, %d] meets SL %.1f%% at occupancy <= %.1f%% "
        "(traffic %.3f); best effort %d agents at SL %.1f%%.",
        model.value,
        lo,
        hi,
        target_sl * 100,
        max_occupancy * 100,
        traffic,
        best.agents,
        best.service_level * 100,
    )
    return best, False


def _zero_volume_result(model: ErlangModel, traffic: float, volume: float) -> EngineResult:
    extras: dict = {}
    if model.has_abandonment:
        extras = dict(abandonment_rate=0.0, expected_abandonments=0.0, answered_contacts=volume)
    if model is ErlangModel.X:
        extras.update(
            retrial_probability=cfg.BASE_RETRIAL_RATE, virtual_traffic=0.0, converged=True
        )
    if model is ErlangModel.B:
        extras = dict(blocking_probability=0.0)
    return EngineResult(
        model=model,
        traffic_intensity=traffic,
        required_agents=0,
        total_fte=0.0,
        service_level=100.0,
        asa=0.0,
        occupancy=0.0,
        can_achieve_target=True,
        **extras,
    )


def calculate_staffing(inputs: CalculationInputs) -> EngineResult:
    """Agents required to meet the service target for one interval."""
    model = inputs.model
    aht = effective_aht(inputs.aht, inputs.concurrency)
    traffic = traffic_intensity(inputs.volume, aht, inputs.interval_minutes * 60)

    if inputs.volume <= 0 or traffic <= 0:
        return _zero_volume_result(model, traffic, inputs.volume)

    ev, achieved = solve_agents(
        model,
        traffic,
        aht,
        inputs.target_sl_percent / 100,
        inputs.threshold_seconds,
        inputs.max_occupancy / 100,
        _patience(inputs),
    )

    expected = answered = None
    if ev.abandonment_rate is not None:
        expected = inputs.volume * ev.abandonment_rate
        answered = inputs.volume - expected

    return EngineResult(
        model=model,
        traffic_intensity=traffic,
        required_agents=ev.agents,
        total_fte=fte(ev.agents, inputs.shrinkage_percent),
        service_level=ev.service_level * 100,
        asa=ev.asa,
        occupancy=ev.occupancy * 100,
        can_achieve_target=achieved,
        abandonment_rate=ev.abandonment_rate,
        expected_abandonments=expected,
        answered_contacts=answered,
        retrial_probability=ev.retrial_probability,
        virtual_traffic=ev.virtual_traffic,
        blocking_probability=ev.blocking_probability,
        converged=ev.converged,
    )


def calculate_achievable(
    inputs: CalculationInputs, fixed_agents: int, actual_agents: Optional[int] = None
) -> AchievableMetrics:
    """
    Metrics at a fixed agent count (no search).

    When the roster is below what the occupancy cap needs, the service level is
    scaled down and the ASA scaled up by actual / required.
    """
    if fixed_agents <= 0:
        raise ValueError("fixed_agents must be > 0.")
    actual = fixed_agents if actual_agents is None else actual_agents

    model = inputs.model
    aht = effective_aht(inputs.aht, inputs.concurrency)
    traffic = traffic_intensity(inputs.volume, aht, inputs.interval_minutes * 60)
    max_occ = inputs.max_occupancy / 100

    required_for_cap = math.ceil(traffic / max_occ) if max_occ > 0 else 0
    cap_applied = actual < required_for_cap
    penalty = min(1.0, max(0.0, actual / required_for_cap)) if cap_applied else 1.0

    ev = _evaluate(
        model, fixed_agents, traffic, aht, inputs.threshold_seconds, _patience(inputs)
    )
    sl, wait = ev.service_level, ev.asa
    if cap_applied:
        sl = min(1.0, max(0.0, sl * penalty))
        if not math.isinf(wait):
            wait = wait / (penalty if penalty > 0 else 0.001)
    if math.isinf(wait):
        wait = cfg.UNSTABLE_ASA_SECONDS

    expected = answered = None
    if ev.abandonment_rate is not None:
        expected = inputs.volume * ev.abandonment_rate
        answered = inputs.volume - expected

    return AchievableMetrics(
        model=model,
        traffic_intensity=traffic,
        fixed_agents=fixed_agents,
        actual_agents=actual,
        total_fte=fte(fixed_agents, inputs.shrinkage_percent),
        service_level=sl * 100,
        asa=wait,
        occupancy=ev.occupancy * 100,
        actual_occupancy=occupancy(traffic, actual) * 100,
        occupancy_cap_applied=cap_applied,
        required_agents_for_max_occupancy=required_for_cap,
        occupancy_penalty=penalty,
        abandonment_rate=ev.abandonment_rate,
        expected_abandonments=expected,
        answered_contacts=answered,
        retrial_probability=ev.retrial_probability,
        virtual_traffic=ev.virtual_traffic,
        blocking_probability=ev.blocking_probability,
        converged=ev.converged,
    )
