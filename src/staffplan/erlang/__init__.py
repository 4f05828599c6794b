from staffplan.erlang.engine import (
    AchievableMetrics,
    EngineResult,
    calculate_achievable,
    calculate_staffing,
    search_bounds,
    solve_agents,
)
from staffplan.erlang.erlang_b import erlang_b, required_lines_b
from staffplan.erlang.erlang_c import erlang_c
from staffplan.erlang.erlang_x import EquilibriumResult, solve_equilibrium
from staffplan.erlang.traffic import effective_aht, fte, occupancy, traffic_intensity

__all__ = [
    "AchievableMetrics",
    "EngineResult",
    "EquilibriumResult",
    "calculate_achievable",
    "calculate_staffing",
    "effective_aht",
    "erlang_b",
    "erlang_c",
    "fte",
    "occupancy",
    "required_lines_b",
    "search_bounds",
    "solve_agents",
    "solve_equilibrium",
    "traffic_intensity",
]
