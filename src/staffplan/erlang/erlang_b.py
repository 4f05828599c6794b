from __future__ import annotations

from staffplan.config import cfg


def erlang_b(agents: int, traffic: float) -> float:
    """
    Blocking probability of an M/M/n/n loss system.

    B(0, A) = 1
    B(n, A) = A * B(n-1, A) / (n + A * B(n-1, A))
    """
    if agents < 0 or traffic < 0:
        return 0.0
    if traffic == 0:
        return 0.0 if agents > 0 else 1.0
    b = 1.0
    for n in range(1, int(agents) + 1):
        b = traffic * b / (n + traffic * b)
    return b


def required_lines_b(
    traffic: float, target_blocking: float, max_lines: int | None = None
) -> int:
    """Smallest line count whose blocking probability is <= target_blocking."""
    if traffic <= 0:
        return 0
    cap = cfg.MAX_ERLANG_B_LINES if max_lines is None else max_lines
    lines = max(0, int(traffic))
    blocking = erlang_b(lines, traffic)
    while blocking > target_blocking and lines < cap:
        lines += 1
        blocking = traffic * blocking / (lines + traffic * blocking)
    return lines
