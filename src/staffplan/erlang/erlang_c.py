"""
Erlang C (M/M/n, infinite patience).

    P(wait > 0) = C(n, A) = n * B(n, A) / (n - A * (1 - B(n, A)))
    P(wait > t) = C(n, A) * exp(-(n - A) * t / AHT)

with n agents, A offered Erlangs and B the Erlang B blocking probability.
Every function returns the unstable-queue value when n <= A.
"""

from __future__ import annotations

import math

from staffplan.erlang.erlang_b import erlang_b


def erlang_c(agents: int, traffic: float) -> float:
    """Probability that an arriving contact has to wait."""
    if agents <= 0 or traffic <= 0:
        return 0.0
    if agents <= traffic:
        return 1.0
    b = erlang_b(agents, traffic)
    pwait = agents * b / (agents - traffic * (1 - b))
    return min(1.0, max(0.0, pwait))


def prob_wait_exceeds(agents: int, traffic: float, aht: float, threshold: float) -> float:
    if aht <= 0 or threshold < 0:
        return 0.0
    if agents <= traffic:
        return 1.0
    result = erlang_c(agents, traffic) * math.exp(-(agents - traffic) * threshold / aht)
    return min(1.0, max(0.0, result))


def service_level(agents: int, traffic: float, aht: float, threshold: float) -> float:
    """Fraction of contacts answered within `threshold` seconds (0-1)."""
    if traffic <= 0:
        return 1.0
    if agents <= traffic:
        return 0.0
    return 1.0 - prob_wait_exceeds(agents, traffic, aht, threshold)


def asa(agents: int, traffic: float, aht: float) -> float:
    """Average speed of answer in seconds; inf for an unstable queue."""
    if traffic <= 0:
        return 0.0
    if agents <= traffic:
        return math.inf
    return max(0.0, erlang_c(agents, traffic) * aht / (agents - traffic))
