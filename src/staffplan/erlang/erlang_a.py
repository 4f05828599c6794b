"""
Erlang A (M/M/n+M): queued contacts abandon after an exponentially
distributed patience.

theta is the patience expressed in handle times (patience / AHT). The closed
forms below are the usual approximations built on top of Erlang C:

    P(abandon)   = C / (1 + theta * (n - A))
    SL           = (1 - C) + C * (n - A) / (n - A + AHT/patience) * (1 - exp(-gamma * t))
    gamma        = (n - A + AHT/patience) / AHT
    ASA          = C * AHT / (n - A + AHT/patience)
"""

from __future__ import annotations

import math

from staffplan.erlang.erlang_c import erlang_c


def theta(average_patience: float, aht: float) -> float:
    if aht <= 0:
        return 0.0
    return average_patience / aht


def abandonment_probability(agents: int, traffic: float, patience_ratio: float) -> float:
    if traffic <= 0:
        return 0.0
    if agents <= traffic:
        return 1.0
    if patience_ratio <= 0:
        return 1.0
    if math.isinf(patience_ratio):
        return 0.0
    pwait = erlang_c(agents, traffic)
    prob = pwait / (1 + patience_ratio * (agents - traffic))
    return min(1.0, max(0.0, prob))


def expected_abandonments(
    volume: float, agents: int, traffic: float, patience_ratio: float
) -> float:
    return volume * abandonment_probability(agents, traffic, patience_ratio)


def service_level(
    agents: int, traffic: float, aht: float, threshold: float, average_patience: float
) -> float:
    """Fraction answered within `threshold`, counting abandoned contacts as missed."""
    if traffic <= 0:
        return 1.0
    if agents <= traffic:
        return 0.0
    pwait = erlang_c(agents, traffic)
    if average_patience <= 0:
        return 1.0 - pwait

    headroom = agents - traffic
    theta_aht = aht / average_patience
    gamma = (headroom + theta_aht) / aht
    served_within = headroom / (headroom + theta_aht) * (1 - math.exp(-gamma * threshold))
    sl = (1 - pwait) + pwait * served_within
    return min(1.0, max(0.0, sl))


def asa(agents: int, traffic: float, aht: float, average_patience: float) -> float:
    if traffic <= 0:
        return 0.0
    if agents <= traffic:
        return math.inf
    if average_patience <= 0:
        return 0.0
    pwait = erlang_c(agents, traffic)
    return max(0.0, pwait * aht / (agents - traffic + aht / average_patience))
