from __future__ import annotations

import math


def traffic_intensity(volume: float, aht: float, interval_seconds: float = 1800) -> float:
    """
    Offered load in Erlangs: A = volume * AHT / interval length.
    Non-positive inputs carry no load.
    """
    if volume <= 0 or aht <= 0 or interval_seconds <= 0:
        return 0.0
    return volume * aht / interval_seconds


def effective_aht(aht: float, concurrency: float = 1.0) -> float:
    """AHT per agent slot when one agent handles `concurrency` contacts at once."""
    if concurrency is None or concurrency < 1:
        return aht
    return aht / concurrency


def occupancy(traffic: float, agents: float) -> float:
    """Fraction of agent time spent handling contacts, clamped to [0, 1]."""
    if agents <= 0:
        return 0.0
    return min(1.0, max(0.0, traffic / agents))


def fte(agents: float, shrinkage_percent: float) -> float:
    """Scheduled FTE needed so that `agents` remain on the floor after shrinkage."""
    shrink = max(0.0, shrinkage_percent) / 100
    if shrink >= 1.0:
        return math.inf
    return agents / (1 - shrink)
