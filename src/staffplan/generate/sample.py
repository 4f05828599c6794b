# staffplan/generate/sample.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from staffplan.memory_store import InMemoryStore
from staffplan.records import (
    Campaign,
    Forecast,
    OptimizationMethod,
    Scenario,
    SchedulePlan,
    ScheduleRun,
    ShiftTemplate,
    Skill,
    Staff,
)

SAMPLE_PLAN_ID = 1
SAMPLE_RUN_GROUP = "sample-ab"
METHOD_NAMES = {"greedy": "Greedy", "local_search": "Local search", "solver": "Solver"}

FIRST_NAMES: Tuple[str, ...] = (
    "Ada", "Bea", "Cal", "Dev", "Eli", "Fay", "Gus", "Hal", "Ivy", "Jo",
    "Kai", "Lou", "Max", "Nia", "Oz", "Pia", "Quin", "Rae", "Sol", "Tess",
    "Uma", "Vic", "Wren", "Xan", "Yara", "Zed",
)


# ----------------------------
# Configuration container
# ----------------------------
@dataclass(slots=True)
class SampleConfig:
    """
    Configuration for the synthetic campaign, roster and forecast.
    """

    n_staff: int = 48
    days: int = 14
    # A Monday, so the two weeks line up with weekly-hour accounting
    start_date: date = date(2024, 1, 1)

    # Voice skills share the campaign's volume; the chat skill is filtered out
    voice_skills: Tuple[str, ...] = ("Sales", "Support")
    primary_probs: Tuple[float, ...] = (0.5, 0.5)
    second_skill_prob: float = 0.35
    chat_skill_prob: float = 0.20

    # Daily forecast: normal around the mean, damped at weekends
    daily_volume_mean: float = 900.0
    daily_volume_sd: float = 90.0
    weekend_factor: float = 0.6
    aht_mean: float = 300.0
    aht_sd: float = 20.0

    erlang_model: str = "C"
    allow_skill_switch: bool = False

    # Method keys for the A and B runs of the sample group
    method_a: str = "greedy"
    method_b: str = "local_search"

    def validate(self) -> None:
        if self.n_staff <= 0:
            raise ValueError("n_staff must be > 0.")
        if self.days <= 0:
            raise ValueError("days must be > 0.")
        if not self.voice_skills:
            raise ValueError("At least one voice skill is required.")
        if len(self.voice_skills) != len(self.primary_probs):
            raise ValueError("voice_skills and primary_probs must be same length.")
        if not np.isclose(sum(self.primary_probs), 1.0, atol=1e-9):
            raise ValueError("primary_probs must sum to 1.0")
        for p in (self.second_skill_prob, self.chat_skill_prob):
            if not (0.0 <= p <= 1.0):
                raise ValueError("Skill probabilities must be in [0,1].")
        if self.daily_volume_mean < 0 or self.daily_volume_sd < 0:
            raise ValueError("Volume parameters must be non-negative.")
        if not (0.0 <= self.weekend_factor <= 1.0):
            raise ValueError("weekend_factor must be in [0,1].")
        if self.aht_mean <= 0:
            raise ValueError("aht_mean must be > 0.")
        for key in (self.method_a, self.method_b):
            if key not in METHOD_NAMES:
                raise ValueError(f"Unknown method key: {key!r}")


# ----------------------------
# Generation helpers
# ----------------------------
def _rng(seed: Optional[int]) -> np.random.Generator:
    return np.random.default_rng(seed) if seed is not None else np.random.default_rng()


def _deterministic_counts(n: int, probs: np.ndarray) -> np.ndarray:
    """
    Turn probabilities into integer counts that sum to n with minimal rounding error.
    """
    expected = probs * n
    floors = np.floor(expected).astype(int)
    shortfall = n - floors.sum()
    if shortfall > 0:
        remainders = expected - floors
        bump_idx = np.argsort(remainders)[::-1][:shortfall]
        floors[bump_idx] += 1
    return floors


def _staff_name(i: int) -> str:
    base = FIRST_NAMES[i % len(FIRST_NAMES)]
    lap = i // len(FIRST_NAMES)
    return base if lap == 0 else f"{base} {lap + 1}"


def daily_volumes(config: SampleConfig, g: np.random.Generator) -> np.ndarray:
    dates = pd.date_range(config.start_date, periods=config.days, freq="D")
    volume = g.normal(config.daily_volume_mean, config.daily_volume_sd, size=config.days)
    volume = np.where(dates.weekday >= 5, volume * config.weekend_factor, volume)
    return np.clip(np.round(volume), 0, None)


# ----------------------------
# Core API
# ----------------------------
def build_sample_store(
    seed: Optional[int] = 7, config: SampleConfig | None = None
) -> InMemoryStore:
    """
    Seed an InMemoryStore with one campaign, its skills, staff, a baseline
    forecast, a schedule plan, a shift template, the optimization methods
    and an A/B pair of runs in group ``SAMPLE_RUN_GROUP``.
    """
    config = config or SampleConfig()
    config.validate()
    g = _rng(seed)
    store = InMemoryStore()

    campaign = store.add_campaign(
        Campaign(id=1, name="Inbound care", channel_type="voice",
                 sla_target_percent=80.0, sla_threshold_seconds=20.0)
    )
    scenario = store.add_scenario(
        Scenario(id=1, name="Baseline", erlang_model=config.erlang_model, is_baseline=True)
    )

    voice = [
        store.add_skill(Skill(id=i + 1, name=name, skill_type="voice"))
        for i, name in enumerate(config.voice_skills)
    ]
    chat = store.add_skill(Skill(id=len(voice) + 1, name="Chat", skill_type="chat"))

    # Primary skills split deterministically close to target distribution
    counts = _deterministic_counts(config.n_staff, np.array(config.primary_probs, dtype=float))
    primary_idx = np.concatenate(
        [np.full(count, i, dtype=int) for i, count in enumerate(counts)]
    )
    g.shuffle(primary_idx)
    second_flags = g.random(config.n_staff) < config.second_skill_prob
    chat_flags = g.random(config.n_staff) < config.chat_skill_prob

    for i in range(config.n_staff):
        primary = voice[int(primary_idx[i])]
        skill_ids = [primary.id]
        if second_flags[i] and len(voice) > 1:
            others = [s for s in voice if s.id != primary.id]
            skill_ids.append(others[int(g.integers(len(others)))].id)
        if chat_flags[i]:
            skill_ids.append(chat.id)
        store.add_staff(Staff(id=i + 1, name=_staff_name(i)), skill_ids)

    end_date = config.start_date + timedelta(days=config.days - 1)
    volumes = daily_volumes(config, g)
    ahts = np.clip(g.normal(config.aht_mean, config.aht_sd, size=config.days), 60, None)
    for offset in range(config.days):
        store.add_forecast(
            Forecast(
                id=offset + 1,
                scenario_id=scenario.id,
                campaign_id=campaign.id,
                forecast_date=config.start_date + timedelta(days=offset),
                forecasted_volume=float(volumes[offset]),
                forecasted_aht=float(round(ahts[offset])),
            )
        )

    store.add_plan(
        SchedulePlan(
            id=SAMPLE_PLAN_ID,
            campaign_id=campaign.id,
            start_date=config.start_date,
            end_date=end_date,
            scenario_id=scenario.id,
            name="Sample fortnight",
            allow_skill_switch=config.allow_skill_switch,
        )
    )
    template = store.add_template(
        ShiftTemplate(id=1, name="8h day", paid_minutes=480, unpaid_minutes=30,
                      break_count=2, break_minutes=15)
    )

    methods = {}
    for i, (key, name) in enumerate(METHOD_NAMES.items(), start=1):
        methods[key] = store.add_method(OptimizationMethod(id=i, method_key=key, name=name))

    for run_id, label, key in ((1, "A", config.method_a), (2, "B", config.method_b)):
        store.add_run(
            ScheduleRun(
                id=run_id,
                schedule_plan_id=SAMPLE_PLAN_ID,
                method_id=methods[key].id,
                run_group_id=SAMPLE_RUN_GROUP,
                label=label,
                template_id=template.id,
            )
        )
    return store


# ----------------------------
# Convenience utilities
# ----------------------------
def staff_summary(store: InMemoryStore) -> dict:
    staff = store.get_all_staff(active_only=False)
    n = len(staff)
    skills_per_staff = Counter(link.staff_id for link in store.get_staff_skills())
    by_skill = Counter(link.skill_id for link in store.get_staff_skills())
    names = {s.id: s.name for s in store.get_skills()}
    return {
        "N": n,
        "skills": {names.get(k, str(k)): v for k, v in sorted(by_skill.items())},
        "multi_skill_pct": (
            sum(1 for s in staff if skills_per_staff[s.id] > 1) / n if n else 0.0
        ),
    }
