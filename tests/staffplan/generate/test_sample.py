from __future__ import annotations

import numpy as np
import pytest

from staffplan.generate.sample import (
    SAMPLE_PLAN_ID,
    SAMPLE_RUN_GROUP,
    SampleConfig,
    build_sample_store,
    daily_volumes,
    staff_summary,
)
from staffplan.records import RunStatus


def snapshot(store):
    return (
        [(s.id, s.name) for s in store.get_all_staff()],
        sorted((k.staff_id, k.skill_id) for k in store.get_staff_skills()),
        [(f.forecasted_volume, f.forecasted_aht) for f in store.forecasts],
    )


def test_same_seed_same_store(seed):
    assert snapshot(build_sample_store(seed)) == snapshot(build_sample_store(seed))


def test_sample_store_contents():
    config = SampleConfig(n_staff=20, days=7)
    store = build_sample_store(3, config)

    plan = store.get_schedule_plan_by_id(SAMPLE_PLAN_ID)
    assert (plan.end_date - plan.start_date).days == 6
    assert len(store.forecasts) == 7
    assert {s.skill_type for s in store.get_skills()} == {"voice", "chat"}

    runs = store.get_schedule_runs_by_group(SAMPLE_RUN_GROUP)
    assert sorted(r.label for r in runs) == ["A", "B"]
    assert all(r.status is RunStatus.QUEUED for r in runs)
    methods = {m.id: m.method_key for m in store.get_optimization_methods()}
    keys = {r.label: methods[r.method_id] for r in runs}
    assert keys == {"A": "greedy", "B": "local_search"}

    summary = staff_summary(store)
    assert summary["N"] == 20
    assert summary["skills"]["Sales"] + summary["skills"]["Support"] >= 20
    assert 0.0 <= summary["multi_skill_pct"] <= 1.0


def test_every_staff_member_has_a_voice_skill():
    store = build_sample_store(11, SampleConfig(n_staff=15, days=2))
    voice = {s.id for s in store.get_skills() if s.skill_type == "voice"}
    holders = {k.staff_id for k in store.get_staff_skills() if k.skill_id in voice}
    assert holders == {s.id for s in store.get_all_staff()}


def test_weekends_are_damped():
    config = SampleConfig(days=7, daily_volume_sd=0.0, weekend_factor=0.5)
    volumes = daily_volumes(config, np.random.default_rng(0))
    # 2024-01-01 is a Monday
    assert list(volumes) == [900.0] * 5 + [450.0] * 2


@pytest.mark.parametrize(
    "overrides",
    [
        dict(n_staff=0),
        dict(days=0),
        dict(primary_probs=(0.7, 0.7)),
        dict(primary_probs=(1.0,)),
        dict(second_skill_prob=1.5),
        dict(weekend_factor=2.0),
        dict(aht_mean=0),
        dict(method_b="annealing"),
    ],
)
def test_invalid_sample_config(overrides):
    with pytest.raises(ValueError):
        SampleConfig(**overrides).validate()
