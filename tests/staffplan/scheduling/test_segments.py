from __future__ import annotations

from staffplan.scheduling.segments import (
    Span,
    build_work_blocks,
    overlap_minutes,
    pick_skill,
    schedule_breaks,
    schedule_lunch,
)


def test_overlap_minutes():
    assert overlap_minutes(0, 60, 30, 90) == 30
    assert overlap_minutes(0, 60, 60, 90) == 0
    assert overlap_minutes(10, 20, 0, 100) == 10


def test_lunch_centered_in_window():
    # 09:00 shift of 510 minutes, lunch window 180-360 minutes after start
    assert schedule_lunch(540, 1050, 30, 180, 360) == Span(795, 825)


def test_lunch_falls_back_to_shift_center():
    assert schedule_lunch(0, 480, 60, 400, 420) == Span(210, 270)


def test_lunch_none_when_absent_or_too_long():
    assert schedule_lunch(0, 480, 0, 180, 360) is None
    assert schedule_lunch(0, 60, 90, 0, 60) is None


def test_breaks_spread_over_window():
    lunch = Span(795, 825)
    breaks = schedule_breaks(540, 1050, 2, 15, 60, 480, lunch)
    assert breaks == [Span(735, 750), Span(870, 885)]


def test_break_on_lunch_moves_before_it():
    lunch = schedule_lunch(0, 480, 60, 180, 360)
    assert lunch == Span(240, 300)
    assert schedule_breaks(0, 480, 1, 15, 180, 360, lunch) == [Span(225, 240)]


def test_colliding_breaks_are_dropped():
    breaks = schedule_breaks(0, 100, 3, 15, 0, 30)
    assert breaks == [Span(4, 19)]


def test_no_breaks_when_disabled():
    assert schedule_breaks(0, 480, 0, 15, 60, 400) == []
    assert schedule_breaks(0, 480, 2, 0, 60, 400) == []


def test_segments_never_overlap_and_stay_inside_shift():
    for start, end in ((540, 1050), (0, 300), (600, 1200)):
        lunch = schedule_lunch(start, end, 30, 180, 360)
        breaks = schedule_breaks(start, end, 3, 15, 60, 480, lunch)
        off = breaks + ([lunch] if lunch else [])
        work = build_work_blocks(start, end, off)
        spans = sorted(off + work)
        assert spans[0].start == start and spans[-1].end == end
        for a, b in zip(spans, spans[1:]):
            assert a.end == b.start
        assert sum(s.minutes for s in spans) == end - start


def test_work_blocks_are_complement():
    blocks = build_work_blocks(0, 100, [Span(50, 60), Span(20, 30)])
    assert blocks == [Span(0, 20), Span(30, 50), Span(60, 100)]
    assert build_work_blocks(0, 100, []) == [Span(0, 100)]


def test_pick_skill_prefers_largest_shortfall_then_primary():
    assert pick_skill((1, 2), {1: 10, 2: 30}, 1) == 2
    assert pick_skill((1, 2), {1: 30, 2: 30}, 2) == 2
    assert pick_skill((1, 2), None, 2) == 2
    assert pick_skill((1, 2), {}, 1) == 1
    assert pick_skill((3, 4), {3: 0, 4: 0}, 9) == 3
