"""
Placement of lunch, breaks and work blocks inside a shift.

All values are minutes from midnight. Window bounds are minutes from the start
of the shift. Every returned span lies within [shift_start, shift_end] and no
two off-floor spans overlap.
"""

from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Optional, Sequence

from staffplan.records import round_half_up

logger = logging.getLogger(__name__)


class Span(NamedTuple):
    start: int
    end: int

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end


def overlap_minutes(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def schedule_lunch(
    shift_start: int,
    shift_end: int,
    duration: int,
    window_start_min: int,
    window_end_min: int,
) -> Optional[Span]:
    """
    Lunch centered in its window, or centered in the shift when the window
    cannot hold it. None when there is no lunch or it does not fit the shift.
    """
    if duration <= 0 or duration > shift_end - shift_start:
        return None
    window_start = shift_start + max(0, window_start_min)
    window_end = shift_start + max(0, window_end_min) - duration

    start = shift_start + round_half_up((shift_end - shift_start - duration) / 2)
    if window_end >= window_start:
        start = window_start + round_half_up((window_end - window_start) / 2)
    start = max(shift_start, min(start, shift_end - duration))
    return Span(start, start + duration)


def schedule_breaks(
    shift_start: int,
    shift_end: int,
    break_count: int,
    break_minutes: int,
    window_start_min: int,
    window_end_min: int,
    lunch: Optional[Span] = None,
) -> list[Span]:
    """
    `break_count` breaks spread evenly over the break window (or the whole
    shift when the window is too small). A break landing on lunch moves to just
    before it, else just after it. Breaks that still collide with lunch or an
    earlier break are dropped.
    """
    if break_count <= 0 or break_minutes <= 0 or break_minutes > shift_end - shift_start:
        return []

    window_start = shift_start + max(0, window_start_min)
    window_end = shift_start + max(0, window_end_min) - break_minutes
    if window_end >= window_start:
        safe_start, safe_end = window_start, window_end
    else:
        safe_start, safe_end = shift_start, shift_end - break_minutes
    span = max(0, safe_end - safe_start)

    starts: list[int] = []
    for i in range(break_count):
        start = safe_start + round_half_up((i + 1) / (break_count + 1) * span)
        if lunch is not None and Span(start, start + break_minutes).overlaps(lunch):
            before = lunch.start - break_minutes
            after = lunch.end
            if before >= safe_start:
                start = before
            elif after <= safe_end:
                start = after
        start = max(shift_start, min(start, shift_end - break_minutes))
        starts.append(start)

    kept: list[Span] = []
    for start in sorted(starts):
        brk = Span(start, start + break_minutes)
        if (lunch is not None and brk.overlaps(lunch)) or (kept and brk.overlaps(kept[-1])):
            logger.debug("Dropping break %s: no free slot in shift %s.", brk, (shift_start, shift_end))
            continue
        kept.append(brk)
    return kept


def build_work_blocks(
    shift_start: int, shift_end: int, off_segments: Iterable[Span]
) -> list[Span]:
    """Complement of the off-floor spans within the shift."""
    blocks: list[Span] = []
    cursor = shift_start
    for seg in sorted(off_segments):
        if cursor < seg.start:
            blocks.append(Span(cursor, seg.start))
        cursor = max(cursor, seg.end)
    if cursor < shift_end:
        blocks.append(Span(cursor, shift_end))
    return blocks


def pick_skill(
    skills: Sequence[int],
    remaining: Optional[dict[int, int]],
    primary_skill: int,
) -> int:
    """
    Skill with the largest remaining shortfall in an interval. The primary
    skill wins ties and is used when nothing is known about the interval.
    """
    best = primary_skill if primary_skill in skills else skills[0]
    if not remaining:
        return best
    best_remaining = remaining.get(best, 0)
    for skill in skills:
        left = remaining.get(skill, 0)
        if left > best_remaining:
            best, best_remaining = skill, left
    return best
