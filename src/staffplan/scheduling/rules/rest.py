from typing import Optional

from staffplan.records import ViolationType
from staffplan.scheduling.rules.base import Breach, CandidateContext, LaborRule


class RestRule(LaborRule):
    """
    Minimum rest between the end of a staff member's previous shift and the
    start of the candidate shift.

    Plan field used:
      min_rest_hours (0 disables)
    """

    order = 50
    name = "Rest"

    def check(self, ctx: CandidateContext) -> Optional[Breach]:
        min_rest = ctx.plan.min_rest_hours
        if not min_rest or ctx.rest_gap_hours is None:
            return None
        if ctx.rest_gap_hours < min_rest:
            return Breach(self.name, ViolationType.REST, f"Rest gap {ctx.rest_gap_hours:.1f}h")
        return None
