from typing import Optional

from staffplan.records import ViolationType
from staffplan.scheduling.rules.base import Breach, CandidateContext, LaborRule


class WeeklyCapRule(LaborRule):
    """
    Cap on paid minutes per staff member per week, counting the candidate shift.

    Plan field used:
      max_weekly_hours (None disables)
    """

    order = 70
    name = "WeeklyCap"

    def check(self, ctx: CandidateContext) -> Optional[Breach]:
        cap_hours = ctx.plan.max_weekly_hours
        if cap_hours is None:
            return None
        if ctx.projected_weekly_minutes > cap_hours * 60:
            hours = round(ctx.projected_weekly_minutes / 60)
            return Breach(
                self.name, ViolationType.WEEKLY_HOURS, f"Projected {hours}h exceeds limit"
            )
        return None
