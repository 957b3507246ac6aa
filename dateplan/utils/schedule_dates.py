"""Date arithmetic shared by the anniversary and schedule expanders.

Month and year steps use ``relativedelta``, which clamps to the last valid
day of the target month (Jan 31 + 1 month = Feb 28/29, Feb 29 + 1 year =
Feb 28). Every offset is taken from the original anchor, so a clamped cycle
never shifts the cycles after it.
"""
from datetime import date, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from dateplan.models.anniversary import AnniversaryRepeatRule
from dateplan.models.schedule import RepeatRule

NON_REPEATING_RULES = {RepeatRule.N, AnniversaryRepeatRule.NONE}

_CYCLE_STEPS = {
    RepeatRule.D: lambda cycle: relativedelta(days=cycle),
    RepeatRule.W: lambda cycle: relativedelta(weeks=cycle),
    RepeatRule.M: lambda cycle: relativedelta(months=cycle),
    RepeatRule.Y: lambda cycle: relativedelta(years=cycle),
    AnniversaryRepeatRule.YEAR: lambda cycle: relativedelta(years=cycle),
    AnniversaryRepeatRule.HUNDRED_DAYS: lambda cycle: relativedelta(days=100 * cycle),
}


def get_next_cycle(anchor, repeat_rule, cycle: int):
    """Return occurrence number ``cycle`` (zero based) of a series.

    ``anchor`` may be a ``date`` or ``datetime``; the result has the same
    type and keeps the anchor's time of day. Non-repeating rules always
    return the anchor itself.
    """
    if repeat_rule in NON_REPEATING_RULES:
        return anchor
    return anchor + _CYCLE_STEPS[repeat_rule](cycle)


def is_repeating(repeat_rule) -> bool:
    return repeat_rule not in NON_REPEATING_RULES


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
