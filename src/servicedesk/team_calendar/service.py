from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, List

from ..absences.model import AbsenceRequest
from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_date_order
from ..core.constants import CALENDAR_MAX_RANGE_DAYS, HIDDEN_ABSENCE_LABEL
from ..core.context import ActorContext
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CalendarEntry:
    request_id: int
    analyst_id: int
    title: str
    subtitle: str
    start_date: date
    end_date: date


class TeamCalendarService:
    """Shared calendar of approved absences.

    The reason is shown only to the request owner and to leads; everyone else
    sees a neutral label.
    """

    def __init__(self, absences: AbsenceRepository, *, clock: Callable[[], datetime] = now_local):
        self._absences = absences
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    def absences_on(self, viewer: ActorContext, day: date) -> List[CalendarEntry]:
        rows = self._absences.list_approved_between(start=day, end=day)
        return [self._entry(viewer, r) for r in rows if r.covers(day)]

    def marked_days(self, viewer: ActorContext, start: date, end: date) -> List[date]:
        require_date_order(start, end)
        if (end - start).days + 1 > CALENDAR_MAX_RANGE_DAYS:
            raise ValidationError(f"Calendar range cannot exceed {CALENDAR_MAX_RANGE_DAYS} days")
        rows = self._absences.list_approved_between(start=start, end=end)
        marked = set()
        for r in rows:
            day = max(r.start_date, start)
            last = min(r.end_date, end)
            while day <= last:
                marked.add(day)
                day += timedelta(days=1)
        return sorted(marked)

    @staticmethod
    def _entry(viewer: ActorContext, r: AbsenceRequest) -> CalendarEntry:
        visible = viewer.is_lead or viewer.owns(r.analyst_id)
        return CalendarEntry(
            request_id=r.request_id,
            analyst_id=r.analyst_id,
            title=r.analyst_name or "Analyst",
            subtitle=r.reason if visible else HIDDEN_ABSENCE_LABEL,
            start_date=r.start_date,
            end_date=r.end_date,
        )
