from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import List, Optional
from icalendar import Calendar
from pydantic import BaseModel, Field
from models import DAY_FORMAT, NotificationPeriod, PRESET_DAYS


class ImportedReminder(BaseModel):
    title: str
    description: Optional[str] = None
    due_date: str
    notification_periods: List[NotificationPeriod] = Field(default_factory=list)


def _normalize_to_date(value) -> date | None:
    dt_value = getattr(value, "dt", value)

    if isinstance(dt_value, datetime):
        if dt_value.tzinfo:
            dt_value = dt_value.astimezone().replace(tzinfo=None)
        return dt_value.date()
    if isinstance(dt_value, date):
        return dt_value
    return None


def _period_for_trigger(trigger) -> NotificationPeriod | None:
    delta = getattr(trigger, "dt", trigger)
    if not isinstance(delta, timedelta) or delta > timedelta(0):
        return None
    # partial days round up
    lead = -delta
    days = lead.days + (1 if lead.seconds or lead.microseconds else 0)
    for kind, preset_days in PRESET_DAYS.items():
        if preset_days == days:
            return NotificationPeriod(kind=kind)
    return NotificationPeriod.custom(days)


def parse_ics_bytes(data: bytes) -> List[ImportedReminder]:
    cal = Calendar.from_ical(data)
    out: List[ImportedReminder] = []

    for component in cal.walk():
        if component.name != "VEVENT":
            continue

        dtstart = component.get("DTSTART")
        if not dtstart:
            continue
        due = _normalize_to_date(dtstart)
        if due is None:
            continue

        periods: List[NotificationPeriod] = []
        for sub in component.subcomponents:
            if sub.name != "VALARM":
                continue
            period = _period_for_trigger(sub.get("TRIGGER"))
            if period is not None and period not in periods:
                periods.append(period)

        description = component.get("DESCRIPTION")
        out.append(ImportedReminder(
            title=str(component.get("SUMMARY", "Untitled")),
            description=str(description) if description else None,
            due_date=due.strftime(DAY_FORMAT),
            notification_periods=sorted(periods, key=lambda p: p.days_before),
        ))

    return sorted(out, key=lambda x: x.due_date)
