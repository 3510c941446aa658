from __future__ import annotations
from datetime import timedelta
from typing import List, Tuple
from icalendar import Alarm, Calendar, Event as IcsEvent
from models import Reminder
from summary import parse_day


def reminders_to_ics(reminders: List[Reminder]) -> Tuple[bytes, List[str]]:
    """
    Export open reminders as all-day events, one alarm per notification period.
    Returns the calendar bytes and warnings for reminders that were skipped.
    """
    cal = Calendar()
    cal.add("PRODID", "-//Study Timer//Local//")
    cal.add("version", "2.0")
    cal.add("X-WR-CALNAME", "Study Reminders")

    warnings: List[str] = []
    for reminder in sorted(reminders, key=lambda r: (r.due_date, r.id)):
        if reminder.is_completed:
            continue
        due = parse_day(reminder.due_date)
        if due is None:
            warnings.append(
                f"{reminder.title} has an unreadable due date ({reminder.due_date}) and was skipped."
            )
            continue

        event = IcsEvent()
        event.add("uid", f"reminder-{reminder.id}-{reminder.created_at.replace(' ', 'T')}@study-timer")
        event.add("summary", reminder.title)
        event.add("dtstart", due)
        event.add("dtend", due + timedelta(days=1))
        if reminder.description:
            event.add("description", reminder.description)

        seen = set()
        for period in reminder.notification_periods:
            if period.days_before in seen:
                continue
            seen.add(period.days_before)
            alarm = Alarm()
            alarm.add("action", "DISPLAY")
            alarm.add("description", f"{reminder.title} ({period.label})")
            alarm.add("trigger", timedelta(days=-period.days_before))
            event.add_component(alarm)

        cal.add_component(event)

    return cal.to_ical(), warnings
