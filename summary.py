from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List
from models import DAY_FORMAT, Reminder, StudySession


NO_DESCRIPTION = "(no description)"


def parse_day(value: str) -> date | None:
    try:
        return datetime.strptime(value, DAY_FORMAT).date()
    except (TypeError, ValueError):
        return None


def total_minutes(sessions: Iterable[StudySession]) -> float:
    return sum((s.minutes for s in sessions), 0.0)


def minutes_on_day(sessions: Iterable[StudySession], day: date) -> float:
    key = day.strftime(DAY_FORMAT)
    return sum((s.minutes for s in sessions if s.date == key), 0.0)


def minutes_in_last_n_days(
    sessions: Iterable[StudySession],
    today: date,
    days: int,
) -> float:
    """
    Sum sessions whose date is fewer than `days` days before today.
    days=1 is today only; days <= 0 is always empty. Unparseable dates are skipped.
    """
    if days <= 0:
        return 0.0
    total = 0.0
    for s in sessions:
        d = parse_day(s.date)
        if d is None:
            continue
        if (today - d).days < days:
            total += s.minutes
    return total


def minutes_by_day(
    sessions: Iterable[StudySession],
    start_date: date,
    num_days: int = 7,
) -> Dict[date, float]:
    by_day: Dict[date, float] = {start_date + timedelta(days=i): 0.0 for i in range(num_days)}
    for s in sessions:
        d = parse_day(s.date)
        if d in by_day:
            by_day[d] += s.minutes
    return by_day


def minutes_by_description(sessions: Iterable[StudySession]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for s in sessions:
        label = s.description if s.description is not None else NO_DESCRIPTION
        out[label] = out.get(label, 0.0) + s.minutes
    return out


def notification_dates(reminder: Reminder) -> List[date]:
    due = parse_day(reminder.due_date)
    if due is None:
        return []
    return sorted({due - timedelta(days=p.days_before) for p in reminder.notification_periods})


def due_alerts(reminders: Iterable[Reminder], today: date) -> List[dict]:
    """
    Open reminders that should be surfaced today: an alert date falls on today,
    or the reminder is due today or overdue.
    """
    alerts = []
    for r in reminders:
        if r.is_completed:
            continue
        due = parse_day(r.due_date)
        if due is None:
            continue
        days_left = (due - today).days
        if days_left <= 0:
            reason = "overdue" if days_left < 0 else "due today"
        else:
            matching = [p for p in r.notification_periods if p.days_before == days_left]
            if not matching:
                continue
            reason = matching[0].label
        alerts.append({
            "id": r.id,
            "title": r.title,
            "due_date": due,
            "days_left": days_left,
            "reason": reason,
        })

    alerts.sort(key=lambda x: (x["due_date"], x["id"]))
    return alerts
