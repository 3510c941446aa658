from __future__ import annotations
from datetime import date, timedelta
from io import BytesIO
from typing import List
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from models import Reminder, StudySession, Todo
from summary import minutes_by_day, minutes_in_last_n_days, total_minutes


def _fmt_minutes(value: float) -> str:
    return f"{value:.0f}"


def study_report_to_pdf(
    sessions: List[StudySession],
    todos: List[Todo],
    reminders: List[Reminder],
    today: date,
    days: int = 7,
) -> bytes:
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        leftMargin=40,
        rightMargin=40,
        topMargin=40,
        bottomMargin=40,
    )
    styles = getSampleStyleSheet()
    elems = []

    days = max(1, days)
    window_start = today - timedelta(days=days - 1)
    elems.append(Paragraph(
        f"Study Report: {window_start.isoformat()} - {today.isoformat()}", styles["Title"]
    ))
    elems.append(Spacer(1, 10))
    elems.append(Paragraph(
        f"Last {days} days: {_fmt_minutes(minutes_in_last_n_days(sessions, today, days))} minutes "
        f"| All time: {_fmt_minutes(total_minutes(sessions))} minutes",
        styles["Normal"],
    ))
    elems.append(Spacer(1, 12))

    elems.append(Paragraph("Study time by day", styles["Heading3"]))
    by_day = minutes_by_day(sessions, window_start, num_days=days)
    table_data = [["Date", "Minutes"]]
    for d in sorted(by_day):
        table_data.append([d.strftime("%a %Y-%m-%d"), _fmt_minutes(by_day[d])])
    table_data.append(["Total", _fmt_minutes(sum(by_day.values()))])
    table = Table(table_data, hAlign="LEFT", colWidths=[150, 80])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("BACKGROUND", (0, -1), (-1, -1), colors.whitesmoke),
        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
    ]))
    elems.append(table)
    elems.append(Spacer(1, 12))

    open_todos = [t for t in todos if not t.completed]
    elems.append(Paragraph(f"Open todos ({len(open_todos)})", styles["Heading3"]))
    if open_todos:
        todo_data = [["#", "Todo", "Created"]]
        for t in sorted(open_todos, key=lambda x: x.id):
            todo_data.append([str(t.id), t.text, t.created_at])
        todo_table = Table(todo_data, hAlign="LEFT", colWidths=[30, 300, 130])
        todo_table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ]))
        elems.append(todo_table)
    else:
        elems.append(Paragraph("Nothing left to do.", styles["Normal"]))
    elems.append(Spacer(1, 12))

    open_reminders = [r for r in reminders if not r.is_completed]
    elems.append(Paragraph(f"Open reminders ({len(open_reminders)})", styles["Heading3"]))
    if open_reminders:
        reminder_data = [["Due", "Title", "Alerts"]]
        for r in sorted(open_reminders, key=lambda x: (x.due_date, x.id)):
            alerts = ", ".join(p.label for p in r.notification_periods) or "None"
            reminder_data.append([r.due_date, r.title, alerts])
        reminder_table = Table(reminder_data, hAlign="LEFT", colWidths=[80, 230, 150])
        reminder_table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ]))
        elems.append(reminder_table)
    else:
        elems.append(Paragraph("No open reminders.", styles["Normal"]))

    doc.build(elems)
    return buf.getvalue()
