from __future__ import annotations
import logging
import streamlit as st
import pandas as pd
from datetime import date, timedelta

from calendar_export import reminders_to_ics
from calendar_import import parse_ics_bytes
from models import DAY_FORMAT, NotificationPeriod, format_periods, parse_periods
from pdf_export import study_report_to_pdf
from paths import get_data_file, get_log_level
from storage import PersistenceError, PersistenceReadError, backup_corrupt_file
from store import StudyStore
from summary import due_alerts, minutes_by_day, minutes_by_description


logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Study Timer", page_icon="⏱️", layout="wide")


def _ensure_session_state() -> StudyStore | None:
    if "store" in st.session_state:
        return st.session_state.store

    data_file = get_data_file()
    try:
        st.session_state.store = StudyStore.load(data_file)
    except PersistenceReadError as e:
        logger.error("Could not load %s: %s", data_file, e)
        st.error(f"Your study data could not be loaded: {e}")

        @st.dialog("Start with empty data?")
        def _confirm_recover() -> None:
            st.write(f"The unreadable file will be moved aside as {data_file.name}.bak.")
            if st.button("Back up and start fresh", type="primary"):
                try:
                    backup_corrupt_file(data_file)
                except PersistenceError as err:
                    logger.error("Backup failed: %s", err)
                    st.error(f"Could not move the file aside: {err}")
                    return
                st.session_state.pop("store", None)
                st.rerun()

        if st.button("Recover"):
            _confirm_recover()
        return None
    return st.session_state.store


def _queue_toast(message: str) -> None:
    st.session_state.toast_message = message


def _flush_toast() -> None:
    message = st.session_state.pop("toast_message", None)
    if message:
        st.toast(message)


def _run(action, message: str | None = None) -> None:
    """Apply a store mutation, reporting save failures to the user."""
    try:
        action()
    except PersistenceError as e:
        logger.error("Save failed: %s", e)
        st.error(f"Change applied but not saved: {e}")
        return
    if message:
        _queue_toast(message)
    st.rerun()


def _periods_input(key: str, current: list[NotificationPeriod] | None = None) -> list[NotificationPeriod] | None:
    """Text field for notification periods. Returns None when the text is invalid."""
    text = st.text_input(
        "Notify (OneDay, ThreeDays, OneWeek or day counts, comma-separated)",
        value=format_periods(current or []),
        placeholder="OneWeek, OneDay",
        key=f"{key}_periods",
    )
    try:
        return parse_periods(text)
    except ValueError as e:
        st.warning(str(e))
        return None


def render_log(store: StudyStore) -> None:
    st.header("Log study")

    a, b, c = st.columns(3)
    a.metric("Today (m)", f"{store.get_today_minutes():.0f}")
    b.metric("Last 7 days (m)", f"{store.get_last_n_days_minutes(7):.0f}")
    c.metric("All time (m)", f"{store.get_total_minutes():.0f}")

    st.divider()
    with st.form("add_session_form", clear_on_submit=True):
        col1, col2, col3 = st.columns([1, 1, 2])
        with col1:
            day = st.date_input("Date", value=date.today())
        with col2:
            minutes = st.number_input("Minutes", min_value=0.0, max_value=1440.0, value=25.0, step=5.0)
        with col3:
            description = st.text_input("Description (optional)", placeholder="Chapter 3 review")
        if st.form_submit_button("Log session", type="primary"):
            if minutes <= 0:
                st.warning("Minutes must be more than zero.")
            else:
                _run(
                    lambda: store.add_session(
                        day.strftime(DAY_FORMAT), float(minutes), description.strip() or None
                    ),
                    "Session logged.",
                )

    st.subheader("Sessions")
    if not store.sessions:
        st.info("No study sessions yet.")
        return
    rows = [
        {"Date": s.date, "Minutes": round(s.minutes, 1), "Description": s.description or ""}
        for s in sorted(store.sessions, key=lambda x: x.date, reverse=True)
    ]
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)


def render_todos(store: StudyStore) -> None:
    st.header("Todos")

    with st.form("add_todo_form", clear_on_submit=True):
        text = st.text_input("New todo", placeholder="Finish problem set")
        if st.form_submit_button("Add", type="primary"):
            if not text.strip():
                st.warning("Todo text is required.")
            else:
                _run(lambda: store.add_todo(text.strip()), "Todo added.")

    if not store.todos:
        st.info("No todos yet.")
        return

    rows = [
        {"id": t.id, "Done": t.completed, "Todo": t.text, "Created": t.created_at}
        for t in store.todos
    ]
    df = pd.DataFrame(rows).set_index("id")
    edited = st.data_editor(
        df,
        hide_index=True,
        use_container_width=True,
        column_config={
            "Done": st.column_config.CheckboxColumn("Done"),
            "Todo": st.column_config.TextColumn("Todo", width="large"),
            "Created": st.column_config.TextColumn("Created"),
        },
        disabled=["Created"],
        key="todos_editor",
    )

    edited_records = edited.reset_index().to_dict("records")

    def _apply() -> None:
        for row in edited_records:
            todo = store.find_todo(int(row["id"]))
            if todo is None:
                continue
            new_text = str(row.get("Todo") or "").strip()
            if new_text and new_text != todo.text:
                store.update_todo_text(todo.id, new_text)
            if bool(row.get("Done")) != todo.completed:
                store.toggle_todo(todo.id)

    col_apply, col_clear_done, col_clear = st.columns(3)
    if col_apply.button("Apply changes"):
        _run(_apply, "Todos updated.")
    if col_clear_done.button("Clear completed"):
        _run(store.clear_completed_todos, "Completed todos cleared.")
    if col_clear.button("Clear all"):

        @st.dialog("Clear all todos?")
        def _confirm_clear_todos() -> None:
            st.write("This will remove every todo.")
            if st.button("Clear todos", type="primary"):
                _run(store.clear_todos, "Todos cleared.")

        _confirm_clear_todos()

    delete_id = st.selectbox(
        "Delete todo", [None] + [t.id for t in store.todos],
        format_func=lambda i: "" if i is None else f"#{i} {store.find_todo(i).text}",
    )
    if delete_id is not None and st.button("Delete"):
        _run(lambda: store.delete_todo(delete_id), "Todo deleted.")


def render_reminders(store: StudyStore) -> None:
    st.header("Reminders")

    alerts = due_alerts(store.reminders, date.today())
    for alert in alerts:
        st.warning(f"{alert['title']}: {alert['reason']} (due {alert['due_date'].isoformat()})")

    with st.form("add_reminder_form", clear_on_submit=True):
        col1, col2 = st.columns([2, 1])
        with col1:
            title = st.text_input("Title", placeholder="Math exam")
        with col2:
            due = st.date_input("Due date", value=date.today() + timedelta(days=7))
        description = st.text_area("Description (optional)", height=80)
        periods = _periods_input("new_reminder")
        if st.form_submit_button("Add reminder", type="primary"):
            if not title.strip():
                st.warning("Title is required.")
            elif periods is not None:
                _run(
                    lambda: store.add_reminder(
                        title.strip(), description.strip() or None,
                        due.strftime(DAY_FORMAT), periods,
                    ),
                    "Reminder added.",
                )

    if not store.reminders:
        st.info("No reminders yet.")
        return

    for r in sorted(store.reminders, key=lambda x: (x.is_completed, x.due_date)):
        label = f"{'✅' if r.is_completed else '⬜'} {r.title} (due {r.due_date})"
        with st.expander(label, expanded=False):
            if r.description:
                st.write(r.description)
            st.caption(", ".join(p.label for p in r.notification_periods) or "No alerts")
            with st.form(f"edit_reminder_{r.id}"):
                new_title = st.text_input("Title", value=r.title)
                new_due = st.text_input("Due date (YYYY-MM-DD)", value=r.due_date)
                new_description = st.text_area("Description", value=r.description or "", height=80)
                new_periods = _periods_input(f"edit_{r.id}", r.notification_periods)
                if st.form_submit_button("Save") and new_periods is not None:
                    _run(
                        lambda: store.update_reminder(
                            r.id, new_title.strip() or r.title, new_description.strip() or None,
                            new_due.strip(), new_periods,
                        ),
                        "Reminder updated.",
                    )
            col_toggle, col_delete = st.columns(2)
            toggle_label = "Mark open" if r.is_completed else "Mark done"
            if col_toggle.button(toggle_label, key=f"toggle_reminder_{r.id}"):
                _run(lambda: store.toggle_reminder(r.id))
            if col_delete.button("Delete", key=f"delete_reminder_{r.id}"):
                _run(lambda: store.delete_reminder(r.id), "Reminder deleted.")

    col_clear_done, col_clear = st.columns(2)
    if col_clear_done.button("Clear completed reminders"):
        _run(store.clear_completed_reminders, "Completed reminders cleared.")
    if col_clear.button("Clear all reminders"):

        @st.dialog("Clear all reminders?")
        def _confirm_clear_reminders() -> None:
            st.write("This will remove every reminder.")
            if st.button("Clear reminders", type="primary"):
                _run(store.clear_reminders, "Reminders cleared.")

        _confirm_clear_reminders()


def render_progress(store: StudyStore) -> None:
    st.header("Progress")

    days = st.slider("Window (days)", 7, 90, 14, 7)
    today = date.today()
    by_day = minutes_by_day(store.sessions, today - timedelta(days=days - 1), num_days=days)
    df = pd.DataFrame(
        {"Date": list(by_day.keys()), "Minutes": list(by_day.values())}
    ).set_index("Date")
    st.bar_chart(df)
    st.metric(f"Last {days} days (m)", f"{store.get_last_n_days_minutes(days):.0f}")

    st.subheader("By description")
    by_label = minutes_by_description(store.sessions)
    if not by_label:
        st.info("No study sessions yet.")
        return
    label_df = pd.DataFrame(
        [{"Description": k, "Minutes": round(v, 1)} for k, v in by_label.items()]
    ).sort_values(by="Minutes", ascending=False)
    st.dataframe(label_df, hide_index=True, use_container_width=True)


def render_data(store: StudyStore) -> None:
    st.header("Data")
    st.caption(f"Stored at {store.path}")

    st.subheader("Import reminders (.ics)")
    uploaded = st.file_uploader("Upload .ics file", type=["ics"], key="ics_upload")
    parsed = []
    if uploaded:
        try:
            parsed = parse_ics_bytes(uploaded.read())
        except Exception as e:
            st.error(f"Could not read ICS file: {e}")
        else:
            if not parsed:
                st.warning("No events found in this file.")
    if parsed:
        st.dataframe(
            [
                {
                    "Title": p.title,
                    "Due": p.due_date,
                    "Alerts": ", ".join(x.label for x in p.notification_periods),
                }
                for p in parsed
            ],
            use_container_width=True,
        )
        if st.button("Import as reminders", type="primary"):

            def _import() -> None:
                for p in parsed:
                    store.add_reminder(p.title, p.description, p.due_date, p.notification_periods)

            _run(_import, f"Imported {len(parsed)} reminders.")

    st.divider()
    st.subheader("Exports")
    ics_bytes, ics_warnings = reminders_to_ics(store.reminders)
    st.download_button(
        "Download reminders (ICS)",
        data=ics_bytes,
        file_name="study_reminders.ics",
        mime="text/calendar",
    )
    if ics_warnings:
        st.warning(" | ".join(ics_warnings))

    today = date.today()
    pdf_bytes = study_report_to_pdf(store.sessions, store.todos, store.reminders, today)
    st.download_button(
        "Download report (PDF)",
        data=pdf_bytes,
        file_name=f"study_report_{today.isoformat()}.pdf",
        mime="application/pdf",
    )


store = _ensure_session_state()

st.title("Study Timer")
st.caption("Local study log with todos and due-date reminders.")
_flush_toast()

if store is None:
    st.stop()

with st.sidebar:
    st.header("Navigate")
    pages = ["Log", "Todos", "Reminders", "Progress", "Data"]
    page = st.radio("Page", pages, key="nav_page", label_visibility="collapsed")
    open_alerts = len(due_alerts(store.reminders, date.today()))
    if open_alerts:
        st.caption(f"{open_alerts} reminder alert(s) today.")

if page == "Log":
    render_log(store)
elif page == "Todos":
    render_todos(store)
elif page == "Reminders":
    render_reminders(store)
elif page == "Progress":
    render_progress(store)
elif page == "Data":
    render_data(store)
