import streamlit as st

from metronome.core.config import get_settings
from metronome.core.errors import MetronomeError
from metronome.core.logging_setup import setup_logging
from metronome.db.session import get_engine, init_db, session_scope
from metronome.services import lifecycle, query
from metronome.services.formatting import EMPTY, format_timestamp
from metronome.services.timefilter import TimeFilter

settings = get_settings()
setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
init_db(get_engine())

st.set_page_config(page_title=settings.APP_NAME, layout="centered")
st.title(settings.APP_NAME)

tab_start, tab_active, tab_end, tab_totals = st.tabs(["Start", "Active Tasks", "End", "Totals"])

with tab_start:
    st.subheader("Start a new task.")
    name = st.text_input("Task Name", key="task_name")
    category = st.text_input("Category (Optional)", key="task_category")
    if st.button("Start Task", key="start_task"):
        try:
            with session_scope() as session:
                res = lifecycle.start_task(session, name, category or None)
            st.success(f'Task "{res.name}" started at {format_timestamp(res.start_time)}!')
        except MetronomeError as e:
            st.error(str(e))

with tab_end:
    st.subheader("End tasks")
    if st.button("End last task", key="end_last"):
        try:
            with session_scope() as session:
                res = lifecycle.end_last(session)
            st.success(f'Task "{res.name}" ended after {res.duration}')
        except MetronomeError as e:
            st.warning(str(e))
    if st.button("End all active tasks", key="end_all"):
        with session_scope() as session:
            res_all = lifecycle.end_all_active(session)
        st.success(f"Ended {res_all.count} active tasks.")

with tab_active:
    with session_scope() as session:
        active = query.list_active(session)
    st.metric("Active tasks", active.count)
    if active.tasks:
        st.dataframe(
            [
                {"ID": t.id, "Task": t.name, "Category": t.category, "Started": format_timestamp(t.start_time)}
                for t in active.tasks
            ],
        )
    else:
        st.info("No active tasks.")

with tab_totals:
    selected = st.selectbox(
        "Time range",
        options=list(TimeFilter),
        format_func=lambda f: f.value.capitalize(),
        index=list(TimeFilter).index(TimeFilter.ALL),
        key="totals_filter",
    )
    only_category = st.text_input("Category (Optional)", key="totals_category")
    with session_scope() as session:
        totals = query.sum_by_category(session, selected, only_category or None)
    st.caption(totals.window.label)
    if totals.totals:
        st.dataframe(
            [{"Category": t.category, "Total Time": str(t.duration)} for t in totals.totals],
        )
    else:
        st.write(EMPTY)
