"""
Streamlit Frontend for Ecusson

The app process: record what you spend today with one tap and see
today, the last 28 days and the year so far.

DESIGN PRINCIPLES:
1. One tap per action
2. Totals always recomputed from the shared ledger
3. Import/export failures shown as a plain, dismissible message
4. Nothing else is ever surfaced (unreadable ledger = empty ledger)
"""

from typing import MutableMapping, Optional

import streamlit as st

from ecusson.codec import EmptyHistoryError, HistoryTransferError
from ecusson.config import get_settings
from ecusson.orchestrator import SpendTracker, create_app_components
from ecusson.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Ecusson",
    page_icon="⭐",
    layout="centered",
    initial_sidebar_state="collapsed",
)

HELP_TEXT = (
    "Tap **+1** to add €1, **−1** to remove €1, **+10** to add €10.\n\n"
    "You can also export and import your data in .md format from the sidebar."
)

IMPORT_NOTICE_KEY = "import_notice"


@st.cache_resource
def get_tracker() -> SpendTracker:
    """Get or create the app components (cached), registering the daily reminder."""
    tracker = create_app_components()
    tracker.launch()
    return tracker


def format_amount(value: int) -> str:
    return f"{value} €"


def render_totals(tracker: SpendTracker) -> None:
    summary = tracker.summary()

    st.metric("⭐ Today", format_amount(summary.today))
    st.divider()
    st.metric(f"Last {summary.trailing_days} Days", format_amount(summary.trailing))
    st.divider()
    st.metric("Since January 1", format_amount(summary.year_to_date))


def render_controls(tracker: SpendTracker) -> None:
    amounts = get_settings().ledger.quick_amounts_list
    columns = st.columns(len(amounts))
    for column, amount in zip(columns, amounts):
        label = f"{amount:+d}".replace("-", "−")
        if column.button(label, key=f"amount_{amount}", use_container_width=True):
            try:
                tracker.add_amount(amount)
            except StorageError as e:
                st.error(f"Could not save: {e}")
                return
            st.rerun()


def export_data(tracker: SpendTracker) -> Optional[bytes]:
    """History file content, or None when there is nothing to export."""
    try:
        return tracker.export_text().encode("utf-8")
    except EmptyHistoryError:
        return None


def import_upload(
    tracker: SpendTracker,
    data: bytes,
    source: Optional[str],
    state: MutableMapping,
) -> int:
    """Merge an uploaded history file and keep the count for the next run."""
    count = tracker.import_bytes(data, source=source)
    state[IMPORT_NOTICE_KEY] = count
    return count


def render_settings(tracker: SpendTracker) -> None:
    st.sidebar.title("Settings")

    count = st.session_state.pop(IMPORT_NOTICE_KEY, None)
    if count is not None:
        st.sidebar.success(f"Imported {count} day(s).")

    # Export
    data = export_data(tracker)
    if data is None:
        st.sidebar.caption("No history data to export.")
    else:
        st.sidebar.download_button(
            "Export markdown",
            data=data,
            file_name=get_settings().app.export_filename,
            mime="text/plain",
            use_container_width=True,
        )

    # Import
    uploaded = st.sidebar.file_uploader(
        "Import markdown",
        type=["md", "txt", "csv"],
        accept_multiple_files=False,
    )
    if uploaded is not None and st.sidebar.button("Import", use_container_width=True):
        try:
            import_upload(tracker, uploaded.getvalue(), uploaded.name, st.session_state)
        except (HistoryTransferError, StorageError) as e:
            st.sidebar.error(f"Import error: {e}")
        else:
            # Totals above were rendered before the import
            st.rerun()

    st.sidebar.markdown("---")
    with st.sidebar.expander("How to use the app"):
        st.markdown(HELP_TEXT)


def main():
    """Main application entry point."""
    tracker = get_tracker()

    render_totals(tracker)
    st.markdown("---")
    render_controls(tracker)
    render_settings(tracker)


if __name__ == "__main__":
    main()
