import html
import os
import threading

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from resultgen.config import (
    DEFAULT_EXCEL_NAME,
    DEFAULT_JSON_NAME,
    DEFAULT_OUTPUT_CSV,
    FAIL_GRADE,
    MAX_MARK,
    MIN_MARK,
    OUTPUT_FOLDER,
    PASS_MARK,
)
from resultgen.export import save_excel, save_json, to_excel_bytes, to_json
from resultgen.ingestion.codec import FormatError, encode, format_average
from resultgen.pipeline import run_pipeline
from resultgen.report import grade_distribution, to_dataframe
from resultgen.scoring.engine import ComputationError
from resultgen.utils import default_worker_count

# --- Page Configuration ---
st.set_page_config(
    page_title="Student Result Generator",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#FF6B6B",       # Coral red - primary accent
    "success": "#10B981",       # Green - passed
    "danger": "#EF4444",        # Red - failed
    "info": "#3B82F6",          # Blue - informational
    "chart_palette": [
        "#10B981", "#3B82F6", "#8B5CF6", "#06B6D4", "#F59E0B",
        "#F97316", "#EF4444",
    ],
}

# --- Leaderboard Flourishes ---
RANK_ICONS = {
    1: {"icon": "👑", "color": "#FFD700", "label": "Topper"},
    2: {"icon": "🥈", "color": "#C0C0C0", "label": "Runner-up"},
    3: {"icon": "🥉", "color": "#CD7F32", "label": "Third Place"},
}

SAMPLE_CSV = """ID,Name,Math,Science,English,History,Geography
S1,John Doe,85,78,92,66,81
S2,Jane Smith,90,88,84,91,77
S3,"Lee, Ann",35,70,65,80,72
S4,Ravi Kumar,90,88,84,91,77
"""


def get_rank_badge_html(rank):
    """Generate HTML for a rank badge with icon and styling."""
    rank = int(rank)
    if rank not in RANK_ICONS:
        return f'<span style="font-weight:600;">#{rank}</span>'

    info = RANK_ICONS[rank]
    badge_style = f'display:inline-flex;align-items:center;gap:0.3rem;font-weight:700;color:{info["color"]};'
    return f'<span style="{badge_style}"><span style="font-size:1.2rem;">{info["icon"]}</span>#{rank}</span>'


def generate_podium_cards(ranked):
    """HTML cards for every entry holding rank 1-3 (ties all shown)."""
    cards = []
    for entry in ranked:
        if entry.rank > 3:
            break
        name = html.escape(entry.record.name or entry.record.record_id)
        record_id = html.escape(entry.record.record_id)
        cards.append(
            '<div style="padding:0.75rem 1rem;border-radius:12px;'
            'border:1px solid rgba(128,128,128,0.3);min-width:180px;">'
            f'{get_rank_badge_html(entry.rank)}'
            f'<div style="font-size:1.1rem;font-weight:700;margin-top:0.25rem;">{name}</div>'
            f'<div style="opacity:0.7;font-size:0.8rem;">{record_id}</div>'
            f'<div style="margin-top:0.25rem;">Total {entry.total} · Avg {format_average(entry.average)} · {entry.grade}</div>'
            '</div>'
        )
    return f'<div style="display:flex;flex-wrap:wrap;gap:0.75rem;">{"".join(cards)}</div>'


def apply_plotly_style(fig):
    """Apply consistent styling to Plotly figures.

    Text colors are not set so Streamlit can inject theme-aware colors.
    """
    system_font = '-apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif'
    grid_color = "rgba(128, 128, 128, 0.4)"
    line_color = "rgba(128, 128, 128, 0.3)"

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(family=system_font, size=14),
        xaxis=dict(gridcolor=grid_color, linecolor=line_color, showgrid=False, zeroline=False),
        yaxis=dict(gridcolor=grid_color, linecolor=line_color, showgrid=True, zeroline=False),
        legend=dict(title_text="", bgcolor="rgba(0,0,0,0)", borderwidth=0),
        hoverlabel=dict(bgcolor="rgba(50, 50, 50, 0.9)", font=dict(color="#FFFFFF", family=system_font)),
        margin=dict(l=10, r=10, t=40, b=10),
        dragmode=False,  # Disable pan/zoom to prevent scroll hijacking on mobile
    )
    return fig


def build_totals_chart(df):
    """Bar chart of totals per student, colored by pass/fail status."""
    fig = px.bar(
        df,
        x="ID",
        y="Total",
        color="Status",
        hover_data=["Name", "Average", "Grade", "Rank"],
        color_discrete_map={"PASS": ACCENT_COLORS["success"], "FAIL": ACCENT_COLORS["danger"]},
        title="Totals by student",
    )
    return apply_plotly_style(fig)


def build_grade_chart(ranked):
    """Bar chart of how many students landed in each grade."""
    counts = grade_distribution(ranked)
    colors = [
        ACCENT_COLORS["danger"] if grade == FAIL_GRADE else ACCENT_COLORS["chart_palette"][i % 7]
        for i, grade in enumerate(counts)
    ]
    fig = go.Figure(go.Bar(x=list(counts.keys()), y=list(counts.values()), marker_color=colors))
    fig.update_layout(title="Grade distribution")
    return apply_plotly_style(fig)


def render_system_info():
    """Processor and thread counts for the running server."""
    st.caption(f"Processors: {os.cpu_count() or 1}")
    st.caption(f"Active threads: {threading.active_count()}")


# --- Main App ---
def main():
    st.title("🎓 Student Result Generator")
    st.caption("Totals, averages, grades and ranks computed in parallel")

    # --- Sidebar ---
    with st.sidebar:
        st.header("⚙️ Settings")
        pass_threshold = st.slider(
            "Pass mark per subject", min_value=MIN_MARK, max_value=MAX_MARK, value=PASS_MARK
        )
        threads = st.number_input(
            "Worker threads", min_value=1, max_value=256, value=default_worker_count(), step=1
        )
        st.divider()
        st.header("🖥️ System")
        render_system_info()

    # --- Input ---
    uploaded = st.file_uploader("Upload roster CSV", type=["csv", "txt"])
    if uploaded is not None:
        csv_text = uploaded.getvalue().decode("utf-8", errors="replace")
        with st.expander("Uploaded CSV", expanded=False):
            st.code(csv_text, language=None)
    else:
        csv_text = st.text_area("Or paste CSV data", value=SAMPLE_CSV, height=200)

    # Results live in session state so the save buttons below survive reruns
    if st.button("Generate results", type="primary"):
        st.session_state.pop("result", None)
        if not csv_text.strip():
            st.error("No CSV provided")
            return
        try:
            st.session_state["result"] = run_pipeline(csv_text, pass_threshold, int(threads))
        except FormatError as e:
            st.error(f"Error processing CSV: {e}")
            return
        except ComputationError as e:
            st.error(f"Scoring failed: {e}")
            return
        except ValueError as e:
            st.error(f"Input error: {e}")
            return

    result = st.session_state.get("result")
    if result is None:
        return

    ranked = result['ranked']
    subjects = result['subjects']
    summary = result['summary']

    if result['warnings']:
        with st.expander(f"⚠️ {len(result['warnings'])} value(s) were corrected", expanded=False):
            for warning in result['warnings']:
                st.write(f"- {warning}")

    # --- Summary ---
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Students", summary.total_records)
    col2.metric("Passed", summary.passed)
    col3.metric("Failed", summary.failed)
    col4.metric("Mean total", summary.statistics.get('mean', 0))

    if not ranked:
        st.info("No student rows found.")
        return

    st.markdown(generate_podium_cards(ranked), unsafe_allow_html=True)

    # --- Results Table ---
    st.subheader("Results")
    df = to_dataframe(ranked, subjects)
    st.dataframe(
        df,
        hide_index=True,
        use_container_width=True,
        column_config={"Average": st.column_config.NumberColumn(format="%.2f")},
    )

    chart_col1, chart_col2 = st.columns(2)
    with chart_col1:
        st.plotly_chart(build_totals_chart(df), use_container_width=True)
    with chart_col2:
        st.plotly_chart(build_grade_chart(ranked), use_container_width=True)

    # --- Downloads ---
    st.subheader("Export")
    dl1, dl2, dl3 = st.columns(3)
    dl1.download_button("⬇️ CSV", encode(ranked, subjects), file_name=DEFAULT_OUTPUT_CSV, mime="text/csv")
    dl2.download_button("⬇️ JSON", to_json(ranked, subjects), file_name=DEFAULT_JSON_NAME, mime="application/json")
    dl3.download_button(
        "⬇️ Excel",
        to_excel_bytes(ranked, subjects),
        file_name=DEFAULT_EXCEL_NAME,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    save_col1, save_col2 = st.columns(2)
    if save_col1.button(f"Save JSON to {OUTPUT_FOLDER.name}/"):
        try:
            st.success(f"Results saved successfully: {save_json(ranked, subjects)}")
        except OSError as e:
            st.error(f"Could not save JSON: {e}")
    if save_col2.button(f"Save Excel to {OUTPUT_FOLDER.name}/"):
        try:
            st.success(f"Workbook saved: {save_excel(ranked, subjects)}")
        except OSError as e:
            st.error(f"Could not save Excel: {e}")


if __name__ == "__main__":
    main()
