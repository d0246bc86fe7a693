# Role: Streamlit chat UI.
# - Backend is authoritative (chat + snapshot).
# - Sidebar shows the trip summary (all ten slots), question progress and the dialogue phase.

from __future__ import annotations

# Add project root to sys.path so `ui.helpers` imports when run via `streamlit run ui/streamlit_app.py`
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import uuid  # noqa: E402
from typing import Any, Dict, Optional  # noqa: E402

import requests  # noqa: E402
import streamlit as st  # noqa: E402

from ui.helpers import (  # noqa: E402
    BACKEND_URL,
    answered_progress,
    build_trip_summary,
    fetch_snapshot,
    phase_label,
    reset_session,
    send_to_backend,
)


# ----------------------------
# Session helpers
# ----------------------------
_SESSION_DEFAULTS = {"messages": list, "busy": lambda: False, "snapshot": lambda: None}


def ensure_session() -> None:
    st.session_state.setdefault("session_id", str(uuid.uuid4()))
    for key, factory in _SESSION_DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = factory()


# ----------------------------
# UI polish
# ----------------------------
def inject_css() -> None:
    st.markdown(
        """
<style>
.block-container { max-width: 1200px; padding-top: 2rem; padding-bottom: 2rem; }
section[data-testid="stSidebar"] .block-container { padding-top: 1.25rem; }
.stButton>button { border-radius: 12px !important; font-weight: 650 !important; }

.ta-card {
  border: 1px solid rgba(49, 51, 63, 0.14);
  border-radius: 16px;
  padding: 14px;
}
.ta-title { font-size: 0.95rem; font-weight: 750; opacity: 0.9; margin-bottom: 10px; }
.ta-row {
  display: flex;
  align-items: baseline;
  gap: 10px;
  padding: 8px 10px;
  border: 1px solid rgba(49, 51, 63, 0.10);
  border-radius: 14px;
  margin-bottom: 8px;
}
.ta-icon { width: 22px; flex: 0 0 22px; }
.ta-col { display: flex; flex-direction: column; }
.ta-k { font-size: 0.80rem; opacity: 0.72; }
.ta-v { font-size: 0.98rem; font-weight: 700; line-height: 1.15; }

</style>
""",
        unsafe_allow_html=True,
    )


def _row(icon: str, label: str, value: str) -> str:
    return f"""
<div class="ta-row">
  <div class="ta-icon">{icon}</div>
  <div class="ta-col">
    <div class="ta-k">{label}</div>
    <div class="ta-v">{value}</div>
  </div>
</div>
"""


# ----------------------------
# Sidebar
# ----------------------------
def render_trip_summary(snapshot: Dict[str, Any]) -> None:
    rows = "".join(_row(icon, label, value) for icon, label, value in build_trip_summary(snapshot))
    st.sidebar.markdown(
        f'<div class="ta-card"><div class="ta-title">Trip summary</div>{rows}</div>',
        unsafe_allow_html=True,
    )


def render_sidebar() -> None:
    st.sidebar.title("Your trip")

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("📝 New trip", use_container_width=True, disabled=st.session_state["busy"]):
            reset_session(st.session_state["session_id"])
            st.session_state["session_id"] = str(uuid.uuid4())
            st.session_state["messages"] = []
            st.session_state["snapshot"] = None
            st.rerun()

    with col2:
        if st.button("↻ Refresh", use_container_width=True, disabled=st.session_state["busy"]):
            st.session_state["snapshot"] = fetch_snapshot(st.session_state["session_id"])
            st.rerun()

    st.sidebar.divider()

    snap = st.session_state.get("snapshot")
    if not snap:
        st.sidebar.info("Start chatting to build your trip summary.")
        return

    done, total = answered_progress(snap)
    st.sidebar.caption(phase_label(snap.get("phase")))
    if total:
        st.sidebar.progress(done / total, text=f"{done} of {total} details answered")

    render_trip_summary(snap)


# ----------------------------
# Chat
# ----------------------------
def render_message(content: str) -> None:
    # Generated itineraries are line-oriented plain text.
    if "Running total:" in content:
        st.text(content)
    else:
        st.write(content)


def render_chat() -> None:
    for msg in st.session_state["messages"]:
        with st.chat_message(msg["role"]):
            render_message(msg["content"])


def quick_reply() -> Optional[str]:
    # Yes/no shortcuts only while the backend waits on the confirmation question.
    snap = st.session_state.get("snapshot") or {}
    if snap.get("phase") != "confirming":
        return None

    yes_col, no_col, _ = st.columns([1, 1, 4])
    if yes_col.button("✅ Yes, plan it", disabled=st.session_state["busy"]):
        return "yes"
    if no_col.button("✏️ Change something", disabled=st.session_state["busy"]):
        return "no, I want to change something"
    return None


def run_turn(user_input: str) -> None:
    # 1) Echo user message
    # 2) One /chat round trip
    # 3) Refresh the snapshot so the sidebar follows the backend
    st.session_state["messages"].append({"role": "user", "content": user_input})
    with st.chat_message("user"):
        st.write(user_input)

    st.session_state["busy"] = True
    try:
        with st.spinner("Thinking..."):
            reply = send_to_backend(st.session_state["session_id"], user_input)
        assistant_text = reply["assistant_message"]

        st.session_state["messages"].append({"role": "assistant", "content": assistant_text})
        with st.chat_message("assistant"):
            render_message(assistant_text)

        st.session_state["snapshot"] = fetch_snapshot(st.session_state["session_id"])

    except requests.RequestException:
        msg = f"I couldn't reach the backend. Make sure the API is running on {BACKEND_URL}."
        st.session_state["messages"].append({"role": "assistant", "content": msg})
        with st.chat_message("assistant"):
            st.error(msg)
    finally:
        st.session_state["busy"] = False


# ----------------------------
# Main
# ----------------------------
def main() -> None:
    st.set_page_config(page_title="Trip Planner", page_icon="📍", layout="wide")
    inject_css()

    st.title("📍 Trip Planner")
    st.caption("Answer a few questions and I'll put together a day-by-day itinerary within your budget.")

    ensure_session()
    render_sidebar()
    render_chat()

    typed = st.chat_input("Tell me about your trip…", disabled=st.session_state["busy"])
    user_input = typed or quick_reply()
    if user_input:
        run_turn(user_input)
        if not typed:
            # Button clicks render above the chat history; rerun to put them back in order.
            st.rerun()


if __name__ == "__main__":
    main()
