import functools
import os
from typing import Callable, Dict, Optional

import pandas as pd
import streamlit as st

from .boundary import safe_callback
from .config import load_config
from .decisions import RISK_TOLERANCES, build_decision, build_profile
from .errors import InvalidInputError
from .logs import get_logger
from .pdf_report import write_pdf_report
from .scoring import ENGINE_VERSION
from .shell import HISTORY, HOME, LOADING, NEW_DECISION, ONBOARDING, SETTINGS
from .storage import Storage
from .templates import OUTCOME_GO, OUTCOME_REVIEW, TEMPLATES

FOLLOW_UP_OUTCOMES = ["Not recorded yet", "Success", "Partial Success", "Failure"]

NAV_ITEMS = [
    (HOME, "🏠 Home"),
    (NEW_DECISION, "➕ New decision"),
    (HISTORY, "🗂️ History"),
    (SETTINGS, "⚙️ Settings"),
]

logger = get_logger("pages")


def _storage() -> Storage:
    return Storage(load_config().data_dir)


# ----------------------------
# Helpers
# ----------------------------
def badge(text: str, tone: str = "neutral"):
    tones = {
        "neutral": ("#111827", "#E5E7EB"),
        "good": ("#065F46", "#D1FAE5"),
        "warn": ("#92400E", "#FEF3C7"),
        "bad": ("#7F1D1D", "#FEE2E2"),
        "info": ("#1E3A8A", "#DBEAFE"),
    }
    fg, bg = tones.get(tone, tones["neutral"])
    st.markdown(
        f"""
        <span style="
            display:inline-block;
            padding:0.25rem 0.55rem;
            border-radius:999px;
            font-size:0.80rem;
            font-weight:600;
            color:{fg};
            background:{bg};
            border:1px solid rgba(0,0,0,0.06);
        ">{text}</span>
        """,
        unsafe_allow_html=True,
    )


def outcome_tone(outcome: str) -> str:
    if outcome == OUTCOME_GO:
        return "good"
    if outcome == OUTCOME_REVIEW:
        return "warn"
    return "bad"


def section_title(title: str, subtitle: str = ""):
    st.markdown(f"### {title}")
    if subtitle:
        st.caption(subtitle)


def render_explainability(explanation: dict):
    st.subheader("Why this outcome")
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Weakest dimensions**")
        for item in explanation.get("lowest_dimensions", []):
            st.write(f"- {item.get('dimension')}: {item.get('score')}")
        st.markdown("**Biggest drags (weighted)**")
        for item in explanation.get("top_negative_contributors", []):
            st.write(f"- {item.get('dimension')}: {item.get('weighted')}")

    with col2:
        st.markdown("**Strongest dimensions**")
        for item in explanation.get("highest_dimensions", []):
            st.write(f"- {item.get('dimension')}: {item.get('score')}")
        st.markdown("**Biggest drivers (weighted)**")
        for item in explanation.get("top_positive_contributors", []):
            st.write(f"- {item.get('dimension')}: {item.get('weighted')}")


def render_playbook(playbook: dict, key_prefix: str):
    if not playbook:
        st.info("No playbook available.")
        return

    st.subheader("Next steps")
    st.write(playbook.get("summary", ""))

    flags = playbook.get("flags", [])
    if flags:
        st.warning("⚠️ Watch out")
        for f in flags:
            st.write(f"- {f}")

    for a in playbook.get("actions", [])[:3]:
        st.markdown(f"**{a.get('dimension')}** (score: {a.get('score')})")
        for step in a.get("recommended_actions", []):
            st.write(f"- {step}")

    st.markdown("**Checklist**")
    for i, item in enumerate(playbook.get("checklist", [])):
        st.checkbox(item, value=False, key=f"{key_prefix}_chk_{i}")


def scenario_frame(record: dict) -> pd.DataFrame:
    results = (record.get("scenario_stress_test") or {}).get("results") or {}
    rows = []
    for name in ["best", "expected", "worst"]:
        rr = results.get(name, {})
        rows.append(
            {"Scenario": name.title(), "Score": rr.get("score"), "Outcome": rr.get("outcome"),
             "Confidence": rr.get("confidence")}
        )
    return pd.DataFrame(rows)


def history_frame(rows: list) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Title": r.get("title", "Untitled"),
                "Template": r.get("template_name", ""),
                "Outcome": r.get("outcome", ""),
                "Score": r.get("final_score"),
                "Follow-up": (r.get("follow_up") or {}).get("outcome", "—"),
                "Saved (UTC)": r.get("saved_at_utc") or r.get("timestamp_utc", ""),
            }
            for r in rows
        ],
        columns=["Title", "Template", "Outcome", "Score", "Follow-up", "Saved (UTC)"],
    )


# ----------------------------
# Layout + alert
# ----------------------------
def render_layout(current_view: str, on_navigate: Callable[[str], None], body: Callable[[], None]):
    body()
    # sidebar goes last: a screen that raises never leaves navigation behind
    if current_view not in (LOADING, ONBOARDING):
        with st.sidebar:
            st.markdown("## DecisionDesk")
            st.caption(f"Engine {ENGINE_VERSION}")
            for view, label in NAV_ITEMS:
                st.button(
                    label,
                    key=f"nav_{view}",
                    disabled=(view == current_view),
                    on_click=on_navigate,
                    args=(view,),
                )


def render_alert(message: str, type: str, on_close: Callable[[], None]):
    show = {
        "error": st.error,
        "warning": st.warning,
        "success": st.success,
    }.get(type, st.info)
    col_msg, col_btn = st.columns([0.85, 0.15], vertical_alignment="center")
    with col_msg:
        show(message)
    with col_btn:
        st.button("Dismiss", key="alert_dismiss", on_click=on_close)


# ----------------------------
# Pages
# ----------------------------
def page_loading():
    st.markdown("### ⏳ Loading…")


def page_onboarding(on_complete: Callable[[Dict], None]):
    st.title("Welcome to DecisionDesk")
    st.caption("Structured, explainable decisions. Tell us a little about you to get started.")

    def _submit():
        try:
            profile = build_profile(
                st.session_state.get("ob_name", ""),
                st.session_state.get("ob_role", ""),
                st.session_state.get("ob_focus", ""),
                st.session_state.get("ob_risk", "Medium"),
            )
        except InvalidInputError as exc:
            st.session_state["ob_error"] = str(exc)
            return
        st.session_state["ob_error"] = None
        on_complete(profile)

    with st.form("onboarding_form", border=True):
        st.text_input("Your name", key="ob_name")
        st.text_input("Role (optional)", key="ob_role", placeholder="e.g., Founder, Engineer, Student")
        st.text_input("What decisions do you want help with? (optional)", key="ob_focus")
        st.select_slider(
            "Risk tolerance",
            options=RISK_TOLERANCES,
            value="Medium",
            key="ob_risk",
            help="Cautious users need a higher score before a GO; bold users accept a lower one.",
        )
        st.form_submit_button("Get started", on_click=_submit)

    if st.session_state.get("ob_error"):
        st.warning(st.session_state["ob_error"])


def page_home(user_profile: Optional[Dict], on_navigate: Callable[[str], None]):
    name = (user_profile or {}).get("name") or "there"
    st.title(f"Hi {name} 👋")
    st.caption("Explainable • Auditable decisions, scored the same way every time.")

    rows = _storage().list_decisions(limit=load_config().history_limit)
    c1, c2 = st.columns(2)
    c1.metric("Saved decisions", len(rows))
    c2.metric("Risk tolerance", (user_profile or {}).get("risk_tolerance", "Medium"))

    st.divider()
    b1, b2, b3 = st.columns(3)
    with b1:
        st.button("➕ New decision", key="home_new", on_click=on_navigate, args=(NEW_DECISION,))
    with b2:
        st.button("🗂️ History", key="home_history", on_click=on_navigate, args=(HISTORY,))
    with b3:
        st.button("⚙️ Settings", key="home_settings", on_click=on_navigate, args=(SETTINGS,))

    if rows:
        st.markdown("#### Latest")
        last = rows[-1]
        badge(last.get("outcome", "—"), outcome_tone(last.get("outcome")))
        st.write(f"**{last.get('title', 'Untitled')}** • {last.get('final_score')} / 10")


def page_decision_form(
    on_back: Callable[[], None],
    on_analyze: Callable[[Dict], None],
    user_profile: Optional[Dict],
    on_error: Callable[[str], None],
):
    st.title("New decision")
    st.caption("Define it, score it, then analyze. Nothing is saved until you save the result.")

    template_id = st.selectbox(
        "Template",
        options=list(TEMPLATES.keys()),
        format_func=lambda k: f"{TEMPLATES[k].template_name} — {TEMPLATES[k].question}",
        key="df_template",
    )
    template = TEMPLATES[template_id]

    tabs = st.tabs(["1) Define", "2) Score", "3) Assumptions & risks", "4) Stress test"])

    with tabs[0]:
        section_title("Define the decision")
        st.text_input("Decision title", key="df_title", placeholder="e.g., Should I accept the offer from Acme?")
        st.text_area("Context (why now, constraints, what success looks like)", key="df_context")

    with tabs[1]:
        section_title("Score the dimensions", "0–10, 10 = best. Score risk-type dimensions lower when the risk is higher.")
        for dim in template.dimensions:
            st.slider(
                f"{dim} (weight {int(template.weights[dim] * 100)}%)",
                min_value=0.0,
                max_value=10.0,
                value=5.0,
                step=0.5,
                key=f"df_score_{template_id}_{dim}",
            )

    with tabs[2]:
        section_title("Assumptions & risks", "One per line.")
        st.text_area("Assumptions", key="df_assumptions")
        st.text_area("Risks / unknowns", key="df_risks")

    with tabs[3]:
        section_title("Scenario stress test", "How much could the score move in the best / worst case?")
        s1, s2, s3 = st.columns(3)
        with s1:
            st.number_input("Best-case delta (+)", value=1.0, step=0.5, key="df_best")
        with s2:
            st.number_input("Expected delta", value=0.0, step=0.5, key="df_expected")
        with s3:
            st.number_input("Worst-case delta (-)", value=-2.0, step=0.5, key="df_worst")

    def _analyze():
        ss = st.session_state
        chosen = ss.get("df_template", template_id)
        dims = TEMPLATES[chosen].dimensions if chosen in TEMPLATES else []
        scores = {dim: ss.get(f"df_score_{chosen}_{dim}", 5.0) for dim in dims}
        try:
            record = build_decision(
                chosen,
                ss.get("df_title", ""),
                context=ss.get("df_context", ""),
                scores=scores,
                assumptions_text=ss.get("df_assumptions", ""),
                risks_text=ss.get("df_risks", ""),
                best_delta=ss.get("df_best", 1.0),
                expected_delta=ss.get("df_expected", 0.0),
                worst_delta=ss.get("df_worst", -2.0),
                profile=user_profile,
            )
        except InvalidInputError as exc:
            on_error(str(exc))
            return
        on_analyze(record)

    st.divider()
    c1, c2 = st.columns(2)
    with c1:
        st.button("← Back", key="df_back", on_click=on_back)
    with c2:
        st.button(
            "Analyze decision",
            key="df_analyze",
            type="primary",
            on_click=safe_callback(_analyze, label="Analyze decision", on_error=on_error),
        )


def page_result(
    decision_data: Optional[Dict],
    on_back: Callable[[], None],
    on_save: Callable[[], None],
    user_profile: Optional[Dict],
):
    if not decision_data:
        st.info("There is no decision to show yet. Create one first.")
        st.button("← Back", key="res_back_empty", on_click=on_back)
        return

    r = decision_data
    st.title(r.get("title", "Untitled"))
    st.caption(f"{r.get('template_name', '')} • risk tolerance: {r.get('risk_tolerance', 'Medium')}")

    c1, c2, c3 = st.columns(3)
    with c1:
        badge(r.get("outcome", "—"), outcome_tone(r.get("outcome")))
    c2.metric("Final score", f"{r.get('final_score')} / 10")
    c3.metric("Confidence", r.get("confidence", "—"))

    if user_profile and user_profile.get("name"):
        st.caption(f"Prepared for {user_profile['name']}.")

    if r.get("context"):
        st.write(r["context"])

    st.divider()
    render_explainability(r.get("explanation") or {})
    st.divider()
    render_playbook(r.get("playbook") or {}, key_prefix=f"{r.get('decision_id', 'current')}_res")

    st.divider()
    st.subheader("Scenario stress test")
    df_s = scenario_frame(r)
    st.dataframe(df_s, hide_index=True)
    st.metric("Scenario spread (Best - Worst)", (r.get("scenario_stress_test") or {}).get("spread", "—"))
    st.bar_chart(df_s[["Scenario", "Score"]].set_index("Scenario"))

    def _save():
        _storage().save_decision(r)
        on_save()

    st.divider()
    show_message("res_error", st.error)
    b1, b2 = st.columns(2)
    with b1:
        st.button("← Back", key="res_back", on_click=on_back)
    with b2:
        st.button(
            "💾 Save to history",
            key="res_save",
            type="primary",
            on_click=safe_callback(_save, label="Save to history", on_error=set_message("res_error")),
        )


def set_message(key: str) -> Callable[[str], None]:
    """Callback error sink for screens without an ``on_error`` prop."""

    def _set(message: str):
        st.session_state[key] = message

    return _set


def show_message(key: str, show: Callable[[str], object] = st.caption):
    msg = st.session_state.pop(key, None)
    if msg:
        show(msg)


def _generate_pdf(record: dict, path: str, decision_id: str):
    write_pdf_report(path, record)
    logger.info("pdf report written to %s", path)
    st.session_state[f"pdf_path_{decision_id}"] = path


def _save_follow_up(storage: Storage, decision_id: str):
    outcome = st.session_state.get(f"fu_outcome_{decision_id}", FOLLOW_UP_OUTCOMES[0])
    notes = (st.session_state.get(f"fu_notes_{decision_id}", "") or "").strip()
    if outcome == FOLLOW_UP_OUTCOMES[0]:
        st.session_state[f"fu_msg_{decision_id}"] = "Please select Success / Partial Success / Failure."
        return
    ok = storage.update_follow_up(decision_id, outcome, notes)
    st.session_state[f"fu_msg_{decision_id}"] = "Follow-up saved." if ok else "Could not find this decision in history."


def page_history(on_back: Callable[[], None], on_navigate: Callable[[str], None]):
    st.title("Decision history")
    cfg = load_config()
    storage = Storage(cfg.data_dir)
    reports_dir = cfg.reports_dir
    rows = list(reversed(storage.list_decisions(limit=cfg.history_limit)))
    st.caption(f"Records found: {len(rows)}")

    t1, t2 = st.columns(2)
    with t1:
        st.button("← Back", key="hist_back", on_click=on_back)
    with t2:
        st.button("➕ New decision", key="hist_new", on_click=on_navigate, args=(NEW_DECISION,))

    if not rows:
        st.info("No saved decisions yet. Analyze a decision and save the result to see it here.")
        return

    st.dataframe(history_frame(rows), hide_index=True)
    st.divider()

    for i, r in enumerate(rows[:30]):
        decision_id = r.get("decision_id") or f"legacy_{i}"
        with st.expander(f"{r.get('title', 'Untitled')} • {r.get('outcome', '')} • {r.get('timestamp_utc', '')}"):
            st.write("**Template:**", r.get("template_name", "—"))
            st.write("**Final score:**", r.get("final_score"))
            st.write("**Confidence:**", r.get("confidence"))
            st.write("**Scores:**", r.get("scores", {}))
            if r.get("context"):
                st.write("**Context:**", r["context"])
            if r.get("assumptions"):
                st.write("**Assumptions:**")
                for a in r["assumptions"]:
                    st.write("•", a)
            if r.get("risks"):
                st.write("**Risks:**")
                for x in r["risks"]:
                    st.write("•", x)

            exp = r.get("explanation")
            if exp:
                render_explainability(exp)

            st.markdown("---")
            st.subheader("Follow-up (what actually happened?)")
            existing = r.get("follow_up")
            if existing:
                st.info(f"Recorded: {existing.get('outcome')} • {existing.get('updated_at_utc')}\n\n"
                        f"Notes: {existing.get('notes', '')}")
            st.selectbox("Outcome", FOLLOW_UP_OUTCOMES, key=f"fu_outcome_{decision_id}")
            st.text_area("Notes (what happened + why)", key=f"fu_notes_{decision_id}")
            st.button(
                "Save follow-up",
                key=f"fu_save_{decision_id}",
                on_click=safe_callback(
                    functools.partial(_save_follow_up, storage, decision_id),
                    label="Save follow-up",
                    on_error=set_message(f"fu_msg_{decision_id}"),
                ),
            )
            show_message(f"fu_msg_{decision_id}")

            st.markdown("---")
            show_message(f"hist_error_{decision_id}", st.error)
            c1, c2 = st.columns(2)
            with c1:
                pdf_path = st.session_state.get(f"pdf_path_{decision_id}")
                if pdf_path and os.path.exists(pdf_path):
                    with open(pdf_path, "rb") as f:
                        st.download_button(
                            "Download PDF report",
                            data=f.read(),
                            file_name=f"DecisionDesk_{decision_id}.pdf",
                            mime="application/pdf",
                            key=f"pdf_{decision_id}",
                        )
                else:
                    st.button(
                        "Generate PDF report",
                        key=f"pdf_gen_{decision_id}",
                        on_click=safe_callback(
                            _generate_pdf,
                            label="PDF report",
                            on_error=set_message(f"hist_error_{decision_id}"),
                        ),
                        args=(r, os.path.join(reports_dir, f"{decision_id}.pdf"), decision_id),
                    )
            with c2:
                if r.get("decision_id"):
                    st.button(
                        "🗑️ Delete",
                        key=f"del_{decision_id}",
                        on_click=safe_callback(
                            functools.partial(storage.delete_decision, decision_id),
                            label="Delete",
                            on_error=set_message(f"hist_error_{decision_id}"),
                        ),
                    )
                else:
                    st.caption("Saved without an id; edit the history file to remove it.")

    st.caption(f"History is saved locally in {storage.history_path}")


def page_settings(on_back: Callable[[], None], theme: str, on_toggle_theme: Callable[[], None]):
    st.title("Settings")

    section_title("Appearance")
    st.write(f"Current theme: **{theme}**")
    st.button(
        "🌙 Switch to dark" if theme == "light" else "☀️ Switch to light",
        key="settings_toggle_theme",
        on_click=on_toggle_theme,
    )

    section_title("Data")
    cfg = load_config()
    st.write("Data directory:", cfg.data_dir)
    st.caption(f"Environment: {cfg.environment}")

    st.divider()
    st.button("← Back", key="settings_back", on_click=on_back)
