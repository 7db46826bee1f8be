import streamlit as st

# Must be first Streamlit call
st.set_page_config(page_title="DecisionDesk", layout="wide")

from decisiondesk.boundary import ErrorBoundary
from decisiondesk.config import load_config
from decisiondesk.errors import report_exception
from decisiondesk.logs import configure_logging, get_logger
from decisiondesk.pages import (
    page_decision_form,
    page_history,
    page_home,
    page_loading,
    page_onboarding,
    page_result,
    page_settings,
    render_alert,
    render_layout,
)
from decisiondesk.shell import (
    HISTORY,
    HOME,
    LOADING,
    NEW_DECISION,
    ONBOARDING,
    RESULT,
    SETTINGS,
    AppShell,
)
from decisiondesk.storage import Storage

SCREENS = {
    LOADING: page_loading,
    ONBOARDING: page_onboarding,
    HOME: page_home,
    NEW_DECISION: page_decision_form,
    RESULT: page_result,
    HISTORY: page_history,
    SETTINGS: page_settings,
}

config = load_config()
configure_logging(config.log_dir, config.log_level)
logger = get_logger("app")

# ----------------------------
# Styling
# ----------------------------
st.markdown(
    """
<style>
.block-container { padding-top: 1.1rem; padding-bottom: 2rem; }
div[data-testid="stSidebar"] { padding-top: 1rem; }
h1, h2, h3 { letter-spacing: -0.02em; }
</style>
""",
    unsafe_allow_html=True,
)


# ----------------------------
# Boundary fallback
# ----------------------------
def render_crash(failure: dict, boundary: ErrorBoundary):
    st.markdown("## Something went wrong")
    st.write("We encountered an unexpected error.")
    st.button("Reload App", key="boundary_reload", type="primary", on_click=boundary.reset)
    with st.expander("Technical details", expanded=False):
        st.code(failure.get("error") or failure.get("error_type", ""), language=None)


# ----------------------------
# Main app shell
# ----------------------------
def render_app():
    shell = AppShell(st.session_state, Storage(config.data_dir))
    try:
        shell.hydrate()
        css = shell.apply_theme()
        screen = shell.route(SCREENS)
    except Exception as exc:
        report_exception(exc, where="App component error",
                         environment=config.environment, log_dir=config.log_dir)
        st.error(f"Critical Error: {exc}")
        return

    if css:
        st.markdown(css, unsafe_allow_html=True)

    def body():
        alert = shell.alert
        if alert:
            render_alert(alert["message"], alert["type"], on_close=shell.dismiss_alert)
        screen()

    # screen failures propagate to the ErrorBoundary
    render_layout(shell.resolve_view(), shell.navigate, body)


def main():
    boundary = ErrorBoundary(st.session_state, environment=config.environment, log_dir=config.log_dir)
    boundary.render(
        render_app,
        fallback=lambda failure: render_crash(failure, boundary),
        container=st.empty,
    )


main()
