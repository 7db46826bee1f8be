"""Application shell: session state, view switching and theme handling.

The shell owns five pieces of session state (view, user profile, current
decision, alert, theme) stored in a mutable mapping, normally
``st.session_state``. Screens never touch that state directly; they get
callbacks bound to the transition methods below.
"""
import functools
from typing import Any, Callable, Dict, Mapping, MutableMapping, Optional

from .logs import get_logger
from .storage import DEFAULT_THEME, Storage

LOADING = "loading"
ONBOARDING = "onboarding"
HOME = "home"
NEW_DECISION = "new-decision"
ANALYSIS = "analysis"
RESULT = "result"
HISTORY = "history"
SETTINGS = "settings"

VIEWS = (LOADING, ONBOARDING, HOME, NEW_DECISION, ANALYSIS, RESULT, HISTORY, SETTINGS)

ALERT_TYPES = ("info", "success", "warning", "error")

DARK_THEME_CSS = """
<style>
.stApp, [data-testid="stHeader"] { background-color: #0f172a; color: #e2e8f0; }
[data-testid="stSidebar"] { background-color: #1e293b; }
.stApp h1, .stApp h2, .stApp h3, .stApp h4, .stApp p, .stApp label, .stApp li { color: #e2e8f0; }
</style>
"""

logger = get_logger("shell")


class AppShell:
    KEY_VIEW = "view"
    KEY_PROFILE = "user_profile"
    KEY_DECISION = "current_decision"
    KEY_ALERT = "alert"
    KEY_THEME = "theme"
    KEY_HYDRATED = "_shell_hydrated"
    KEY_APPLIED_THEME = "_shell_applied_theme"

    def __init__(self, state: MutableMapping[str, Any], storage: Storage):
        self.state = state
        self.storage = storage
        state.setdefault(self.KEY_VIEW, LOADING)
        state.setdefault(self.KEY_PROFILE, None)
        state.setdefault(self.KEY_DECISION, None)
        state.setdefault(self.KEY_ALERT, None)
        state.setdefault(self.KEY_THEME, DEFAULT_THEME)

    # read-only views of the state
    @property
    def view(self) -> str:
        return self.state[self.KEY_VIEW]

    @property
    def user_profile(self) -> Optional[Dict]:
        return self.state[self.KEY_PROFILE]

    @property
    def current_decision(self) -> Optional[Dict]:
        return self.state[self.KEY_DECISION]

    @property
    def alert(self) -> Optional[Dict[str, str]]:
        return self.state[self.KEY_ALERT]

    @property
    def theme(self) -> str:
        return self.state[self.KEY_THEME]

    @property
    def hydrated(self) -> bool:
        return bool(self.state.get(self.KEY_HYDRATED))

    # startup
    def hydrate(self) -> None:
        """Load the persisted profile and theme once per session."""
        if self.hydrated:
            return
        profile = self.storage.get_profile()
        if profile:
            self.state[self.KEY_PROFILE] = profile
            self.state[self.KEY_VIEW] = HOME
        else:
            self.state[self.KEY_VIEW] = ONBOARDING
        self.state[self.KEY_THEME] = self.storage.get_theme()
        self.state[self.KEY_HYDRATED] = True
        logger.info("session hydrated: view=%s theme=%s", self.view, self.theme)

    def apply_theme(self) -> str:
        """Persist the theme when it changed and return its stylesheet.

        Safe to call on every script run: nothing is written unless the theme
        differs from the last one applied in this session.
        """
        theme = self.theme
        if self.state.get(self.KEY_APPLIED_THEME) != theme:
            self.storage.save_theme(theme)
            self.state[self.KEY_APPLIED_THEME] = theme
            logger.debug("theme applied: %s", theme)
        return theme_css(theme)

    # transitions
    def navigate(self, view: str) -> None:
        # unknown views are stored as-is and corrected by resolve_view()
        self.state[self.KEY_VIEW] = view

    def resolve_view(self) -> str:
        view = self.view
        return view if view in VIEWS else HOME

    def complete_onboarding(self, profile: Dict) -> None:
        self.storage.save_profile(profile)
        self.state[self.KEY_PROFILE] = profile
        self.state[self.KEY_VIEW] = HOME

    def submit_decision(self, data: Dict) -> None:
        self.state[self.KEY_DECISION] = data
        self.state[self.KEY_VIEW] = RESULT

    def leave_result(self) -> None:
        self.state[self.KEY_VIEW] = HOME

    def save_result(self) -> None:
        # the result screen persists the decision before calling this
        self.state[self.KEY_VIEW] = HOME

    def toggle_theme(self) -> None:
        self.state[self.KEY_THEME] = "dark" if self.theme == "light" else "light"

    def raise_alert(self, message: str, type: str = "info") -> None:
        if type not in ALERT_TYPES:
            type = "info"
        self.state[self.KEY_ALERT] = {"message": str(message), "type": type}

    def report_error(self, message: str) -> None:
        self.raise_alert(message, "error")

    def dismiss_alert(self) -> None:
        self.state[self.KEY_ALERT] = None

    # routing
    def route(self, screens: Mapping[str, Callable[..., Any]]) -> Callable[[], Any]:
        """Return the screen for the current view, bound to its props."""
        view = self.view
        go_home = functools.partial(self.navigate, HOME)

        if view == LOADING:
            return screens[LOADING]
        if view == ONBOARDING:
            return functools.partial(screens[ONBOARDING], on_complete=self.complete_onboarding)
        if view == HOME:
            return self._home(screens)
        if view == NEW_DECISION:
            return functools.partial(
                screens[NEW_DECISION],
                on_back=go_home,
                on_analyze=self.submit_decision,
                user_profile=self.user_profile,
                on_error=self.report_error,
            )
        if view == RESULT:
            return functools.partial(
                screens[RESULT],
                decision_data=self.current_decision,
                on_back=self.leave_result,
                on_save=self.save_result,
                user_profile=self.user_profile,
            )
        if view == HISTORY:
            return functools.partial(screens[HISTORY], on_back=go_home, on_navigate=self.navigate)
        if view == SETTINGS:
            return functools.partial(
                screens[SETTINGS],
                on_back=go_home,
                theme=self.theme,
                on_toggle_theme=self.toggle_theme,
            )
        # "analysis" has no screen of its own; it and unknown views land on home
        return self._home(screens)

    def _home(self, screens: Mapping[str, Callable[..., Any]]) -> Callable[[], Any]:
        return functools.partial(screens[HOME], user_profile=self.user_profile, on_navigate=self.navigate)


def theme_css(theme: str) -> str:
    return DARK_THEME_CSS if theme == "dark" else ""
