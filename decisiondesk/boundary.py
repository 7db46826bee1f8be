"""Render-failure containment for the Streamlit script tree."""
import functools
from typing import Any, Callable, Dict, MutableMapping, Optional

from .errors import report_exception
from .logs import get_logger

HEALTHY = "healthy"
FAILED = "failed"

logger = get_logger("boundary")


class ErrorBoundary:
    """Catch exceptions raised while rendering a subtree.

    Once a failure is captured the boundary stays failed for the rest of the
    session: the children are never rendered again and only the fallback is
    shown. ``reset()`` is the reload path; it wipes the whole session state
    so the next script run starts from scratch.

    Exceptions raised inside widget callbacks are not seen here because
    Streamlit runs callbacks before the script; wrap those with
    ``safe_callback``.
    """

    def __init__(
        self,
        state: MutableMapping[str, Any],
        key: str = "_error_boundary",
        environment: str = "production",
        log_dir: Optional[str] = None,
    ):
        self.state = state
        self.key = key
        self.environment = environment
        self.log_dir = log_dir

    @property
    def status(self) -> str:
        return FAILED if self.state.get(self.key) else HEALTHY

    @property
    def failed(self) -> bool:
        return self.status == FAILED

    @property
    def failure(self) -> Optional[Dict[str, str]]:
        return self.state.get(self.key)

    def capture(self, exc: Exception, where: str = "render") -> Dict[str, str]:
        tb = report_exception(exc, where=f"ErrorBoundary caught an error in {where}",
                              environment=self.environment, log_dir=self.log_dir)
        failure = {
            "error": str(exc),
            "error_type": type(exc).__name__,
            "traceback": tb,
            "where": where,
        }
        self.state[self.key] = failure
        return failure

    def render(
        self,
        children: Callable[[], Any],
        fallback: Callable[[Dict[str, str]], Any],
        container: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """Render ``children`` or, after a failure, only ``fallback``.

        ``container`` is a placeholder factory such as ``st.empty``. When given,
        the children draw inside the placeholder and it is emptied on failure,
        so nothing the crashed subtree drew stays on the page next to the
        fallback.
        """
        if self.failed:
            return fallback(self.failure)
        slot = container() if container is not None else None
        try:
            if slot is None:
                return children()
            with slot.container():
                return children()
        except Exception as exc:
            failure = self.capture(exc, where=getattr(children, "__name__", "render"))
        if slot is not None:
            slot.empty()
        return fallback(failure)

    def reset(self) -> None:
        logger.info("reloading app after failure")
        self.state.clear()


def safe_callback(
    handler: Callable[..., Any],
    *,
    label: str,
    on_error: Optional[Callable[[str], Any]] = None,
) -> Callable[..., Any]:
    """Wrap a widget callback so a failure is logged and surfaced as an alert.

    Without this an exception in ``on_click``/``on_change`` would bypass the
    ErrorBoundary entirely.
    """

    @functools.wraps(handler)
    def _wrapped(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except Exception as exc:
            logger.exception("Unhandled exception in %s", label)
            if on_error is not None:
                on_error(f"{label} failed: {exc}")
            return None

    return _wrapped
