import logging
import sys
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from prometheus_client import REGISTRY, Counter, Histogram

# --- Context for Correlation IDs ---
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="system")

# --- Prometheus Metric Definitions ---
DURATION_METRIC = "skyspotter_method_duration_seconds"
EVENTS_METRIC = "skyspotter_quiz_events"

METHOD_DURATION: Histogram
QUIZ_EVENTS: Counter


def _get_or_create(factory: Callable[[], Any], name: str) -> Any:
    # Streamlit re-executes modules on reload; the registry rejects duplicates.
    try:
        return factory()
    except ValueError:
        return REGISTRY._names_to_collectors[name]


METHOD_DURATION = cast(
    Histogram,
    _get_or_create(
        lambda: Histogram(
            DURATION_METRIC, "Time spent in method", ["component", "method"]
        ),
        DURATION_METRIC,
    ),
)
QUIZ_EVENTS = cast(
    Counter,
    _get_or_create(
        lambda: Counter(EVENTS_METRIC, "Quiz lifecycle events", ["event"]),
        EVENTS_METRIC,
    ),
)

# --- Type Definitions for Decorator ---
P = ParamSpec("P")
R = TypeVar("R")


def measure_time(metric_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator for timing instance methods.
    Observes the Prometheus histogram and logs through `self.telemetry` if present.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            self_obj: Any = args[0] if args else None
            component = self_obj.__class__.__name__ if self_obj else "Unknown"
            telemetry = getattr(self_obj, "telemetry", None)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.perf_counter() - start
                METHOD_DURATION.labels(
                    component=component, method=func.__name__
                ).observe(duration)
                if telemetry:
                    telemetry.log_error(
                        f"Failed: {metric_name}",
                        e,
                        duration_ms=round(duration * 1000, 2),
                    )
                raise

            duration = time.perf_counter() - start
            METHOD_DURATION.labels(component=component, method=func.__name__).observe(
                duration
            )
            if telemetry:
                telemetry.log_debug(metric_name, duration_ms=round(duration * 1000, 2))
            return result

        return wrapper

    return decorator


def record_event(event: str) -> None:
    QUIZ_EVENTS.labels(event=event).inc()


class Telemetry:
    """
    Facade for Logs and Metrics.
    One instance per component; safe to keep in Streamlit session state.
    """

    def __init__(self, component_name: str) -> None:
        self.component = component_name
        self.logger: logging.Logger
        self._setup_logger()

    def _setup_logger(self) -> None:
        self.logger = logging.getLogger(f"skyspotter.{self.component}")

        root = logging.getLogger("skyspotter")
        if not root.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            root.addHandler(handler)
            root.setLevel(logging.INFO)

    def __getstate__(self) -> dict[str, Any]:
        """Pickling: loggers hold locks, drop it and rebuild on restore."""
        state = self.__dict__.copy()
        state.pop("logger", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._setup_logger()

    @staticmethod
    def start_trace() -> str:
        c_id = str(uuid.uuid4())[:8]
        correlation_id_ctx.set(c_id)
        return c_id

    @staticmethod
    def get_trace_id() -> str:
        return correlation_id_ctx.get()

    def _format(self, event: str, fields: dict[str, Any]) -> str:
        msg = f"[{self.get_trace_id()}] {event}"
        if fields:
            msg += f" | {fields}"
        return msg

    def log_debug(self, event: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(event, kwargs))

    def log_info(self, event: str, **kwargs: Any) -> None:
        self.logger.info(self._format(event, kwargs))

    def log_warning(self, event: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(event, kwargs))

    def log_error(self, event: str, error: Exception, **kwargs: Any) -> None:
        msg = self._format(f"{event} | Error: {error}", kwargs)
        self.logger.error(msg, exc_info=error)
