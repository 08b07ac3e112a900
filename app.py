import os
import logging
import streamlit as st

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource

# --- OTel Logging Imports ---
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

# --- Prometheus Import ---
from prometheus_client import start_http_server

# --- Application Imports ---
from skyspotter.config import GameConfig
from skyspotter.quiz.adapters.db_manager import DatabaseManager
from skyspotter.quiz.adapters.platform_services import (
    FrequencyCappedAdService,
    LoggingLeaderboardService,
    StoredEntitlementService,
)
from skyspotter.quiz.adapters.question_repository import QuestionRepository
from skyspotter.quiz.adapters.sqlite_repository import SQLiteProgressRepository
from skyspotter.quiz.application.controller import SessionController
from skyspotter.quiz.application.progress_store import ProgressStore
from skyspotter.quiz.presentation.state_provider import StreamlitStateProvider
from skyspotter.quiz.presentation.viewmodel import QuizViewModel, Screen
from skyspotter.quiz.presentation.views import (
    components,
    home_view,
    quiz_view,
    results_view,
    stats_view,
)


# --- 1. Configure Observability ---
def configure_observability():
    """
    Sends Traces and Logs via OTLP when the endpoint is configured,
    and exposes Prometheus metrics on :8000.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if not endpoint or not headers:
        logging.warning("OTEL env vars not set. Telemetry stays local.")
        return

    resource = Resource.create({"service.name": "skyspotter"})

    # --- A. TRACING ---
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
    )
    trace.set_tracer_provider(trace_provider)

    # --- B. LOGGING ---
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
    )
    set_logger_provider(logger_provider)
    handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    logging.getLogger().addHandler(handler)

    # --- C. METRICS ---
    try:
        start_http_server(8000)
        logging.info("Prometheus metrics server started on port 8000")
    except OSError:
        logging.warning("Prometheus port 8000 already in use (Streamlit reload). Skipping.")


# --- 2. Bootstrap ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
    configure_observability()
    st.session_state.observability_configured = True


# --- 3. Dependency Injection (Composition Root) ---
@st.cache_resource
def get_progress_repo():
    return SQLiteProgressRepository(DatabaseManager(GameConfig.DB_PATH))


@st.cache_resource
def get_question_repo():
    repo = QuestionRepository(store=get_progress_repo())
    repo.load()
    repo.cache_questions()
    return repo


@st.cache_resource
def get_progress_store():
    return ProgressStore(get_progress_repo())


def get_view_model(state: StreamlitStateProvider) -> QuizViewModel:
    progress = get_progress_store()
    controller = state.get("controller")
    if controller is None:
        controller = SessionController(
            questions=get_question_repo(),
            progress=progress,
            ads=FrequencyCappedAdService(),
            entitlements=StoredEntitlementService(
                lambda: progress.load().has_active_entitlement
            ),
            leaderboard=LoggingLeaderboardService(),
            strict=False,
        )
        state.set("controller", controller)
    return QuizViewModel(controller, progress, state)


ROUTES = {
    Screen.HOME: home_view.render_home,
    Screen.DIFFICULTY: home_view.render_difficulty,
    Screen.QUIZ: quiz_view.render_quiz,
    Screen.AD_BREAK: results_view.render_ad_break,
    Screen.RESULTS: results_view.render_results,
    Screen.STATS: stats_view.render_stats,
    Screen.SETTINGS: stats_view.render_settings,
}


def main():
    st.set_page_config(page_title=GameConfig.APP_TITLE, page_icon="✈️", layout="centered")
    components.apply_styles()

    vm = get_view_model(StreamlitStateProvider())
    ROUTES[vm.screen](vm)


if __name__ == "__main__":
    main()
