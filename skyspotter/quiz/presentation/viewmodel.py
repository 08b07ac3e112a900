from enum import Enum, auto

from skyspotter.fsm import SessionState
from skyspotter.quiz.application.controller import SessionController
from skyspotter.quiz.application.progress_store import ProgressStore
from skyspotter.quiz.domain.models import (
    AnswerFeedback,
    Category,
    Difficulty,
    QuizSession,
    UserStats,
)
from skyspotter.quiz.presentation.state_provider import IStateProvider
from skyspotter.shared.telemetry import Telemetry


class Screen(Enum):
    HOME = auto()
    DIFFICULTY = auto()
    QUIZ = auto()
    AD_BREAK = auto()
    RESULTS = auto()
    STATS = auto()
    SETTINGS = auto()


class QuizViewModel:
    """
    Navigation + presentation sequencing on top of the SessionController.
    The quiz screens are derived from the controller state; the menu
    screens are stored in the state provider.
    """

    def __init__(
        self,
        controller: SessionController,
        progress: ProgressStore,
        state_provider: IStateProvider,
    ) -> None:
        self.controller = controller
        self.progress = progress
        self.state = state_provider
        self.telemetry = Telemetry("ViewModel")
        self.state.setdefault("screen", Screen.HOME)

    # --- Properties ---
    @property
    def screen(self) -> Screen:
        if self.state.get("screen") == Screen.QUIZ:
            if self.controller.state == SessionState.COMPLETED:
                return Screen.RESULTS if self.controller.results_ready else Screen.AD_BREAK
            if not self.controller.state.in_progress:
                return Screen.HOME
        return self.state.get("screen", Screen.HOME)

    @property
    def selected_category(self) -> Category | None:
        return self.state.get("category")

    @property
    def stats(self) -> UserStats:
        return self.progress.load()

    @property
    def session(self) -> QuizSession | None:
        return self.controller.session

    @property
    def feedback(self) -> AnswerFeedback | None:
        return self.controller.feedback

    @property
    def is_last_question(self) -> bool:
        s = self.session
        return s is not None and s.current_index == s.total_questions - 1

    # --- Navigation ---
    def choose_category(self, category: Category) -> None:
        self.state.set("category", category)
        self.state.set("screen", Screen.DIFFICULTY)

    def go_home(self) -> None:
        self.controller.abandon()
        self.state.pop("category")
        self.state.set("screen", Screen.HOME)

    def show_stats(self) -> None:
        self.state.set("screen", Screen.STATS)

    def show_settings(self) -> None:
        self.state.set("screen", Screen.SETTINGS)

    # --- Quiz Actions ---
    def start_quiz(self, difficulty: Difficulty) -> None:
        category = self.selected_category or Category.MIXED
        self.controller.start(category, difficulty)
        self.state.set("screen", Screen.QUIZ)

    def select_answer(self, option: str) -> None:
        # Double taps on a rerun must not count twice
        if self.controller.has_answered:
            return
        self.controller.answer(option)

    def next_question(self) -> None:
        if not self.controller.has_answered:
            return
        self.controller.advance()

    def finish_ad_break(self) -> None:
        Telemetry.start_trace()
        self.controller.ads.show_ad(on_dismissed=self.controller.reveal_results)

    # --- Settings ---
    def set_entitlement(self, active: bool) -> None:
        self.progress.set_entitlement(active)
        self.telemetry.log_info("Entitlement Changed", active=active)

    def reset_progress(self) -> None:
        self.progress.reset()
