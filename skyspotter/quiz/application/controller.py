from collections.abc import Callable
from datetime import date

from skyspotter.config import GameConfig
from skyspotter.errors import SessionContractError
from skyspotter.fsm import SessionAction, SessionState, SessionStateMachine
from skyspotter.quiz.adapters.question_repository import QuestionRepository
from skyspotter.quiz.application.progress_store import ProgressStore
from skyspotter.quiz.domain.models import (
    AnswerFeedback,
    Badge,
    Category,
    Difficulty,
    QuizSession,
    SessionResult,
    UserStats,
)
from skyspotter.quiz.domain.ports import (
    IAdService,
    IEntitlementService,
    ILeaderboardService,
)
from skyspotter.quiz.domain.session_builder import SessionBuilder
from skyspotter.shared.telemetry import Telemetry, measure_time, record_event


class SessionController:
    """
    Drives one quiz at a time: NOT_STARTED -> in progress -> COMPLETED.

    Completion commits stats and submits leaderboards exactly once.
    Whether results wait for an interstitial is exposed through
    `defer_results` and never blocks the COMPLETED transition.
    """

    def __init__(
        self,
        questions: QuestionRepository,
        progress: ProgressStore,
        ads: IAdService,
        entitlements: IEntitlementService,
        leaderboard: ILeaderboardService,
        builder: SessionBuilder | None = None,
        strict: bool = GameConfig.STRICT_CONTRACTS,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.questions = questions
        self.progress = progress
        self.ads = ads
        self.entitlements = entitlements
        self.leaderboard = leaderboard
        self.builder = builder or SessionBuilder()
        self.strict = strict
        self.clock = clock
        self.telemetry = Telemetry("SessionController")

        self.fsm = SessionStateMachine()
        self.session: QuizSession | None = None
        self.correct_count = 0
        self.feedback: AnswerFeedback | None = None
        self.awarded: list[int] = []
        self.result: SessionResult | None = None
        self.final_stats: UserStats | None = None
        self.new_badges: list[Badge] = []
        self.defer_results = False

    # --- Properties ---
    @property
    def state(self) -> SessionState:
        return self.fsm.current_state

    @property
    def has_answered(self) -> bool:
        return self.state == SessionState.ANSWERED

    @property
    def results_ready(self) -> bool:
        return self.state == SessionState.COMPLETED and not self.defer_results

    # --- Contract checks ---
    def _violation(self, action: SessionAction, reason: str) -> None:
        error = SessionContractError(action.name, self.state.name, reason)
        record_event("contract_violation")
        if self.strict:
            raise error
        self.telemetry.log_error("Contract violation ignored", error)

    # --- Actions ---
    @measure_time("start_session")
    def start(
        self,
        category: Category,
        difficulty: Difficulty,
        count: int = GameConfig.QUESTIONS_PER_QUIZ,
    ) -> QuizSession:
        Telemetry.start_trace()
        if self.state.in_progress:
            self.telemetry.log_info("Discarding unfinished session")

        pool = self.questions.load()
        self.session = self.builder.build(pool, category, difficulty, count)
        self.correct_count = 0
        self.feedback = None
        self.awarded = []
        self.result = None
        self.final_stats = None
        self.new_badges = []
        self.defer_results = False

        self.fsm.transition(SessionAction.START)
        record_event("started")
        self._preload_ad()
        self.telemetry.log_info(
            "Quiz Started",
            category=category.value,
            difficulty=difficulty.value,
            questions=self.session.total_questions,
        )
        return self.session

    def answer(self, choice: str) -> AnswerFeedback | None:
        if self.session is None or not self.fsm.can(SessionAction.ANSWER):
            reason = (
                "question already answered"
                if self.state == SessionState.ANSWERED
                else "no question awaiting an answer"
            )
            self._violation(SessionAction.ANSWER, reason)
            return None

        question = self.session.current_question
        if question is None:
            self._violation(SessionAction.ANSWER, "session has no current question")
            return None

        is_correct = question.is_correct(choice)
        points = self.session.difficulty.base_points if is_correct else 0
        if is_correct:
            self.correct_count += 1
            self.session.add_points(points)

        self.awarded.append(points)
        self.feedback = AnswerFeedback(
            selected=choice,
            correct_answer=question.correct_answer,
            is_correct=is_correct,
            points_awarded=points,
            explanation=question.explanation,
        )
        self.fsm.transition(SessionAction.ANSWER)

        self.telemetry.log_info(
            "Answer Graded",
            q_id=question.id,
            index=self.session.current_index,
            correct=is_correct,
            points=points,
        )
        return self.feedback

    def advance(self) -> SessionState:
        if self.session is None or self.state != SessionState.ANSWERED:
            self._violation(SessionAction.NEXT_QUESTION, "current question not answered")
            return self.state

        self.feedback = None
        if self.session.advance_index():
            self.fsm.transition(SessionAction.NEXT_QUESTION)
        else:
            self.fsm.transition(SessionAction.FINISH)
            self._complete()
        return self.state

    def abandon(self) -> None:
        """Drops the running session. Nothing is committed."""
        if not self.state.in_progress:
            return
        self.fsm.transition(SessionAction.ABANDON)
        self.telemetry.log_info("Quiz Abandoned")
        record_event("abandoned")
        self.session = None
        self.feedback = None

    # --- Completion ---
    def _complete(self) -> None:
        if self.session is None:
            return

        self.result = SessionResult(
            score=self.session.score,
            questions_answered=self.session.total_questions,
            correct_answers=self.correct_count,
        )
        self.final_stats = self.progress.commit(self.result, today=self.clock())
        self.new_badges = list(self.progress.last_new_badges)
        record_event("completed")

        self._submit_leaderboards(self.final_stats)
        self.defer_results = self._should_show_ad()

        self.telemetry.log_info(
            "Quiz Completed",
            score=self.result.score,
            correct=self.result.correct_answers,
            accuracy=round(self.result.accuracy, 1),
            defer_results=self.defer_results,
        )

    def _submit_leaderboards(self, stats: UserStats) -> None:
        submissions = (
            (stats.total_score, GameConfig.LEADERBOARD_TOTAL_SCORE),
            (stats.current_streak, GameConfig.LEADERBOARD_STREAK),
        )
        for value, board_id in submissions:
            try:
                self.leaderboard.submit_score(value, board_id)
            except Exception as e:
                # SDK failures must not touch the committed session
                self.telemetry.log_error("Leaderboard submit failed", e, board=board_id)

    def _preload_ad(self) -> None:
        if self.entitlements.has_active_entitlement():
            return
        try:
            self.ads.load_ad()
        except Exception as e:
            self.telemetry.log_error("Ad preload failed", e)

    def _should_show_ad(self) -> bool:
        if self.entitlements.has_active_entitlement():
            return False
        try:
            return self.ads.can_show_ad()
        except Exception as e:
            self.telemetry.log_error("Ad availability check failed", e)
            return False

    def reveal_results(self) -> None:
        """Ad dismissal callback. Safe to call more than once."""
        if self.state != SessionState.COMPLETED:
            return
        self.defer_results = False
