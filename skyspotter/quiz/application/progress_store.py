from datetime import date

from skyspotter.errors import PersistenceError
from skyspotter.quiz.domain.models import Badge, SessionResult, UserStats
from skyspotter.quiz.domain.ports import IProgressRepository
from skyspotter.quiz.domain.streak import apply_completion
from skyspotter.shared.telemetry import Telemetry, measure_time


class ProgressStore:
    """
    Owns the single UserStats record.
    Read once and cached; every change rewrites the whole record.
    If a write fails the cached copy stays the source of truth for this run.
    """

    def __init__(self, repo: IProgressRepository) -> None:
        self.repo = repo
        self.telemetry = Telemetry("ProgressStore")
        self._stats: UserStats | None = None
        self.last_new_badges: list[Badge] = []
        self.persist_failed = False

    def load(self) -> UserStats:
        if self._stats is None:
            self._stats = self._read()
        return self._stats

    def _read(self) -> UserStats:
        try:
            stored = self.repo.load_stats()
        except PersistenceError as e:
            self.telemetry.log_error("Loading stats failed, starting fresh", e)
            return UserStats()
        return stored if stored is not None else UserStats()

    def _persist(self, stats: UserStats) -> bool:
        try:
            self.repo.save_stats(stats)
        except PersistenceError as e:
            self.persist_failed = True
            self.telemetry.log_error("Saving stats failed", e)
            return False
        self.persist_failed = False
        return True

    @measure_time("commit_session")
    def commit(self, result: SessionResult, today: date | None = None) -> UserStats:
        today = today or date.today()
        current = self.load()

        totals = current.model_copy(
            update={
                "total_score": current.total_score + result.score,
                "questions_answered": current.questions_answered
                + result.questions_answered,
                "correct_answers": current.correct_answers + result.correct_answers,
            }
        )
        update = apply_completion(totals, today)

        self._stats = update.stats
        self.last_new_badges = update.new_badges
        self._persist(update.stats)

        self.telemetry.log_info(
            "Session Committed",
            score=result.score,
            total_score=update.stats.total_score,
            streak=update.stats.current_streak,
            new_badges=[b.milestone_value for b in update.new_badges],
        )
        return update.stats

    def set_entitlement(self, active: bool) -> UserStats:
        stats = self.load()
        if stats.has_active_entitlement != active:
            stats = stats.model_copy(update={"has_active_entitlement": active})
            self._stats = stats
            self._persist(stats)
        return stats

    def reset(self) -> UserStats:
        """Wipes progress. The entitlement survives, it was paid for."""
        entitled = self.load().has_active_entitlement
        self._stats = UserStats(has_active_entitlement=entitled)
        self.last_new_badges = []
        self._persist(self._stats)
        self.telemetry.log_info("Progress Reset")
        return self._stats
