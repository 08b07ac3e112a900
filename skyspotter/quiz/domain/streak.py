from dataclasses import dataclass
from datetime import date

from skyspotter.config import GameConfig
from skyspotter.quiz.domain.models import Badge, UserStats


@dataclass(frozen=True)
class StreakUpdate:
    stats: UserStats
    new_badges: list[Badge]


def next_streak(current: int, last_played: date | None, today: date) -> int:
    """
    Streak after completing a quiz on `today`.

    Rules:
        - never played: 1
        - already played today: unchanged (at least 1)
        - played yesterday: +1
        - anything else (gap, or a last date in the future): reset, then
          today's play counts, so 1
    """
    if last_played is None:
        return 1

    delta = (today - last_played).days
    if delta == 0:
        return max(current, 1)
    if delta == 1:
        return current + 1
    return 1


def award_badges(stats: UserStats, today: date) -> list[Badge]:
    """Every milestone reached and not yet held. Several can be crossed at once."""
    return [
        Badge(milestone_value=milestone, date_earned=today)
        for milestone in GameConfig.STREAK_MILESTONES
        if stats.current_streak >= milestone and not stats.has_badge(milestone)
    ]


def apply_completion(previous: UserStats, today: date) -> StreakUpdate:
    """
    Pure function run once per completed quiz.
    Returns a new record; `previous` is not modified.
    """
    stats = previous.model_copy(deep=True)

    stats.current_streak = next_streak(
        previous.current_streak, previous.last_played_date, today
    )
    stats.longest_streak = max(stats.longest_streak, stats.current_streak)
    stats.last_played_date = today

    new_badges = award_badges(stats, today)
    stats.badges.extend(new_badges)

    return StreakUpdate(stats=stats, new_badges=new_badges)
