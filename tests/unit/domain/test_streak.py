from datetime import date, timedelta

import pytest

from skyspotter.quiz.domain.models import Badge, UserStats
from skyspotter.quiz.domain.streak import apply_completion, award_badges, next_streak


def _badges(*milestones, earned=date(2024, 1, 1)):
    return [Badge(milestone_value=m, date_earned=earned) for m in milestones]


class TestNextStreak:
    def test_first_play_starts_at_one(self, today):
        assert next_streak(0, None, today) == 1

    def test_played_yesterday_increments(self, today):
        assert next_streak(4, today - timedelta(days=1), today) == 5

    def test_same_day_is_unchanged(self, today):
        assert next_streak(4, today, today) == 4

    def test_same_day_never_leaves_zero(self, today):
        assert next_streak(0, today, today) == 1

    @pytest.mark.parametrize("gap", [2, 5, 365])
    def test_gap_resets_then_credits_today(self, today, gap):
        assert next_streak(30, today - timedelta(days=gap), today) == 1

    def test_future_last_date_is_treated_as_broken(self, today):
        assert next_streak(10, today + timedelta(days=1), today) == 1


class TestApplyCompletion:
    def test_yesterday_law(self, today):
        previous = UserStats(
            current_streak=6,
            longest_streak=6,
            last_played_date=today - timedelta(days=1),
            badges=_badges(1, 5),
        )

        update = apply_completion(previous, today)

        assert update.stats.current_streak == 7
        assert update.stats.longest_streak == 7
        assert update.stats.last_played_date == today

    def test_longest_is_a_high_water_mark(self, today):
        previous = UserStats(
            current_streak=2,
            longest_streak=40,
            last_played_date=today - timedelta(days=1),
            badges=_badges(1),
        )

        update = apply_completion(previous, today)

        assert update.stats.current_streak == 3
        assert update.stats.longest_streak == 40

    def test_reset_then_resume(self, today):
        previous = UserStats(
            current_streak=12,
            longest_streak=12,
            last_played_date=today - timedelta(days=5),
            badges=_badges(1, 5, 10),
        )

        update = apply_completion(previous, today)

        assert update.stats.current_streak == 1
        assert update.stats.longest_streak == 12
        assert update.new_badges == []

    def test_same_day_twice_is_idempotent(self, today):
        first = apply_completion(UserStats(), today).stats
        second = apply_completion(first, today).stats

        assert second.current_streak == first.current_streak == 1
        assert second.badges == first.badges

    def test_first_ever_play_awards_one_day_badge(self, today):
        update = apply_completion(UserStats(), today)

        assert update.stats.current_streak == 1
        assert update.stats.longest_streak == 1
        assert [b.milestone_value for b in update.new_badges] == [1]
        assert update.new_badges[0].date_earned == today

    def test_crossing_ten_awards_exactly_one_badge(self, today):
        previous = UserStats(
            current_streak=9,
            longest_streak=9,
            last_played_date=today - timedelta(days=1),
            badges=_badges(1, 5),
        )

        update = apply_completion(previous, today)

        assert [b.milestone_value for b in update.new_badges] == [10]
        assert sum(1 for b in update.stats.badges if b.milestone_value == 10) == 1

    def test_ten_badge_is_not_duplicated_on_later_days(self, today):
        stats = UserStats(
            current_streak=9,
            longest_streak=9,
            last_played_date=today - timedelta(days=1),
            badges=_badges(1, 5),
        )
        day = today
        for _ in range(5):
            stats = apply_completion(stats, day).stats
            day += timedelta(days=1)

        assert stats.current_streak == 14
        assert [b.milestone_value for b in stats.badges].count(10) == 1

    def test_does_not_mutate_input(self, today):
        previous = UserStats(current_streak=3, last_played_date=today - timedelta(days=1))
        apply_completion(previous, today)

        assert previous.current_streak == 3
        assert previous.badges == []


class TestAwardBadges:
    def test_every_newly_crossed_milestone_is_awarded(self, today):
        stats = UserStats(current_streak=22)

        awarded = award_badges(stats, today)

        assert [b.milestone_value for b in awarded] == [1, 5, 10, 20]

    def test_existing_badges_keep_their_date(self, today):
        earlier = date(2023, 1, 1)
        stats = UserStats(current_streak=5, badges=_badges(1, earned=earlier))

        awarded = award_badges(stats, today)

        assert [b.milestone_value for b in awarded] == [5]
        assert stats.badges[0].date_earned == earlier
