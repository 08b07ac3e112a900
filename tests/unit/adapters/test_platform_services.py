from unittest.mock import Mock

from skyspotter.quiz.adapters.platform_services import (
    FrequencyCappedAdService,
    LoggingLeaderboardService,
    StoredEntitlementService,
)


class TestFrequencyCappedAdService:
    def test_ad_available_every_nth_request(self):
        ads = FrequencyCappedAdService(frequency=2)

        ads.load_ad()
        assert not ads.can_show_ad()
        ads.load_ad()
        assert ads.can_show_ad()

    def test_show_consumes_ad_and_always_calls_back(self):
        ads = FrequencyCappedAdService(frequency=1)
        on_dismissed = Mock()

        ads.load_ad()
        ads.show_ad(on_dismissed)
        assert ads.shown == 1
        assert not ads.can_show_ad()

        # Nothing loaded: still dismisses
        ads.show_ad(on_dismissed)
        assert ads.shown == 1
        assert on_dismissed.call_count == 2

    def test_frequency_below_one_is_clamped(self):
        ads = FrequencyCappedAdService(frequency=0)
        ads.load_ad()
        assert ads.can_show_ad()


def test_entitlement_reads_flag_lazily():
    flag = {"value": False}
    service = StoredEntitlementService(lambda: flag["value"])

    assert service.has_active_entitlement() is False
    flag["value"] = True
    assert service.has_active_entitlement() is True


def test_leaderboard_logs_each_submission():
    board = LoggingLeaderboardService()
    board.telemetry = Mock()

    board.submit_score(50, "total")
    board.submit_score(3, "streak")

    board.telemetry.log_info.assert_any_call("Score submitted", board="total", value=50)
    board.telemetry.log_info.assert_any_call("Score submitted", board="streak", value=3)
    assert board.telemetry.log_info.call_count == 2
