from collections.abc import Callable

from skyspotter.config import GameConfig
from skyspotter.quiz.domain.ports import (
    IAdService,
    IEntitlementService,
    ILeaderboardService,
)
from skyspotter.shared.telemetry import Telemetry


class FrequencyCappedAdService(IAdService):
    """
    Stand-in for the ad SDK.
    An interstitial is "loaded" after every `frequency` load requests.
    """

    def __init__(self, frequency: int = GameConfig.AD_FREQUENCY) -> None:
        self.frequency = max(frequency, 1)
        self.telemetry = Telemetry("AdService")
        self._requests = 0
        self._loaded = False
        self.shown = 0

    def load_ad(self) -> None:
        self._requests += 1
        if self._requests % self.frequency == 0:
            self._loaded = True
            self.telemetry.log_info("Interstitial ready", requests=self._requests)

    def can_show_ad(self) -> bool:
        return self._loaded

    def show_ad(self, on_dismissed: Callable[[], None]) -> None:
        if self._loaded:
            self.shown += 1
            self._loaded = False
            self.telemetry.log_info("Interstitial shown", total=self.shown)
        else:
            self.telemetry.log_warning("show_ad called with no ad loaded")
        on_dismissed()


class StoredEntitlementService(IEntitlementService):
    """Reads the 'remove ads' entitlement kept in the progress record."""

    def __init__(self, read_flag: Callable[[], bool]) -> None:
        self._read_flag = read_flag

    def has_active_entitlement(self) -> bool:
        return self._read_flag()


class LoggingLeaderboardService(ILeaderboardService):
    """Stand-in for the leaderboard SDK: submissions only go to the log."""

    def __init__(self) -> None:
        self.telemetry = Telemetry("LeaderboardService")

    def submit_score(self, value: int, board_id: str) -> None:
        self.telemetry.log_info("Score submitted", board=board_id, value=value)
