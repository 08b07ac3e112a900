from abc import ABC, abstractmethod
from collections.abc import Callable

from skyspotter.quiz.domain.models import UserStats


class IProgressRepository(ABC):
    """Local key-value store holding serialized records."""

    @abstractmethod
    def load_stats(self) -> UserStats | None:
        """Returns None when nothing has been stored yet."""
        pass

    @abstractmethod
    def save_stats(self, stats: UserStats) -> None:
        pass

    @abstractmethod
    def load_value(self, key: str) -> str | None:
        pass

    @abstractmethod
    def save_value(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete_value(self, key: str) -> None:
        pass


class IAdService(ABC):
    @abstractmethod
    def load_ad(self) -> None:
        pass

    @abstractmethod
    def can_show_ad(self) -> bool:
        pass

    @abstractmethod
    def show_ad(self, on_dismissed: Callable[[], None]) -> None:
        """Presents the ad. `on_dismissed` must be called exactly once, even on failure."""
        pass


class IEntitlementService(ABC):
    @abstractmethod
    def has_active_entitlement(self) -> bool:
        pass


class ILeaderboardService(ABC):
    @abstractmethod
    def submit_score(self, value: int, board_id: str) -> None:
        pass
