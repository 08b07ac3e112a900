class SkySpotterError(Exception):
    """Base class for all application errors."""


class SessionContractError(SkySpotterError):
    """
    Raised when the session controller is driven out of order
    (e.g. answering twice, advancing before answering, acting after completion).
    """

    def __init__(self, action: str, state: str, reason: str) -> None:
        self.action = action
        self.state = state
        self.reason = reason
        super().__init__(f"{action} not allowed in {state}: {reason}")


class PersistenceError(SkySpotterError):
    """Raised by storage adapters when a read or write to the key-value store fails."""


class QuestionDataError(SkySpotterError):
    """Raised when the bundled question file cannot be read at all."""
