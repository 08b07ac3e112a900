import logging
from enum import Enum, auto

logger = logging.getLogger("skyspotter.fsm")


class SessionState(Enum):
    NOT_STARTED = auto()  # No session, or the last one was abandoned
    AWAITING_ANSWER = auto()  # In progress, current question not answered yet
    ANSWERED = auto()  # In progress, feedback for the current question is showing
    COMPLETED = auto()  # Last question advanced past; stats committed

    @property
    def in_progress(self) -> bool:
        return self in (SessionState.AWAITING_ANSWER, SessionState.ANSWERED)


class SessionAction(Enum):
    START = auto()
    ANSWER = auto()
    NEXT_QUESTION = auto()
    FINISH = auto()
    ABANDON = auto()


class SessionStateMachine:
    """
    Pure FSM Logic.
    Only knows which transitions are legal; grading and persistence live elsewhere.
    """

    def __init__(self, initial_state: SessionState = SessionState.NOT_STARTED) -> None:
        self._state = initial_state

    @property
    def current_state(self) -> SessionState:
        return self._state

    def can(self, action: SessionAction) -> bool:
        return self._next(action) is not None

    def _next(self, action: SessionAction) -> SessionState | None:
        match (self._state, action):
            # START is legal from anywhere; a running session is discarded
            case (_, SessionAction.START):
                return SessionState.AWAITING_ANSWER

            case (SessionState.AWAITING_ANSWER, SessionAction.ANSWER):
                return SessionState.ANSWERED

            case (SessionState.ANSWERED, SessionAction.NEXT_QUESTION):
                return SessionState.AWAITING_ANSWER
            case (SessionState.ANSWERED, SessionAction.FINISH):
                return SessionState.COMPLETED

            case (SessionState.AWAITING_ANSWER | SessionState.ANSWERED, SessionAction.ABANDON):
                return SessionState.NOT_STARTED

            case _:
                return None

    def transition(self, action: SessionAction) -> bool:
        """Applies the action. Returns False (state unchanged) if it is not allowed."""
        previous = self._state
        target = self._next(action)

        if target is None:
            logger.error(f"INVALID TRANSITION: {previous.name} + {action.name}")
            return False

        self._state = target
        logger.debug(f"FSM: {previous.name} --[{action.name}]--> {target.name}")
        return True
