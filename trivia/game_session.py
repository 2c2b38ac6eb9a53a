"""
Game session state machine for the trivia game.
Handles clue selection, the per-question countdown, answer grading and scoring.
"""
import logging
import random
import time
from typing import List, Optional, Protocol

from .errors import (
    EmptyInputError,
    FetchError,
    InvalidSessionStateError,
)
from .models import Clue, GameSettings, Outcome, RenderState, SessionState

# Set up logger for session operations
logger = logging.getLogger(__name__)


class ClueFetcher(Protocol):
    def fetch(self) -> List[Clue]:
        ...


class SessionLifecycleLogger:
    """Structured logging for session lifecycle events."""

    @staticmethod
    def log_state_transition(from_state: SessionState, to_state: SessionState,
                             question_index: int, reason: str = None) -> None:
        """Log session state transitions."""
        logger.info(
            f"Session lifecycle: STATE_TRANSITION - {from_state.value} -> {to_state.value}, "
            f"Question {question_index + 1}" + (f" ({reason})" if reason else ""),
            extra={
                'event_type': 'session_state_transition',
                'from_state': from_state.value,
                'to_state': to_state.value,
                'question_index': question_index,
                'reason': reason,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_countdown_update(question_index: int, remaining_time: int, total_duration: int) -> None:
        """Log countdown updates (throttled to avoid spam)."""
        if remaining_time % 10 == 0 or remaining_time <= 5:
            progress_percent = ((total_duration - remaining_time) / total_duration) * 100
            logger.debug(
                f"Session lifecycle: COUNTDOWN - Question {question_index + 1}, "
                f"Remaining {remaining_time}s ({progress_percent:.1f}% complete)",
                extra={
                    'event_type': 'countdown_update',
                    'question_index': question_index,
                    'remaining_time': remaining_time,
                    'total_duration': total_duration,
                    'progress_percent': progress_percent,
                    'timestamp': time.time()
                }
            )

    @staticmethod
    def log_answer(question_index: int, outcome: Outcome, score: int) -> None:
        """Log a graded answer attempt."""
        logger.info(
            f"Session lifecycle: ANSWER - Question {question_index + 1}, "
            f"Outcome {outcome.value}, Score {score}",
            extra={
                'event_type': 'answer_graded',
                'question_index': question_index,
                'outcome': outcome.value,
                'score': score,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_fetch_error(error: Exception) -> None:
        """Log a failed clue fetch with context."""
        logger.error(
            f"Session lifecycle: ERROR - Operation start, Type {type(error).__name__}: {error}",
            extra={
                'event_type': 'session_error',
                'error_type': type(error).__name__,
                'error_message': str(error),
                'operation': 'start',
                'timestamp': time.time()
            }
        )


class GameSession:
    """
    Plays one game of trivia at a time.

    The session moves through IDLE -> AWAITING_ANSWER -> RESOLVED -> ... ->
    FINISHED. All transitions are expected to run on a single thread; the
    countdown is driven from outside by calling tick() once per second.
    """

    def __init__(self, fetcher: ClueFetcher, settings: Optional[GameSettings] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the session.

        Args:
            fetcher: Object whose fetch() returns a batch of clues
            settings: Game settings, defaults to ten questions of 45 seconds
            rng: Random source used for shuffling
        """
        self.fetcher = fetcher
        self.settings = settings or GameSettings()
        self._rng = rng or random.Random()

        self._state = SessionState.IDLE
        self._clues: List[Clue] = []
        self._cursor = 0
        self._score = 0
        self._seconds_left = 0
        self._last_outcome: Optional[Outcome] = None
        self._last_error: Optional[str] = None
        self._message = ""

    # Read-only views

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def score(self) -> int:
        return self._score

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def seconds_left(self) -> int:
        return self._seconds_left

    @property
    def last_outcome(self) -> Optional[Outcome]:
        return self._last_outcome

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def total_questions(self) -> int:
        return len(self._clues)

    @property
    def current_clue(self) -> Optional[Clue]:
        """The clue being played, or None outside an active game."""
        if self._state in (SessionState.AWAITING_ANSWER, SessionState.RESOLVED):
            return self._clues[self._cursor]
        return None

    # Transitions

    def start(self) -> None:
        """
        Fetch a fresh batch of clues and begin a new game.

        Raises:
            InvalidSessionStateError: If a game is already in progress
            FetchError: If the clues could not be fetched; the session is
                left IDLE and the message is available via last_error
        """
        self._require_startable("start")

        try:
            batch = self.fetcher.fetch()
        except FetchError as e:
            self.fetch_failed(e)
            raise

        self.begin(batch)

    def fetch_failed(self, error: FetchError) -> None:
        """Record a failed fetch and fall back to IDLE so the game can be restarted."""
        SessionLifecycleLogger.log_fetch_error(error)
        self.reset()
        self._last_error = str(error)
        self._message = str(error)

    def begin(self, batch: List[Clue]) -> None:
        """
        Begin a new game from an already fetched batch of clues.

        Args:
            batch: Clues to draw the game from; left unmodified

        Raises:
            InvalidSessionStateError: If a game is already in progress
            ValueError: If the batch is empty
        """
        self._require_startable("begin")

        if not batch:
            raise ValueError("Cannot start a game from an empty batch of clues")

        shuffled = list(batch)
        self._rng.shuffle(shuffled)

        count = self.settings.question_count
        if len(shuffled) < count:
            logger.warning(f"Batch holds only {len(shuffled)} clues; "
                           f"playing {len(shuffled)} of {count} questions")

        previous = self._state
        self._clues = shuffled[:count]
        self._cursor = 0
        self._score = 0
        self._seconds_left = self.settings.timer_duration
        self._last_outcome = None
        self._last_error = None
        self._message = ""
        self._state = SessionState.AWAITING_ANSWER

        SessionLifecycleLogger.log_state_transition(
            previous, self._state, self._cursor, "game started"
        )

    def tick(self) -> int:
        """
        Count one second off the active question.

        Returns:
            Seconds left on the active question

        Raises:
            InvalidSessionStateError: If no question is being played
        """
        if self._state == SessionState.RESOLVED:
            return self._seconds_left

        if self._state != SessionState.AWAITING_ANSWER:
            raise InvalidSessionStateError(
                f"Cannot tick while session is {self._state.value}"
            )

        self._seconds_left -= 1
        SessionLifecycleLogger.log_countdown_update(
            self._cursor, self._seconds_left, self.settings.timer_duration
        )

        if self._seconds_left <= 0:
            self._seconds_left = 0
            self._last_outcome = Outcome.TIMEOUT
            self._message = ("Oh no! You ran out of time. Hit 'Next' to continue. "
                             f"The correct answer was: {self._clues[self._cursor].answer}.")
            self._transition(SessionState.RESOLVED, "time expired")

        return self._seconds_left

    def submit(self, text: str) -> Outcome:
        """
        Grade an answer for the active question.

        The answer counts when the stored answer, case-folded and trimmed,
        appears anywhere in the submitted text, so "What is a book" matches
        "a book".

        Returns:
            Outcome.CORRECT or Outcome.WRONG

        Raises:
            EmptyInputError: If the text is empty or blank
            InvalidSessionStateError: If no question is awaiting an answer
        """
        if self._state != SessionState.AWAITING_ANSWER:
            raise InvalidSessionStateError(
                f"Cannot submit an answer while session is {self._state.value}"
            )

        if text is None or not text.strip():
            raise EmptyInputError(
                "Please enter an answer. If you wish to forfeit, press 'Next'."
            )

        user_answer = text.strip().casefold()
        real_answer = self._clues[self._cursor].answer.strip().casefold()

        if real_answer in user_answer:
            self._score += 1
            self._last_outcome = Outcome.CORRECT
            self._message = ""
            SessionLifecycleLogger.log_answer(self._cursor, Outcome.CORRECT, self._score)
            self._transition(SessionState.RESOLVED, "answered correctly")
        else:
            self._last_outcome = Outcome.WRONG
            self._message = ""
            SessionLifecycleLogger.log_answer(self._cursor, Outcome.WRONG, self._score)

        return self._last_outcome

    def advance(self) -> SessionState:
        """
        Move past the active question, skipping it if still unanswered.

        Returns:
            The new session state

        Raises:
            InvalidSessionStateError: If no game is in progress
        """
        if self._state not in (SessionState.AWAITING_ANSWER, SessionState.RESOLVED):
            raise InvalidSessionStateError(
                f"Cannot advance while session is {self._state.value}"
            )

        if self._cursor >= len(self._clues) - 1:
            self._message = ""
            self._transition(SessionState.FINISHED, "last question completed")
            logger.info(f"Game finished with score {self._score}/{len(self._clues)}")
            return self._state

        skipped = self._state == SessionState.AWAITING_ANSWER
        self._cursor += 1
        self._seconds_left = self.settings.timer_duration
        self._last_outcome = None
        self._message = ""
        self._transition(SessionState.AWAITING_ANSWER,
                         "question skipped" if skipped else "next question")
        return self._state

    def reset(self) -> None:
        """Discard any game in progress and return to IDLE."""
        self._clues = []
        self._cursor = 0
        self._score = 0
        self._seconds_left = 0
        self._last_outcome = None
        self._last_error = None
        self._message = ""
        if self._state != SessionState.IDLE:
            self._transition(SessionState.IDLE, "session reset")

    # Queries

    def summary(self) -> str:
        """Human-readable final score."""
        return f"You scored {self._score} out of {len(self._clues)}!"

    def render_state(self) -> RenderState:
        """Build a snapshot of everything needed to draw the session."""
        state = self._state
        if state in (SessionState.IDLE, SessionState.FINISHED):
            return RenderState(
                state=state,
                score=self._score,
                total_questions=len(self._clues),
                question_number=len(self._clues) if state == SessionState.FINISHED else 0,
                message=self._message,
                can_start=True,
                is_finished=state == SessionState.FINISHED,
                summary=self.summary() if state == SessionState.FINISHED else "",
            )

        clue = self._clues[self._cursor]
        return RenderState(
            state=state,
            category_title=clue.category.title,
            question_text=clue.display_text(),
            seconds_left=self._seconds_left,
            is_urgent=self._seconds_left <= self.settings.urgency_threshold,
            score=self._score,
            question_number=self._cursor + 1,
            total_questions=len(self._clues),
            feedback=self._last_outcome,
            revealed_answer=clue.answer if self._last_outcome == Outcome.TIMEOUT else None,
            message=self._message,
            can_start=False,
            can_submit=state == SessionState.AWAITING_ANSWER,
            can_advance=True,
        )

    # Helpers

    def _require_startable(self, operation: str) -> None:
        if self._state not in (SessionState.IDLE, SessionState.FINISHED):
            raise InvalidSessionStateError(
                f"Cannot {operation} while session is {self._state.value}"
            )

    def _transition(self, to_state: SessionState, reason: str) -> None:
        previous = self._state
        self._state = to_state
        SessionLifecycleLogger.log_state_transition(previous, to_state, self._cursor, reason)
