"""
Core data models for the trivia game.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SessionState(Enum):
    """Enumeration of possible game session states."""
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    RESOLVED = "resolved"
    FINISHED = "finished"


class Outcome(Enum):
    """How the most recent answer attempt (or the clock) resolved."""
    CORRECT = "correct"
    WRONG = "wrong"
    TIMEOUT = "timeout"


def _as_int(value: Any) -> int:
    # The API sends null for clues that never had a dollar value
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(frozen=True)
class Category:
    """The category a clue was filed under."""
    id: int = 0
    title: str = ""
    canon: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Category":
        data = data or {}
        return cls(
            id=_as_int(data.get("id")),
            title=str(data.get("title") or ""),
            canon=bool(data.get("canon", False)),
        )


@dataclass(frozen=True)
class Game:
    """Broadcast metadata for the game a clue aired in."""
    aired: str = ""
    canon: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Game":
        data = data or {}
        return cls(
            aired=str(data.get("aired") or ""),
            canon=bool(data.get("canon", False)),
        )


@dataclass(frozen=True)
class Clue:
    """Represents a single trivia clue as returned by the clues API."""
    id: int
    answer: str
    question: str
    value: int = 0
    category_id: int = 0
    game_id: int = 0
    invalid_count: int = 0
    category: Category = field(default_factory=Category)
    game: Game = field(default_factory=Game)
    canon: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Clue":
        """
        Build a Clue from one entry of the API's ``clues`` array.

        The caller is expected to have validated that ``answer`` and
        ``question`` are present strings.
        """
        return cls(
            id=_as_int(data.get("id")),
            answer=data["answer"],
            question=data["question"],
            value=_as_int(data.get("value")),
            category_id=_as_int(data.get("categoryId")),
            game_id=_as_int(data.get("gameId")),
            invalid_count=_as_int(data.get("invalidCount")),
            category=Category.from_dict(data.get("category")),
            game=Game.from_dict(data.get("game")),
            canon=bool(data.get("canon", False)),
        )

    def display_text(self) -> str:
        """Text shown in the question area."""
        return f"Category: {self.category.title}\nQuestion: {self.question}"


@dataclass
class GameSettings:
    """Configuration settings for a game session."""
    question_count: int = 10
    timer_duration: int = 45
    urgency_threshold: int = 10


@dataclass(frozen=True)
class RenderState:
    """Read-only snapshot of a session, consumed by the presentation layer."""
    state: SessionState
    category_title: str = ""
    question_text: str = ""
    seconds_left: int = 0
    is_urgent: bool = False
    score: int = 0
    question_number: int = 0
    total_questions: int = 0
    feedback: Optional[Outcome] = None
    revealed_answer: Optional[str] = None
    message: str = ""
    can_start: bool = True
    can_submit: bool = False
    can_advance: bool = False
    is_finished: bool = False
    summary: str = ""
