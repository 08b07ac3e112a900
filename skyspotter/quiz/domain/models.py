import random
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from skyspotter.config import GameConfig


# --- Enums ---
class Category(str, Enum):
    # Values are the labels used in the bundled question file
    CIVIL = "Civil Aircraft"
    MILITARY = "Military Aircraft"
    MIXED = "Mixed Mode"

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]


_CATEGORY_ICONS = {
    Category.CIVIL: "✈️",
    Category.MILITARY: "🛩️",
    Category.MIXED: "🛬",
}

_CATEGORY_DESCRIPTIONS = {
    Category.CIVIL: "Commercial and private aircraft",
    Category.MILITARY: "Military jets, helicopters, and more",
    Category.MIXED: "Combination of civil and military aircraft",
}


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @property
    def point_multiplier(self) -> int:
        return {Difficulty.EASY: 1, Difficulty.MEDIUM: 2, Difficulty.HARD: 3}[self]

    @property
    def base_points(self) -> int:
        """Points for one correct answer. Strictly increasing with difficulty."""
        return GameConfig.BASE_POINTS * self.point_multiplier


# --- Entities ---
class Question(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    image_ref: str = Field(alias="imageFileName")
    correct_answer: str = Field(alias="correctAnswer", min_length=1)
    options: tuple[str, ...]
    category: Category
    difficulty: Difficulty
    explanation: str = ""

    @model_validator(mode="after")
    def _check_options(self) -> "Question":
        if len(self.options) < 2:
            raise ValueError("a question needs at least 2 options")
        if self.options.count(self.correct_answer) != 1:
            raise ValueError(
                f"correct answer '{self.correct_answer}' must appear exactly once in options"
            )
        return self

    def is_correct(self, choice: str) -> bool:
        return choice == self.correct_answer


class Badge(BaseModel):
    model_config = ConfigDict(frozen=True)

    milestone_value: int = Field(gt=0)
    date_earned: date

    @property
    def display_name(self) -> str:
        return f"{self.milestone_value}-Day Streak"

    @property
    def description(self) -> str:
        return f"Played SkySpotter for {self.milestone_value} consecutive days"

    @property
    def tier(self) -> str:
        if self.milestone_value >= 100:
            return "crown"
        if self.milestone_value >= 50:
            return "gold"
        if self.milestone_value >= 20:
            return "silver"
        return "bronze"


class UserStats(BaseModel):
    """
    The single durable progress record.
    Read once at start, rewritten wholesale after every commit.
    """

    total_score: int = Field(default=0, ge=0)
    questions_answered: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_played_date: date | None = None
    badges: list[Badge] = Field(default_factory=list)
    has_active_entitlement: bool = False

    @model_validator(mode="after")
    def _check_counts(self) -> "UserStats":
        if self.correct_answers > self.questions_answered:
            raise ValueError("correct_answers cannot exceed questions_answered")
        return self

    @property
    def accuracy(self) -> float:
        """Percentage of correct answers, 0.0 before the first answer."""
        if self.questions_answered == 0:
            return 0.0
        return self.correct_answers / self.questions_answered * 100

    def played_on(self, day: date) -> bool:
        return self.last_played_date == day

    def has_badge(self, milestone: int) -> bool:
        return any(b.milestone_value == milestone for b in self.badges)


class QuizSession(BaseModel):
    """
    A single play-through. The question list and the option order of
    every question are fixed at creation; only the index and score move.
    """

    category: Category
    difficulty: Difficulty
    questions: list[Question]
    shuffled_options: list[tuple[str, ...]]
    current_index: int = 0
    score: int = 0

    @model_validator(mode="after")
    def _check_shape(self) -> "QuizSession":
        if len(self.shuffled_options) != len(self.questions):
            raise ValueError("shuffled_options must parallel questions")
        for q, opts in zip(self.questions, self.shuffled_options, strict=True):
            if sorted(opts) != sorted(q.options):
                raise ValueError(f"options of {q.id} are not a permutation")
        if not 0 <= self.current_index <= len(self.questions):
            raise ValueError("current_index out of range")
        return self

    @classmethod
    def create(
        cls,
        category: Category,
        difficulty: Difficulty,
        questions: list[Question],
        rng: random.Random | None = None,
    ) -> "QuizSession":
        """Builds a session and rolls the option permutation of each question once."""
        rng = rng or random.Random()
        shuffled = []
        for q in questions:
            opts = list(q.options)
            rng.shuffle(opts)
            shuffled.append(tuple(opts))
        return cls(
            category=category,
            difficulty=difficulty,
            questions=questions,
            shuffled_options=shuffled,
        )

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_finished(self) -> bool:
        return self.current_index >= len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if self.is_finished:
            return None
        return self.questions[self.current_index]

    @property
    def current_options(self) -> tuple[str, ...]:
        if self.is_finished:
            return ()
        return self.shuffled_options[self.current_index]

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return self.current_index / len(self.questions)

    def add_points(self, points: int) -> None:
        if points < 0:
            raise ValueError("points must be non-negative")
        self.score += points

    def advance_index(self) -> bool:
        """Moves to the next question. Returns False once past the last one."""
        if not self.is_finished:
            self.current_index += 1
        return not self.is_finished


# --- Value Objects ---
@dataclass(frozen=True)
class AnswerFeedback:
    selected: str
    correct_answer: str
    is_correct: bool
    points_awarded: int
    explanation: str


@dataclass(frozen=True)
class SessionResult:
    score: int
    questions_answered: int
    correct_answers: int

    @property
    def accuracy(self) -> float:
        if self.questions_answered == 0:
            return 0.0
        return self.correct_answers / self.questions_answered * 100
