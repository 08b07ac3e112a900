import json
import os
from typing import Any

from pydantic import TypeAdapter, ValidationError

from skyspotter.config import GameConfig
from skyspotter.errors import PersistenceError, QuestionDataError
from skyspotter.quiz.domain.models import Question
from skyspotter.quiz.domain.ports import IProgressRepository
from skyspotter.quiz.domain.question_factory import QuestionFactory
from skyspotter.shared.telemetry import Telemetry, measure_time

# --- Loading Strategy ---
# Tier 1: bundled JSON file, validated record by record.
# Tier 2: copy cached in the key-value store by an earlier run.
# Tier 3: hardcoded fallback set below.
# Tier 4: procedurally synthesized pool.
# Every tier failure is logged and never surfaced to the player.
# ---------------------------------

FALLBACK_QUESTIONS: list[dict[str, Any]] = [
    {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "imageFileName": "civil_airbus_320-NEO_1",
        "correctAnswer": "Airbus 320",
        "options": ["Boeing 787", "Airbus 320", "Boeing 757", "Embraer 190"],
        "category": "Civil Aircraft",
        "difficulty": "Easy",
        "explanation": "Classic airbus tail and landing gear configuration "
        "with a narrowbody design.",
    },
    {
        "id": "550e8400-e29b-41d4-a716-446655440001",
        "imageFileName": "civil_airbus_320-NEO_1",
        "correctAnswer": "Airbus 320",
        "options": ["Boeing 737", "Boeing 757", "Airbus 319", "Airbus 320"],
        "category": "Civil Aircraft",
        "difficulty": "Medium",
        "explanation": "Classic airbus tail and landing gear configuration "
        "with a narrowbody design.",
    },
]

_QUESTION_LIST = TypeAdapter(list[Question])


class QuestionRepository:
    """
    Read-only question pool.
    The pool is loaded once and memoized for the life of the repository.
    """

    def __init__(
        self,
        questions_file: str = GameConfig.QUESTIONS_FILE,
        factory: QuestionFactory | None = None,
        fallback: list[dict[str, Any]] | None = None,
        store: IProgressRepository | None = None,
    ) -> None:
        self.questions_file = questions_file
        self.factory = factory or QuestionFactory()
        self.fallback = FALLBACK_QUESTIONS if fallback is None else fallback
        self.store = store
        self.telemetry = Telemetry("QuestionRepository")
        self.source: str | None = None
        self._questions: list[Question] | None = None

    def load(self) -> list[Question]:
        if self._questions is None:
            self._questions = self._load_tiers()
        return list(self._questions)

    @measure_time("load_questions")
    def _load_tiers(self) -> list[Question]:
        try:
            questions = self.load_bundled()
        except QuestionDataError as e:
            self.telemetry.log_error("Bundled questions unavailable", e)
            questions = []

        if questions:
            self.source = "bundled"
            self.telemetry.log_info("Loaded bundled questions", count=len(questions))
            return questions

        cached = self.load_cached()
        if cached:
            self.source = "cached"
            self.telemetry.log_warning(
                "No bundled questions, using cached copy", count=len(cached)
            )
            return cached

        self.telemetry.log_warning("No bundled questions, using hardcoded fallback")
        questions = self.parse_records(self.fallback)
        if questions:
            self.source = "fallback"
            return questions

        self.telemetry.log_warning("Fallback set empty, generating sample questions")
        self.source = "generated"
        return self.factory.sample_pool()

    def load_bundled(self) -> list[Question]:
        """Raises QuestionDataError if the file is missing or not a JSON array."""
        if not os.path.exists(self.questions_file):
            raise QuestionDataError(f"Missing: {self.questions_file}")

        try:
            with open(self.questions_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise QuestionDataError(f"Unreadable: {self.questions_file}: {e}") from e

        if not isinstance(data, list):
            raise QuestionDataError(
                f"Expected a JSON array in {self.questions_file}, "
                f"got {type(data).__name__}"
            )
        return self.parse_records(data)

    def parse_records(self, records: list[Any]) -> list[Question]:
        """Validates each record on its own; bad ones are skipped, not fatal."""
        questions: list[Question] = []
        seen_ids: set[str] = set()

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                self.telemetry.log_warning("Skipping non-object record", index=index)
                continue
            try:
                question = Question.model_validate(record)
            except ValidationError as e:
                self.telemetry.log_warning(
                    "Skipping invalid question",
                    index=index,
                    id=record.get("id"),
                    errors=[err["msg"] for err in e.errors()],
                )
                continue

            if question.id in seen_ids:
                self.telemetry.log_warning(
                    "Skipping duplicate question id", index=index, id=question.id
                )
                continue

            seen_ids.add(question.id)
            questions.append(question)

        return questions

    # --- Cached copy in the key-value store ---

    def cache_questions(self) -> bool:
        """
        Writes the bundled pool to the store so a later run can fall back on it.
        Fallback and generated pools are never cached. Returns False when
        nothing was written.
        """
        if self.store is None:
            return False
        questions = self.load()
        if self.source != "bundled":
            return False
        payload = _QUESTION_LIST.dump_json(questions, by_alias=True).decode("utf-8")
        try:
            self.store.save_value(GameConfig.QUESTIONS_KEY, payload)
        except PersistenceError as e:
            self.telemetry.log_error("Caching questions failed", e)
            return False
        return True

    def load_cached(self) -> list[Question] | None:
        if self.store is None:
            return None
        try:
            raw = self.store.load_value(GameConfig.QUESTIONS_KEY)
        except PersistenceError as e:
            self.telemetry.log_error("Reading cached questions failed", e)
            return None
        if raw is None:
            return None
        try:
            return _QUESTION_LIST.validate_json(raw)
        except ValidationError as e:
            self.telemetry.log_error("Cached questions are unreadable", e)
            self._drop_cache()
            return None

    def _drop_cache(self) -> None:
        try:
            self.store.delete_value(GameConfig.QUESTIONS_KEY)
        except PersistenceError as e:
            self.telemetry.log_error("Dropping cached questions failed", e)
