import random

from skyspotter.config import GameConfig
from skyspotter.quiz.domain.models import Category, Difficulty, Question, QuizSession
from skyspotter.quiz.domain.question_factory import QuestionFactory
from skyspotter.shared.telemetry import Telemetry


class SessionBuilder:
    """
    Pure Domain Logic.
    Turns the static question pool into a playable session:
    filter, sample without replacement, pad with synthesized questions, shuffle options.
    """

    def __init__(
        self,
        factory: QuestionFactory | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.factory = factory or QuestionFactory(self.rng)
        self.telemetry = Telemetry("SessionBuilder")

    @staticmethod
    def eligible(
        pool: list[Question], category: Category, difficulty: Difficulty
    ) -> list[Question]:
        """Mixed draws from Civil and Military only, never from Mixed-tagged questions."""
        if category == Category.MIXED:
            wanted = {Category.CIVIL, Category.MILITARY}
        else:
            wanted = {category}
        return [q for q in pool if q.category in wanted and q.difficulty == difficulty]

    def build(
        self,
        pool: list[Question],
        category: Category,
        difficulty: Difficulty,
        count: int = GameConfig.QUESTIONS_PER_QUIZ,
    ) -> QuizSession:
        if count < 1:
            raise ValueError("a session needs at least one question")

        candidates = self.eligible(pool, category, difficulty)
        selected = self.rng.sample(candidates, min(count, len(candidates)))

        deficit = count - len(selected)
        if deficit > 0:
            self.telemetry.log_warning(
                "Not enough questions, padding with generated ones",
                category=category.value,
                difficulty=difficulty.value,
                available=len(candidates),
                generated=deficit,
            )
            taken_ids = {q.id for q in pool}
            padding: list[Question] = []
            sequence = 1
            while len(padding) < deficit:
                q = self.factory.synthesize(category, difficulty, sequence=sequence)
                sequence += 1
                if q.id in taken_ids:
                    continue
                taken_ids.add(q.id)
                padding.append(q)
            selected.extend(padding)

        self.telemetry.log_info(
            "Session Built",
            category=category.value,
            difficulty=difficulty.value,
            questions=len(selected),
        )
        return QuizSession.create(category, difficulty, selected, rng=self.rng)
