import random
import uuid

from skyspotter.config import GameConfig
from skyspotter.quiz.domain.models import Category, Difficulty, Question

CIVIL_AIRCRAFT: tuple[str, ...] = (
    "Boeing 737",
    "Airbus A320",
    "Boeing 747",
    "Airbus A380",
    "Cessna 172",
    "Bombardier Challenger",
    "Embraer E-Jet",
    "Boeing 787 Dreamliner",
    "Airbus A350",
    "Beechcraft Bonanza",
)

MILITARY_AIRCRAFT: tuple[str, ...] = (
    "F-22 Raptor",
    "F-35 Lightning II",
    "F-16 Fighting Falcon",
    "F/A-18 Hornet",
    "A-10 Thunderbolt II",
    "B-2 Spirit",
    "AH-64 Apache",
    "V-22 Osprey",
    "C-130 Hercules",
    "B-52 Stratofortress",
)

RECOGNITION_FEATURES: tuple[str, ...] = (
    "distinctive wing shape",
    "unique tail configuration",
    "characteristic nose profile",
    "engine placement",
    "cockpit window design",
    "landing gear configuration",
    "fuselage length and shape",
    "wingspan ratio",
    "vertical stabilizer design",
    "distinctive paint scheme",
)


class QuestionFactory:
    """
    Procedural question synthesis.
    Last-resort content source: pairs an aircraft name with distractors
    drawn from the same category pool.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    @staticmethod
    def name_pool(category: Category) -> tuple[str, ...]:
        if category == Category.CIVIL:
            return CIVIL_AIRCRAFT
        if category == Category.MILITARY:
            return MILITARY_AIRCRAFT
        return CIVIL_AIRCRAFT + MILITARY_AIRCRAFT

    def synthesize(
        self,
        category: Category,
        difficulty: Difficulty,
        sequence: int = 1,
    ) -> Question:
        pool = self.name_pool(category)
        aircraft = self.rng.choice(pool)

        # Without replacement, never the correct answer
        distractor_pool = [name for name in pool if name != aircraft]
        distractors = self.rng.sample(
            distractor_pool, GameConfig.OPTIONS_PER_QUESTION - 1
        )

        feature = self.rng.choice(RECOGNITION_FEATURES)
        return Question(
            id=str(uuid.uuid4()),
            image_ref=f"placeholder_{category.name.lower()}_{sequence % 10 + 1}",
            correct_answer=aircraft,
            options=(aircraft, *distractors),
            category=category,
            difficulty=difficulty,
            explanation=f"The {aircraft} is recognizable by its {feature}.",
        )

    def synthesize_many(
        self, category: Category, difficulty: Difficulty, count: int
    ) -> list[Question]:
        return [
            self.synthesize(category, difficulty, sequence=i)
            for i in range(1, count + 1)
        ]

    def sample_pool(
        self, per_bucket: int = GameConfig.SAMPLE_QUESTIONS_PER_BUCKET
    ) -> list[Question]:
        """A full pool covering every category/difficulty pair."""
        questions: list[Question] = []
        for category in Category:
            for difficulty in Difficulty:
                questions.extend(self.synthesize_many(category, difficulty, per_bucket))
        return questions
