import random

import pytest

from skyspotter.quiz.domain.models import Category, Difficulty
from skyspotter.quiz.domain.question_factory import (
    CIVIL_AIRCRAFT,
    MILITARY_AIRCRAFT,
    QuestionFactory,
)


@pytest.fixture
def factory():
    return QuestionFactory(random.Random(3))


@pytest.mark.parametrize("category", list(Category))
def test_synthesized_question_shape(factory, category):
    for _ in range(50):
        q = factory.synthesize(category, Difficulty.MEDIUM)

        assert len(q.options) == 4
        assert q.options.count(q.correct_answer) == 1
        assert len(set(q.options)) == 4
        assert set(q.options) <= set(QuestionFactory.name_pool(category))
        assert q.category == category
        assert q.difficulty == Difficulty.MEDIUM
        assert q.explanation.startswith(f"The {q.correct_answer} is recognizable by its")


def test_civil_and_military_pools_do_not_mix(factory):
    civil = factory.synthesize(Category.CIVIL, Difficulty.EASY)
    military = factory.synthesize(Category.MILITARY, Difficulty.EASY)

    assert set(civil.options) <= set(CIVIL_AIRCRAFT)
    assert set(military.options) <= set(MILITARY_AIRCRAFT)


def test_ids_are_unique(factory):
    questions = factory.synthesize_many(Category.CIVIL, Difficulty.EASY, 100)

    assert len({q.id for q in questions}) == 100


def test_sample_pool_covers_every_bucket(factory):
    pool = factory.sample_pool(per_bucket=3)

    assert len(pool) == len(Category) * len(Difficulty) * 3
    buckets = {(q.category, q.difficulty) for q in pool}
    assert len(buckets) == 9
