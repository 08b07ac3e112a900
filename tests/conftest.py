from datetime import date

import pytest
import streamlit as st

from skyspotter.quiz.adapters.db_manager import DatabaseManager
from skyspotter.quiz.adapters.sqlite_repository import SQLiteProgressRepository
from skyspotter.quiz.domain.models import Category, Difficulty, Question


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """Every test gets a fresh st.session_state."""
    original_session_state = getattr(st, "session_state", None)
    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()
    if original_session_state is not None:
        st.session_state = original_session_state


def make_question(
    qid: str,
    category: Category = Category.CIVIL,
    difficulty: Difficulty = Difficulty.EASY,
    answer: str = "Boeing 737",
    options: tuple[str, ...] = ("Boeing 737", "Airbus A320", "Boeing 747", "Cessna 172"),
) -> Question:
    return Question(
        id=qid,
        image_ref=f"img_{qid}",
        correct_answer=answer,
        options=options,
        category=category,
        difficulty=difficulty,
        explanation=f"Explanation for {qid}",
    )


@pytest.fixture
def make_q():
    """Question builder, for tests that need specific ids/categories."""
    return make_question


@pytest.fixture
def today():
    return date(2024, 6, 15)


@pytest.fixture
def sample_question():
    return make_question("Q1")


@pytest.fixture
def question_pool():
    """20 questions per (category, difficulty), Mixed-tagged included."""
    pool = []
    for category in Category:
        for difficulty in Difficulty:
            for i in range(20):
                pool.append(
                    make_question(
                        f"{category.name}-{difficulty.name}-{i}",
                        category=category,
                        difficulty=difficulty,
                    )
                )
    return pool


@pytest.fixture
def in_memory_repo():
    """A clean, empty key-value store."""
    db_manager = DatabaseManager(db_path=":memory:")
    repo = SQLiteProgressRepository(db_manager=db_manager)
    yield repo
    db_manager.close()
