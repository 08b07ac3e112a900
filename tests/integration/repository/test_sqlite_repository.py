# ==============================================================================
# ARCHITECTURE: INTEGRATION TEST (STORAGE)
# ------------------------------------------------------------------------------
# GOAL: Verify the key-value store against a real SQLite database.
# ==============================================================================
import pickle
import shutil
import sqlite3
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from skyspotter.config import GameConfig
from skyspotter.errors import PersistenceError
from skyspotter.quiz.adapters.db_manager import DatabaseManager
from skyspotter.quiz.adapters.sqlite_repository import SQLiteProgressRepository
from skyspotter.quiz.application.progress_store import ProgressStore
from skyspotter.quiz.domain.models import Badge, SessionResult, UserStats


def test_empty_store_has_no_stats(in_memory_repo):
    assert in_memory_repo.load_stats() is None
    assert in_memory_repo.load_value("anything") is None


def test_stats_round_trip(in_memory_repo):
    stats = UserStats(
        total_score=340,
        questions_answered=30,
        correct_answers=21,
        current_streak=5,
        longest_streak=9,
        last_played_date=date(2024, 6, 14),
        badges=[
            Badge(milestone_value=1, date_earned=date(2024, 6, 1)),
            Badge(milestone_value=5, date_earned=date(2024, 6, 14)),
        ],
        has_active_entitlement=True,
    )

    in_memory_repo.save_stats(stats)

    assert in_memory_repo.load_stats() == stats


def test_save_overwrites_whole_record(in_memory_repo):
    in_memory_repo.save_stats(UserStats(total_score=10, current_streak=3))
    in_memory_repo.save_stats(UserStats(total_score=20))

    loaded = in_memory_repo.load_stats()
    assert loaded.total_score == 20
    assert loaded.current_streak == 0


def test_corrupt_record_reads_as_missing(in_memory_repo):
    in_memory_repo.save_value(GameConfig.STATS_KEY, '{"total_score": -5}')

    assert in_memory_repo.load_stats() is None


def test_delete_value(in_memory_repo):
    in_memory_repo.save_value("k", "v")
    in_memory_repo.delete_value("k")

    assert in_memory_repo.load_value("k") is None


def test_write_failure_raises_persistence_error(in_memory_repo):
    broken = sqlite3.connect(":memory:")  # no kv_store table
    with patch.object(in_memory_repo, "_get_connection", return_value=broken):
        with pytest.raises(PersistenceError):
            in_memory_repo.save_stats(UserStats())
        with pytest.raises(PersistenceError):
            in_memory_repo.load_value(GameConfig.STATS_KEY)
    broken.close()


def test_file_database_persists_across_managers(tmp_path):
    db_path = str(tmp_path / "nested" / "skyspotter.db")

    first = DatabaseManager(db_path)
    SQLiteProgressRepository(first).save_stats(UserStats(total_score=55))
    first.close()

    second = DatabaseManager(db_path)
    assert SQLiteProgressRepository(second).load_stats().total_score == 55
    second.close()


def test_db_manager_survives_pickling(tmp_path):
    db = DatabaseManager(str(tmp_path / "quiz.db"))
    SQLiteProgressRepository(db).save_value("k", "v")

    restored = pickle.loads(pickle.dumps(db))

    assert restored._shared_connection is None
    assert SQLiteProgressRepository(restored).load_value("k") == "v"
    db.close()
    restored.close()


def test_commit_then_restart_keeps_streak(tmp_path):
    """Streak continuity across app launches on consecutive days."""
    db_path = str(tmp_path / "quiz.db")
    day_one = date(2024, 6, 14)
    result = SessionResult(score=30, questions_answered=3, correct_answers=3)

    db = DatabaseManager(db_path)
    ProgressStore(SQLiteProgressRepository(db)).commit(result, today=day_one)
    db.close()

    db = DatabaseManager(db_path)
    stats = ProgressStore(SQLiteProgressRepository(db)).commit(
        result, today=day_one + timedelta(days=1)
    )
    db.close()

    assert stats.current_streak == 2
    assert stats.total_score == 60
    assert [b.milestone_value for b in stats.badges] == [1]


def test_commit_survives_store_that_cannot_be_opened(tmp_path, today):
    db_dir = tmp_path / "store"
    db = DatabaseManager(str(db_dir / "quiz.db"))
    store = ProgressStore(SQLiteProgressRepository(db))
    store.load()
    db.close()

    # Directory replaced by a plain file: every reconnect fails
    shutil.rmtree(db_dir)
    db_dir.write_text("not a directory")

    stats = store.commit(
        SessionResult(score=70, questions_answered=10, correct_answers=7), today=today
    )

    assert store.persist_failed
    assert stats.total_score == 70
    assert stats.current_streak == 1
    assert store.load() is stats


def test_unopenable_path_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    # Construction logs and carries on
    db = DatabaseManager(str(blocker / "quiz.db"))
    repo = SQLiteProgressRepository(db)

    with pytest.raises(PersistenceError):
        repo.load_stats()
    with pytest.raises(PersistenceError):
        repo.save_stats(UserStats())
    assert ProgressStore(repo).load() == UserStats()
