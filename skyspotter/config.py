import os
from typing import Final


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class GameConfig:
    # --- App Identity ---
    APP_TITLE = "SkySpotter"
    APP_SUBTITLE = "Aircraft identification quiz"

    # --- Game Rules ---
    QUESTIONS_PER_QUIZ: Final[int] = 10
    BASE_POINTS: Final[int] = 10
    OPTIONS_PER_QUESTION: Final[int] = 4
    STREAK_MILESTONES: Final[tuple[int, ...]] = (1, 5, 10, 20, 30, 40, 50, 75, 100)

    # --- Storage (single key-value record) ---
    DB_PATH: str = os.getenv("SKYSPOTTER_DB_PATH", "data/skyspotter.db")
    STATS_KEY: Final[str] = "user_stats"
    QUESTIONS_KEY: Final[str] = "cached_questions"

    # --- Question Data ---
    QUESTIONS_FILE = "data/aircraft_questions.json"
    SAMPLE_QUESTIONS_PER_BUCKET = 20
    IMAGE_DIR = "assets/aircraft"

    # --- External Services ---
    # Show an interstitial after every N completed quizzes
    AD_FREQUENCY = 2
    LEADERBOARD_TOTAL_SCORE = "com.skyspotter.totalscore"
    LEADERBOARD_STREAK = "com.skyspotter.streak"

    # --- Contract Checking ---
    # Strict: out-of-order answer/advance raises. Relaxed: logged and ignored.
    STRICT_CONTRACTS: bool = _env_flag("SKYSPOTTER_STRICT_CONTRACTS", True)

    @staticmethod
    def image_path(image_ref: str) -> str | None:
        """Returns the on-disk path of a question image, or None if it is not bundled."""
        if not image_ref:
            return None

        safe_ref = "".join(c for c in image_ref if c.isalnum() or c in "_-.")
        for ext in (".jpg", ".jpeg", ".png"):
            path = os.path.join(GameConfig.IMAGE_DIR, f"{safe_ref}{ext}")
            if os.path.exists(path):
                return path
        return None
