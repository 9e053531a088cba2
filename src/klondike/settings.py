# settings.py - persisted engine settings (difficulty, undo depth, auto-finish pace)
import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Optional

from klondike.dealer import DIFFICULTIES
from klondike.history import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


@dataclass(frozen=True)
class EngineSettings:
    difficulty: str = "easy"
    history_limit: int = DEFAULT_HISTORY_LIMIT
    auto_finish_interval_ms: int = 180  # one auto move roughly every 0.18s


def default_settings() -> EngineSettings:
    return EngineSettings()


def settings_dir() -> str:
    # Explicit override first, then %APPDATA% on Windows, else ~/.klondike_engine
    override = os.environ.get("KLONDIKE_SETTINGS_DIR")
    if override:
        return override
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeEngine")
    return os.path.join(os.path.expanduser("~"), ".klondike_engine")


def settings_path() -> str:
    return os.path.join(settings_dir(), SETTINGS_FILENAME)


def _positive_int(value, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        value = int(value)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _merge(base: EngineSettings, data: dict) -> EngineSettings:
    difficulty = data.get("difficulty", base.difficulty)
    if difficulty not in DIFFICULTIES:
        logger.warning("Ignoring unknown difficulty %r in settings", difficulty)
        difficulty = base.difficulty
    return replace(
        base,
        difficulty=difficulty,
        history_limit=_positive_int(data.get("history_limit", base.history_limit), base.history_limit),
        auto_finish_interval_ms=_positive_int(
            data.get("auto_finish_interval_ms", base.auto_finish_interval_ms),
            base.auto_finish_interval_ms,
        ),
    )


def load_settings(path: Optional[str] = None) -> EngineSettings:
    """Read settings from disk, falling back to defaults for anything missing or bad."""
    path = path or settings_path()
    settings = default_settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return settings
    except (OSError, ValueError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Settings file %s does not hold an object; using defaults", path)
        return settings
    return _merge(settings, data)


def save_settings(settings: EngineSettings, path: Optional[str] = None) -> bool:
    path = path or settings_path()
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=2)
    except OSError as exc:
        logger.warning("Could not write settings to %s: %s", path, exc)
        return False
    return True
