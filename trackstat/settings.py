"""Settings loading and persistence."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import cast

SHOW_AHEAD_BEHIND_DATA = "show_ahead_behind_data"


class SettingsError(Exception):
    """Settings file is malformed."""


@dataclass
class Settings:
    """Application settings that gate trackstat features."""

    show_ahead_behind_data: bool = True


def global_settings_path() -> Path:
    return Path.home() / ".config" / "trackstat" / "settings.json"


def repo_settings_path(repo_root: Path) -> Path:
    return repo_root / ".trackstat" / "settings.json"


def _load_settings_file(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Invalid JSON in {path}") from exc

    if not isinstance(raw, dict):
        raise SettingsError(f"Invalid settings format in {path}")
    return cast(dict[str, object], raw)


def _expect_bool(value: object, key: str, path: Path) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"Invalid value for {key} in {path}: expected true or false")
    return value


def load_settings(repo_root: Path | None = None) -> Settings:
    """Load settings with precedence: repository > global > defaults."""
    settings = Settings()
    paths = [global_settings_path()]
    if repo_root is not None:
        paths.append(repo_settings_path(repo_root))

    for path in paths:
        raw = _load_settings_file(path)
        if SHOW_AHEAD_BEHIND_DATA in raw:
            settings.show_ahead_behind_data = _expect_bool(
                raw[SHOW_AHEAD_BEHIND_DATA], SHOW_AHEAD_BEHIND_DATA, path
            )
    return settings


def save_repo_setting(repo_root: Path, key: str, value: object) -> None:
    """Persist a single setting in the repository settings file."""
    path = repo_settings_path(repo_root)
    raw = _load_settings_file(path)
    raw[key] = value
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")
