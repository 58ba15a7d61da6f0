"""Editor settings and per-document state persistence.

Settings live in a JSON file in the OS-appropriate config directory:

    {
      "editor": {"inset_left": 4, "scroll_policy": "minimal", ...},
      "documents": {"/abs/path.txt": {"row": 12, "grapheme": 3}}
    }

Unknown keys are ignored and invalid values fall back to the defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .position import Boundary

logger = logging.getLogger(__name__)

EDITOR_SECTION = "editor"
DOCUMENTS_SECTION = "documents"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_SCROLL_POLICIES = (EditorConstants.SCROLL_POLICY_MINIMAL, EditorConstants.SCROLL_POLICY_LEGACY)


@dataclass
class EditorSettings:
    inset_top: int = EditorConstants.DEFAULT_INSET_TOP
    inset_right: int = EditorConstants.DEFAULT_INSET_RIGHT
    inset_left: int = EditorConstants.DEFAULT_INSET_LEFT
    inset_bottom: int = EditorConstants.DEFAULT_INSET_BOTTOM
    strip_carriage_return: bool = True
    scroll_policy: str = EditorConstants.DEFAULT_SCROLL_POLICY
    log_level: str = "WARNING"

    def boundary(self) -> Boundary:
        return Boundary(top=self.inset_top, right=self.inset_right,
                        left=self.inset_left, bottom=self.inset_bottom)


class SettingsPersistence:
    """Manages persistent storage of editor settings and per-document state.

    Per-document entries are indexed by the absolute path of the document.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize settings persistence."""
        if config_dir is None:
            config_dir = platformdirs.user_config_dir(EditorConstants.APP_NAME, EditorConstants.APP_AUTHOR)
        self._config_dir = Path(config_dir)
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME
        self._settings_cache: Optional[Dict[str, Any]] = None

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all_settings(self) -> Dict[str, Any]:
        """Load the whole settings file, or an empty dict if it is missing or unreadable."""
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Any]) -> bool:
        """Save all settings to disk atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix(EditorConstants.ATOMIC_SAVE_SUFFIX)
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
            self._settings_cache = settings
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._load_all_settings().get(name, {})
        if not isinstance(section, dict):
            logger.warning(f"Settings section {name!r} is not a dict, ignoring")
            return {}
        return section

    # --- Editor settings ---

    def load_editor_settings(self) -> EditorSettings:
        """Return the editor settings, with defaults for anything missing or invalid."""
        settings = EditorSettings()
        stored = self._section(EDITOR_SECTION)
        known = {f.name for f in fields(EditorSettings)}
        for key, value in stored.items():
            if key not in known:
                continue
            if not self.validate_setting(key, value):
                logger.warning(f"Ignoring invalid setting {key}={value!r}")
                continue
            setattr(settings, key, value.upper() if key == "log_level" else value)
        return settings

    def save_editor_settings(self, settings: EditorSettings) -> bool:
        all_settings = dict(self._load_all_settings())
        all_settings[EDITOR_SECTION] = asdict(settings)
        return self._save_all_settings(all_settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a single editor setting value."""
        if key.startswith("inset_"):
            # bool is an int subclass but never a valid inset
            return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 20
        if key == "strip_carriage_return":
            return isinstance(value, bool)
        if key == "scroll_policy":
            return value in _SCROLL_POLICIES
        if key == "log_level":
            return isinstance(value, str) and value.upper() in _LOG_LEVELS
        # Unknown settings are considered valid (forward compatibility)
        return True

    # --- Per-document state ---

    def load_document_position(self, document_path: Optional[str]) -> Optional[tuple[int, int]]:
        """Return the remembered ``(row, grapheme)`` for a document, if any."""
        if document_path is None:
            return None
        entry = self._section(DOCUMENTS_SECTION).get(os.path.abspath(document_path))
        if not isinstance(entry, dict):
            return None
        row = entry.get("row")
        grapheme = entry.get("grapheme")
        if not isinstance(row, int) or not isinstance(grapheme, int) or row < 0 or grapheme < 0:
            return None
        return row, grapheme

    def save_document_position(self, document_path: Optional[str], row: int, grapheme: int) -> bool:
        if document_path is None:
            return False
        all_settings = dict(self._load_all_settings())
        documents = dict(self._section(DOCUMENTS_SECTION))
        documents[os.path.abspath(document_path)] = {"row": row, "grapheme": grapheme}
        all_settings[DOCUMENTS_SECTION] = documents
        return self._save_all_settings(all_settings)

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
