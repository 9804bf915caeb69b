import json
import os

import pygame

from dinorun.logger import get_logger

log = get_logger("settings")

DATA_DIR = os.environ.get("DINORUN_DATA_DIR", "data")


def _volume(value, default: float) -> float:
    """Clamp a stored volume to [0, 1] in 0.1 steps; junk keeps the default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return max(0.0, min(1.0, round(value * 10) / 10))


class Settings:
    SETTINGS_FILE = os.path.join(DATA_DIR, "settings.json")

    def __init__(self):
        # Default settings
        self._music_volume = 0.6
        self._sound_volume = 0.8
        self._fullscreen = False
        self._dirty = False
        # Key bindings use pygame key integers; touch is handled separately by the router.
        self.key_bindings = {
            "GameState": {
                "jump": [pygame.K_SPACE, pygame.K_UP],
                "duck": [pygame.K_DOWN],
            },
            "GameOverState": {
                "restart": [pygame.K_r],
            },
        }
        self.load_settings()

    @property
    def music_volume(self):
        return self._music_volume

    @property
    def sound_volume(self):
        return self._sound_volume

    @property
    def fullscreen(self) -> bool:
        return self._fullscreen

    def load_settings(self):
        """Load settings from the JSON file."""
        if os.path.exists(self.SETTINGS_FILE):
            try:
                with open(self.SETTINGS_FILE, "r") as f:
                    data = json.load(f)
                    if not isinstance(data, dict):
                        raise ValueError("settings file does not hold an object")
                    self._music_volume = _volume(data.get("music_volume"), self._music_volume)
                    self._sound_volume = _volume(data.get("sound_volume"), self._sound_volume)
                    self._fullscreen = bool(data.get("fullscreen", self._fullscreen))

                    # Merge per action so bindings missing from the file keep their defaults
                    loaded_bindings = data.get("key_bindings", {})
                    for state, binds in loaded_bindings.items():
                        if state in self.key_bindings:
                            for action, keys in binds.items():
                                self.key_bindings[state][action] = keys

            except (ValueError, IOError) as e:
                log.warn("Error loading settings; regenerating", e)
                self._dirty = True
                self.flush()
        else:
            self._dirty = True
            self.flush()

    def flush(self):
        """Write settings to disk if dirty and clear dirty flag."""
        if not self._dirty:
            return
        data = {
            "music_volume": self._music_volume,
            "sound_volume": self._sound_volume,
            "fullscreen": self._fullscreen,
            "key_bindings": self.key_bindings,
        }
        try:
            os.makedirs(os.path.dirname(self.SETTINGS_FILE) or ".", exist_ok=True)
            with open(self.SETTINGS_FILE, "w") as f:
                json.dump(data, f, indent=4)
            self._dirty = False
            log.debug("Settings flushed")
        except IOError as e:
            log.error("Error saving settings", e)


settings = Settings()
