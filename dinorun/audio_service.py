"""AudioService

pygame.mixer implementation of the ``AudioPort`` used by the simulation.

- Sounds are addressed by id and loaded lazily through ``AssetManager``.
- The two background tracks (calm / danger) loop forever; everything else
  is a one-shot.
- Volumes follow ``settings.music_volume`` (loops) and
  ``settings.sound_volume`` (one-shots).
- Playback is fire-and-forget: load or mixer errors are logged once and
  the sound stays silent.

A mixer ``Sound`` cannot seek, so ``rewind`` stops the sound; the next
``play`` then starts from the beginning.
"""

from __future__ import annotations

import os
from typing import Dict

import pygame

from dinorun.asset_manager import AssetManager
from dinorun.constants import (
    SOUND_ABOUT_TO_END,
    SOUND_CALM,
    SOUND_CONGRATS,
    SOUND_DANGER,
    SOUND_DEATH,
    SOUND_JUMP,
    SOUND_START,
)
from dinorun.logger import get_logger
from dinorun.settings import settings

log = get_logger("audio")

LOOPING = {SOUND_CALM, SOUND_DANGER}

# Per-sound base volume multipliers
_BASE_VOLUME = {
    SOUND_START: 1.0,
    SOUND_JUMP: 0.7,
    SOUND_DEATH: 1.0,
    SOUND_CONGRATS: 0.8,
    SOUND_ABOUT_TO_END: 1.0,
}


class AudioService:
    _instance: "AudioService | None" = None

    def __init__(self, assets: AssetManager | None = None) -> None:
        self.enabled = True
        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init()
            except pygame.error:
                # No audio device: retry on SDL's dummy driver before giving up.
                os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
                try:
                    pygame.mixer.init()
                except pygame.error as e:
                    log.warn("Audio disabled; mixer unavailable", e)
                    self.enabled = False
        self._am = assets or AssetManager.get()
        self._sounds: Dict[str, pygame.mixer.Sound | None] = {}
        self._channels: Dict[str, pygame.mixer.Channel] = {}

    @classmethod
    def get(cls) -> "AudioService":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _sound(self, name: str) -> pygame.mixer.Sound | None:
        if not self.enabled:
            return None
        if name not in self._sounds:
            try:
                snd = self._am.get_sound(name)
            except (pygame.error, FileNotFoundError) as e:
                log.warn("Sound unavailable, muting", name, e)
                snd = None
            self._sounds[name] = snd
            if snd is not None:
                self._apply_volume(name, snd)
        return self._sounds[name]

    # Volume management --------------------------------------------------
    def _apply_volume(self, name: str, snd: pygame.mixer.Sound) -> None:
        if name in LOOPING:
            snd.set_volume(settings.music_volume)
        else:
            snd.set_volume(settings.sound_volume * _BASE_VOLUME.get(name, 1.0))

    # AudioPort ------------------------------------------------------------
    def play(self, name: str) -> None:
        snd = self._sound(name)
        if snd is None:
            return
        try:
            channel = snd.play(-1 if name in LOOPING else 0)
        except pygame.error:
            return
        if channel is not None:
            self._channels[name] = channel

    def pause(self, name: str) -> None:
        snd = self._sounds.get(name)
        if snd is None:
            return
        try:
            snd.stop()
        except pygame.error:
            pass
        self._channels.pop(name, None)

    def rewind(self, name: str) -> None:
        self.pause(name)

    def is_playing(self, name: str) -> bool:
        channel = self._channels.get(name)
        if channel is None:
            return False
        try:
            return bool(channel.get_busy()) and channel.get_sound() is self._sounds.get(name)
        except pygame.error:
            return False

    def stop_all(self) -> None:
        for name in list(self._channels):
            self.pause(name)


__all__ = ["AudioService", "LOOPING"]
