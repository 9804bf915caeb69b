"""AssetManager

Centralized lazy loading and caching for images and sounds. The simulation
only ever sees opaque ids (``"player"``, ``"calm"``...); this module maps
them to files under ``data/images/`` and ``data/sfx/``.

Design:
- Singleton-style access via ``AssetManager.get()``.
- Image cache keyed by asset id; a missing or unreadable image is replaced
  by a flat placeholder so the game stays playable without artwork.
- Sound cache keyed by asset id; load errors propagate to the caller
  (``AudioService`` turns them into silence).
"""

from __future__ import annotations

import os
from typing import Dict

import pygame

from dinorun.constants import (
    IMAGE_BACKGROUND,
    IMAGE_BACKGROUND_DANGER,
    IMAGE_BIRD,
    IMAGE_CACTUS,
    IMAGE_PLAYER,
    SOUND_ABOUT_TO_END,
    SOUND_CALM,
    SOUND_CONGRATS,
    SOUND_DANGER,
    SOUND_DEATH,
    SOUND_JUMP,
    SOUND_START,
)
from dinorun.logger import get_logger

log = get_logger("assets")

IMG_ROOT = "data/images/"
SFX_ROOT = "data/sfx/"

IMAGE_FILES = {
    IMAGE_PLAYER: "dino.png",
    IMAGE_BIRD: "bird.png",
    IMAGE_CACTUS: "cactus.png",
    IMAGE_BACKGROUND: "background.png",
    IMAGE_BACKGROUND_DANGER: "background2.png",
}

SOUND_FILES = {
    SOUND_START: "start.ogg",
    SOUND_CALM: "happy.ogg",
    SOUND_JUMP: "jump.ogg",
    SOUND_DEATH: "dead.ogg",
    SOUND_DANGER: "creep.ogg",
    SOUND_CONGRATS: "congrats.ogg",
    SOUND_ABOUT_TO_END: "abouttoend.ogg",
}

# Placeholder colours used when artwork is missing
_PLACEHOLDER_COLORS = {
    IMAGE_PLAYER: (83, 83, 83),
    IMAGE_BIRD: (120, 60, 160),
    IMAGE_CACTUS: (40, 140, 60),
    IMAGE_BACKGROUND: (245, 240, 225),
    IMAGE_BACKGROUND_DANGER: (70, 20, 40),
}


class AssetManager:
    _instance: "AssetManager | None" = None

    def __init__(self, img_root: str = IMG_ROOT, sfx_root: str = SFX_ROOT) -> None:
        self.img_root = img_root
        self.sfx_root = sfx_root
        self._images: Dict[str, pygame.Surface] = {}
        self._sounds: Dict[str, pygame.mixer.Sound] = {}

    # Singleton accessor -------------------------------------------------
    @classmethod
    def get(cls) -> "AssetManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # Images -------------------------------------------------------------
    def get_image(self, name: str) -> pygame.Surface:
        surf = self._images.get(name)
        if surf is None:
            full = os.path.join(self.img_root, IMAGE_FILES.get(name, f"{name}.png"))
            try:
                surf = pygame.image.load(full)
            except (pygame.error, FileNotFoundError) as e:
                log.warn("Image missing, using placeholder:", full, e)
                surf = pygame.Surface((64, 64))
                surf.fill(_PLACEHOLDER_COLORS.get(name, (255, 0, 255)))
            else:
                # convert_alpha needs a display mode; headless tests have none.
                if pygame.display.get_init() and pygame.display.get_surface():
                    try:
                        surf = surf.convert_alpha()
                    except pygame.error:
                        pass
            self._images[name] = surf
        return surf

    def preload_images(self) -> None:
        for name in IMAGE_FILES:
            self.get_image(name)

    # Sounds -------------------------------------------------------------
    def get_sound(self, name: str) -> pygame.mixer.Sound:
        snd = self._sounds.get(name)
        if snd is None:
            full = os.path.join(self.sfx_root, SOUND_FILES.get(name, f"{name}.ogg"))
            snd = pygame.mixer.Sound(full)
            self._sounds[name] = snd
        return snd


__all__ = ["AssetManager", "IMAGE_FILES", "SOUND_FILES"]
