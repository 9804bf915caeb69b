from __future__ import annotations

import math
from typing import Tuple

from dinorun.constants import (
    BIRD_BOB_AMPLITUDE,
    BIRD_BOB_PERIOD_MS,
    BIRD_SIZE,
    CACTUS_BASE_SIZE,
    DUCK_SIZE,
    FAST_FALL_FACTOR,
    GRAVITY_ACCEL,
    JUMP_VELOCITY,
    PLAYER_X,
    SOUND_JUMP,
    STAND_SIZE,
)
from dinorun.services import ServiceContainer

Rect = Tuple[float, float, float, float]


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Axis-aligned overlap test on closed intervals (touching edges collide)."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return not (ax > bx + bw or ax + aw < bx or ay > by + bh or ay + ah < by)


class Player:
    def __init__(self, ground_y: float, services: ServiceContainer | None = None):
        self.services = services
        self.ground_y = ground_y
        self.pos = [PLAYER_X, ground_y - STAND_SIZE[1]]
        self.velocity = 0.0
        self.ducking = False
        self.grounded = True
        # Set by a jump, cleared when the touch gesture that caused it ends.
        self.has_jumped = False

    @property
    def size(self) -> Tuple[int, int]:
        return DUCK_SIZE if self.ducking else STAND_SIZE

    def rect(self) -> Rect:
        w, h = self.size
        return (self.pos[0], self.pos[1], w, h)

    def center(self) -> Tuple[float, float]:
        w, h = self.size
        return (self.pos[0] + w / 2, self.pos[1] + h / 2)

    def _set_posture(self, ducking: bool) -> None:
        # Keep the bottom edge where it is so the hitbox stays on the ground.
        bottom = self.pos[1] + self.size[1]
        self.ducking = ducking
        self.pos[1] = bottom - self.size[1]

    # --- Intents ---
    def jump(self) -> bool:
        if not self.grounded or self.ducking:
            return False
        self.velocity = JUMP_VELOCITY
        self.grounded = False
        self.has_jumped = True
        if self.services is not None:
            self.services.play(SOUND_JUMP)
        return True

    def start_duck(self) -> None:
        if self.grounded and not self.ducking:
            self._set_posture(True)

    def end_duck(self) -> None:
        if self.ducking:
            self._set_posture(False)

    def end_gesture(self) -> None:
        self.has_jumped = False

    # --- Physics ---
    def apply_gravity(self) -> None:
        self.velocity += GRAVITY_ACCEL
        if not self.grounded and self.ducking:
            self.velocity += GRAVITY_ACCEL * (FAST_FALL_FACTOR - 1)
        self.pos[1] += self.velocity

    def resolve_ground(self) -> None:
        height = self.size[1]
        if self.pos[1] + height >= self.ground_y:
            self.pos[1] = self.ground_y - height
            self.velocity = 0.0
            self.grounded = True
        else:
            self.grounded = False

    def update(self, dt: float = 0.0) -> None:
        """Advance one frame. Kinematics are per frame; ``dt`` is not used."""
        self.apply_gravity()
        self.resolve_ground()

    def reset(self) -> None:
        self.pos = [PLAYER_X, self.ground_y - STAND_SIZE[1]]
        self.velocity = 0.0
        self.grounded = True
        self.ducking = False
        self.has_jumped = False


class Obstacle:
    """Cactus or bird. The two kinds only differ in data, not behaviour."""

    CACTUS = "cactus"
    BIRD = "bird"

    def __init__(self, kind: str, pos, size, phase: float = 0.0, clustered: bool = False):
        self.kind = kind
        self.pos = list(pos)
        self.size = tuple(size)
        self.phase = phase
        self.clustered = clustered

    @classmethod
    def cactus(cls, x: float, ground_y: float, scale: float = 1.0, clustered: bool = False) -> "Obstacle":
        w = CACTUS_BASE_SIZE[0] * scale
        h = CACTUS_BASE_SIZE[1] * scale
        return cls(cls.CACTUS, (x, ground_y - h), (w, h), clustered=clustered)

    @classmethod
    def bird(cls, x: float, y: float, phase: float) -> "Obstacle":
        return cls(cls.BIRD, (x, y), BIRD_SIZE, phase=phase)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def rect(self) -> Rect:
        return (self.pos[0], self.pos[1], self.size[0], self.size[1])

    def update(self, speed: float, clock_ms: float) -> None:
        self.pos[0] -= speed
        if self.kind == self.BIRD:
            self.pos[1] += math.sin(clock_ms / BIRD_BOB_PERIOD_MS + self.phase) * BIRD_BOB_AMPLITUDE

    def off_screen(self) -> bool:
        return self.pos[0] + self.size[0] <= 0

    def collides_with(self, rect: Rect) -> bool:
        return rects_overlap(rect, self.rect())


__all__ = ["Player", "Obstacle", "rects_overlap", "Rect"]
