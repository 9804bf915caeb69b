from __future__ import annotations

from typing import Tuple

from dinorun.constants import PARTICLE_FADE_TICKS

Color = Tuple[int, int, int]


class Particle:
    """Confetti dot that drifts in a straight line and fades out."""

    def __init__(self, pos, velocity, life: float, color: Color):
        self.pos = list(pos)
        self.velocity = list(velocity)
        self.life = life
        self.color = color

    @property
    def alpha(self) -> float:
        return max(0.0, min(1.0, self.life / PARTICLE_FADE_TICKS))

    def update(self) -> bool:
        """Advance one tick. Returns True once the particle has expired."""
        self.pos[0] += self.velocity[0]
        self.pos[1] += self.velocity[1]
        self.life -= 1
        return self.life <= 0
