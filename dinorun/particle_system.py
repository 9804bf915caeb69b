"""Central ParticleSystem.

Owns every live particle, spawns them in bursts and prunes them once their
lifetime runs out. Particles never interact with the player or obstacles;
they only exist to be drawn.

Minimal public API: ``spawn_burst(...)``, ``update()``, ``clear()`` and the
``particles`` list the renderer iterates.
"""

from __future__ import annotations

from typing import List, Tuple

import pygame

from dinorun.constants import PARTICLE_LIFE_JITTER, PARTICLE_LIFE_MIN, PARTICLE_SPEED
from dinorun.particle import Color, Particle
from dinorun.rng_service import RNGService


def random_hue_color(rng) -> Color:
    """Fully saturated colour with a random hue (hsl(h, 100%, 50%))."""
    c = pygame.Color(0, 0, 0)
    c.hsla = (rng.random() * 360, 100, 50, 100)
    return (c.r, c.g, c.b)


class ParticleSystem:
    def __init__(self, rng=None):
        self.rng = rng or RNGService.get()
        self.particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    # ---- Spawn helpers ----
    def spawn_particle(self, pos: Tuple[float, float], color: Color | None = None) -> Particle:
        rng = self.rng
        velocity = (
            (rng.random() - 0.5) * PARTICLE_SPEED,
            (rng.random() - 0.5) * PARTICLE_SPEED,
        )
        life = PARTICLE_LIFE_MIN + rng.random() * PARTICLE_LIFE_JITTER
        p = Particle(pos, velocity, life, color or random_hue_color(rng))
        self.particles.append(p)
        return p

    def spawn_burst(self, pos: Tuple[float, float], count: int) -> List[Particle]:
        return [self.spawn_particle(pos) for _ in range(max(0, int(count)))]

    # ---- Update ----
    def update(self):
        for p in self.particles.copy():
            if p.update():  # True => dead
                self.particles.remove(p)

    def clear(self):
        self.particles.clear()


__all__ = ["ParticleSystem", "random_hue_color"]
