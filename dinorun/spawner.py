"""Obstacle spawning policy.

Decides *when* the next obstacle appears (an accumulating timer compared to
a score-dependent interval) and *what* appears (a single bird, a single
cactus or a small cactus cluster). Obstacles always enter at the right edge
of the viewport.
"""

from __future__ import annotations

import math
from typing import List

from dinorun.constants import (
    BASE_SPAWN_INTERVAL_MS,
    BIRD_ALTITUDE,
    BIRD_ALTITUDE_JITTER,
    CACTUS_PROBABILITY,
    CACTUS_SCALE_CLUSTER,
    CACTUS_SCALE_SOLO,
    CLUSTER_GAP,
    CLUSTER_MAX,
    CLUSTER_MIN,
    CLUSTER_PROBABILITY,
    MIN_SPAWN_INTERVAL_MS,
    SPAWN_INTERVAL_PER_POINT_MS,
)
from dinorun.entities import Obstacle
from dinorun.logger import get_logger
from dinorun.rng_service import RNGService

log = get_logger("spawner")


def spawn_interval(score: int) -> float:
    return max(MIN_SPAWN_INTERVAL_MS, BASE_SPAWN_INTERVAL_MS - score * SPAWN_INTERVAL_PER_POINT_MS)


class ObstacleSpawner:
    def __init__(self, rng=None):
        self.rng = rng or RNGService.get()
        self.timer = 0.0

    def reset(self) -> None:
        self.timer = 0.0

    def tick(self, dt: float, score: int) -> bool:
        """Accumulate ``dt``; True when a spawn is due (the timer restarts)."""
        self.timer += dt
        if self.timer > spawn_interval(score):
            self.timer = 0.0
            return True
        return False

    def spawn(self, x: float, ground_y: float) -> List[Obstacle]:
        if self.rng.random() < CACTUS_PROBABILITY:
            return self._spawn_cacti(x, ground_y)
        return [self._spawn_bird(x, ground_y)]

    def _spawn_cacti(self, x: float, ground_y: float) -> List[Obstacle]:
        rng = self.rng
        count = 1
        if rng.random() < CLUSTER_PROBABILITY:
            count = rng.randint(CLUSTER_MIN, CLUSTER_MAX)
        clustered = count > 1
        variance = CACTUS_SCALE_CLUSTER if clustered else CACTUS_SCALE_SOLO
        group = []
        for _ in range(count):
            cactus = Obstacle.cactus(x, ground_y, 1 + rng.random() * variance, clustered=clustered)
            group.append(cactus)
            x += cactus.width + CLUSTER_GAP
        log.debug("spawn cacti", count)
        return group

    def _spawn_bird(self, x: float, ground_y: float) -> Obstacle:
        y = ground_y - BIRD_ALTITUDE - self.rng.random() * BIRD_ALTITUDE_JITTER
        log.debug("spawn bird at", round(y))
        return Obstacle.bird(x, y, self.rng.random() * math.pi * 2)


__all__ = ["ObstacleSpawner", "spawn_interval"]
