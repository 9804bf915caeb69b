"""Simulation clock / game state machine.

One ``Simulation`` owns the whole session: player, obstacles, particles,
score bookkeeping, difficulty, music phase and the running / lost / won
status. The host drives it with ``step(dt)`` once per display refresh and
feeds it input through ``submit(intent)``.

Per-frame order (``step``):
    1. apply queued intents
    2. recompute game speed from score
    3. scroll background
    4. player physics
    5. spawner timer / spawn
    6. obstacles: move, prune, collide
    7. time-based score, high score, win check
    8. milestone bursts
    9. calm / danger phase and music
   10. particles

Game over is terminal: ``step`` becomes a no-op until ``restart``.
"""

from __future__ import annotations

import enum
import math
from typing import List

from dinorun.constants import (
    ABOUT_TO_END_SCORE,
    BACKGROUND_PARALLAX,
    BASE_SPEED,
    COLLISION_BURST,
    DANGER_END,
    DANGER_START,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    GROUND_HEIGHT,
    MAX_SPEED,
    MILESTONE_BURST,
    MILESTONE_STEP,
    SCORE_TICK_MS,
    SOUND_ABOUT_TO_END,
    SOUND_CALM,
    SOUND_CONGRATS,
    SOUND_DANGER,
    SOUND_DEATH,
    SOUND_START,
    SPEED_PER_POINT,
    WIN_SCORE,
)
from dinorun.entities import Obstacle, Player, Rect
from dinorun.logger import get_logger
from dinorun.particle import Particle
from dinorun.services import ServiceContainer
from dinorun.spawner import ObstacleSpawner

log = get_logger("simulation")

# Intents accepted by ``Simulation.submit``
JUMP = "jump"
DUCK_START = "duck_start"
DUCK_END = "duck_end"
TAP_RELEASE = "tap_release"  # touch released: un-duck, or jump if the gesture has not jumped yet
RESTART = "restart"
INTENTS = (JUMP, DUCK_START, DUCK_END, TAP_RELEASE, RESTART)


class Status(enum.Enum):
    RUNNING = "running"
    LOST = "lost"
    WON = "won"


class Phase(enum.Enum):
    CALM = "calm"
    DANGER = "danger"


def game_speed(score: int) -> float:
    return min(BASE_SPEED + score * SPEED_PER_POINT, MAX_SPEED)


def phase_for_score(score: int) -> Phase:
    return Phase.DANGER if DANGER_START <= score < DANGER_END else Phase.CALM


class Simulation:
    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        services: ServiceContainer | None = None,
        store=None,
        rng=None,
    ):
        self.services = services or ServiceContainer()
        self.store = store
        self.width = max(1, int(width))
        self.height = max(GROUND_HEIGHT + 1, int(height))
        self.player = Player(self.ground_y, self.services)
        self.spawner = ObstacleSpawner(rng)
        self.obstacles: List[Obstacle] = []
        self.high_score = store.high_score if store is not None else 0
        self._pending: List[str] = []
        self._reset_session()

    # ---- Read-only views ----
    @property
    def ground_y(self) -> float:
        return self.height - GROUND_HEIGHT

    @property
    def particles(self) -> List[Particle]:
        return self.services.particles.particles

    @property
    def game_over(self) -> bool:
        return self.status is not Status.RUNNING

    @property
    def won(self) -> bool:
        return self.status is Status.WON

    def player_rect(self) -> Rect:
        return self.player.rect()

    # ---- Session lifecycle ----
    def _reset_session(self) -> None:
        self.score = 0
        self.score_timer = 0.0
        self.speed = game_speed(0)
        self.background_x = 0.0
        self.clock_ms = 0.0
        self.milestone = 0
        self.phase = Phase.CALM
        self.about_to_end_played = False
        self.status = Status.RUNNING
        self.obstacles.clear()
        self.services.particles.clear()
        self.spawner.reset()
        self._pending.clear()

    def start(self) -> None:
        """Session start cues: the start jingle and the calm loop."""
        self.services.play(SOUND_START)
        self.services.play(SOUND_CALM)
        log.info("Session started; high score", self.high_score)

    def restart(self) -> bool:
        if not self.game_over:
            return False
        self._reset_session()
        self.player.reset()
        self.services.pause(SOUND_DANGER)
        self.services.replay(SOUND_CALM)
        log.info("Session restarted")
        return True

    def resize(self, width: int, height: int) -> None:
        old_ground = self.ground_y
        self.width = max(1, int(width))
        self.height = max(GROUND_HEIGHT + 1, int(height))
        dy = self.ground_y - old_ground
        if dy:
            self.player.ground_y = self.ground_y
            self.player.pos[1] += dy
            for obs in self.obstacles:
                obs.pos[1] += dy
        log.debug("Viewport resized", self.width, self.height)

    # ---- Input ----
    def submit(self, intent: str) -> None:
        if intent == RESTART:
            self.restart()
            return
        if intent not in INTENTS:
            log.warn("Unknown intent ignored", intent)
            return
        if self.game_over:
            return
        self._pending.append(intent)

    def _apply_intents(self) -> None:
        player = self.player
        for intent in self._pending:
            if intent == JUMP:
                player.jump()
            elif intent == DUCK_START:
                player.start_duck()
            elif intent == DUCK_END:
                player.end_duck()
            elif intent == TAP_RELEASE:
                if player.ducking:
                    player.end_duck()
                elif not player.has_jumped:
                    player.jump()
                player.end_gesture()
        self._pending.clear()

    # ---- Frame step ----
    def step(self, dt: float) -> None:
        if self.game_over:
            return
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            dt = -1.0
        if not math.isfinite(dt) or dt < 0:
            log.debug("Ignoring frame with invalid dt", dt)
            return

        self._apply_intents()
        self.clock_ms += dt
        self.speed = game_speed(self.score)
        self._scroll_background()
        self.player.update(dt)

        if self.spawner.tick(dt, self.score):
            self.obstacles.extend(self.spawner.spawn(self.width, self.ground_y))

        if not self._update_obstacles():
            self._update_score(dt)
            self._update_milestones()
            self._update_phase()

        self.services.particles.update()

    def _scroll_background(self) -> None:
        self.background_x -= self.speed * BACKGROUND_PARALLAX
        if self.background_x <= -self.width:
            self.background_x += self.width

    def _update_obstacles(self) -> bool:
        """Move, prune and collide obstacles. True if the player was hit."""
        player_rect = self.player.rect()
        for obs in self.obstacles.copy():
            obs.update(self.speed, self.clock_ms)
            if obs.off_screen():
                self.obstacles.remove(obs)
                continue
            if obs.collides_with(player_rect):
                self._on_collision(obs)
                return True
        return False

    def _on_collision(self, obs: Obstacle) -> None:
        self.services.emit_burst(self.player.center(), COLLISION_BURST)
        self.services.play(SOUND_DEATH)
        self.services.pause(SOUND_CALM, SOUND_DANGER)
        self.status = Status.LOST
        self.flush_high_score()
        log.info("Game over: hit", obs.kind, "at score", self.score)

    def flush_high_score(self) -> None:
        """Persist the record; called once the session ends and on exit."""
        if self.store is not None:
            self.store.flush()

    def _update_score(self, dt: float) -> None:
        self.score_timer += dt
        if self.score_timer < SCORE_TICK_MS:
            return
        inc = int(self.score_timer // SCORE_TICK_MS)
        self.score_timer -= inc * SCORE_TICK_MS
        self.score = min(WIN_SCORE, self.score + inc)
        if self.score > self.high_score:
            self.high_score = self.score
            if self.store is not None:
                self.store.high_score = self.high_score
        if self.score >= WIN_SCORE:
            self.status = Status.WON
            self.flush_high_score()
            log.info("Game won with score", self.score)

    def _update_milestones(self) -> None:
        boundary = self.milestone + MILESTONE_STEP
        while self.score >= boundary:
            self.services.emit_burst((self.width / 2, self.height / 2), MILESTONE_BURST)
            self.services.play(SOUND_CONGRATS)
            self.milestone = boundary
            log.debug("Milestone", boundary)
            boundary += MILESTONE_STEP

    def _update_phase(self) -> None:
        target = phase_for_score(self.score)
        if target is not self.phase:
            self.phase = target
            if target is Phase.DANGER:
                self.services.pause(SOUND_CALM)
                self.services.replay(SOUND_DANGER)
                self.about_to_end_played = False
            else:
                self.services.pause(SOUND_DANGER)
                self.services.replay(SOUND_CALM)
            log.info("Phase ->", target.value, "at score", self.score)
        if self.phase is Phase.DANGER and self.score >= ABOUT_TO_END_SCORE and not self.about_to_end_played:
            self.services.play(SOUND_ABOUT_TO_END)
            self.about_to_end_played = True


__all__ = [
    "Simulation",
    "Status",
    "Phase",
    "game_speed",
    "phase_for_score",
    "JUMP",
    "DUCK_START",
    "DUCK_END",
    "TAP_RELEASE",
    "RESTART",
    "INTENTS",
]
