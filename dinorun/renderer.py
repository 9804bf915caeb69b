"""Frame composition.

Draws a ``Simulation`` onto a pygame surface. The renderer only reads
simulation state; nothing here feeds back into the game.

Layer Order (bottom -> top):
1. Background (calm layer, danger layer cross-faded in by score)
2. Ground strip
3. Player and obstacles
4. Particles
5. Danger tint (pulsing radial glow during the danger phase)
6. HUD (score / high score)
7. Game-over overlay (only while the session is over)

``capture_sequence`` records the executed layers so tests can assert the
order without sampling pixels.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

import pygame

from dinorun.asset_manager import AssetManager
from dinorun.constants import (
    DANGER_END,
    DANGER_PEAK,
    DANGER_START,
    GROUND_HEIGHT,
    IMAGE_BACKGROUND,
    IMAGE_BACKGROUND_DANGER,
    IMAGE_BIRD,
    IMAGE_CACTUS,
    IMAGE_PLAYER,
    PARTICLE_RADIUS,
)
from dinorun.entities import Obstacle
from dinorun.logger import get_logger
from dinorun.simulation import Phase, Simulation

_log = get_logger("renderer")

GROUND_COLOR = (51, 51, 51)
HUD_COLOR = (255, 215, 0)
SHADOW_COLOR = (0, 0, 0)
TINT_INNER = (255, 215, 0)
TINT_OUTER = (255, 69, 0)
TINT_PEAK_ALPHA = 0.3
OVERLAY_ALPHA = 204


def blend_alpha(score: int) -> float:
    """Opacity of the danger background: a triangle over the danger window."""
    if score < DANGER_START or score >= DANGER_END:
        return 0.0
    if score < DANGER_PEAK:
        return (score - DANGER_START) / (DANGER_PEAK - DANGER_START)
    return (DANGER_END - score) / (DANGER_END - DANGER_PEAK)


def pulse(time_ms: float, period: float = 200.0) -> float:
    return (math.sin(time_ms / period) + 1) / 2


class Renderer:
    """High-level frame orchestrator.

    Usage:
        r = Renderer()
        r.render(sim, window_surface)
    """

    def __init__(self, assets: AssetManager | None = None) -> None:
        self.assets = assets or AssetManager.get()
        self._scaled: Dict[Tuple[str, int, int], pygame.Surface] = {}
        self._tint: pygame.Surface | None = None
        self._background_size: Tuple[int, int] | None = None
        self._fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}

    # ---- Cached resources ----
    def _image(self, name: str, size) -> pygame.Surface:
        w, h = max(1, int(size[0])), max(1, int(size[1]))
        key = (name, w, h)
        surf = self._scaled.get(key)
        if surf is None:
            surf = pygame.transform.scale(self.assets.get_image(name), (w, h))
            self._scaled[key] = surf
        return surf

    def _drop_scaled(self, *names: str) -> None:
        for key in [k for k in self._scaled if k[0] in names]:
            del self._scaled[key]

    def _font(self, size: int, bold: bool = False) -> pygame.font.Font:
        key = (size, bold)
        font = self._fonts.get(key)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.SysFont("helvetica", size, bold=bold)
            self._fonts[key] = font
        return font

    def _tint_surface(self, size) -> pygame.Surface:
        if self._tint is None or self._tint.get_size() != size:
            w, h = size
            surf = pygame.Surface(size, pygame.SRCALPHA)
            radius = max(1, int(w / 1.5))
            center = (w // 2, h // 2)
            for r in range(radius, 0, -4):
                t = r / radius
                color = tuple(int(a + (b - a) * t) for a, b in zip(TINT_INNER, TINT_OUTER))
                pygame.draw.circle(surf, (*color, int(255 * (1 - t))), center, r)
            self._tint = surf
        return self._tint

    def _text(self, surface, text: str, font, pos, center: bool = False) -> None:
        for offset, color in (((2, 2), SHADOW_COLOR), ((0, 0), HUD_COLOR)):
            img = font.render(text, True, color)
            x, y = pos
            if center:
                x -= img.get_width() // 2
                y -= img.get_height() // 2
            surface.blit(img, (x + offset[0], y + offset[1]))

    # ---- Frame ----
    def render(
        self,
        sim: Simulation,
        surface: pygame.Surface,
        capture_sequence: Optional[List[str]] = None,
    ) -> None:
        seq = capture_sequence
        size = surface.get_size()

        self._render_background(sim, surface)
        if seq is not None:
            seq.append("background")

        surface.fill(GROUND_COLOR, (0, sim.ground_y, size[0], GROUND_HEIGHT))
        if seq is not None:
            seq.append("ground")

        px, py, pw, ph = sim.player_rect()
        surface.blit(self._image(IMAGE_PLAYER, (pw, ph)), (px, py))
        for obs in sim.obstacles:
            name = IMAGE_BIRD if obs.kind == Obstacle.BIRD else IMAGE_CACTUS
            surface.blit(self._image(name, obs.size), (obs.pos[0], obs.pos[1]))
        if seq is not None:
            seq.append("entities")

        self._render_particles(sim, surface)
        if seq is not None:
            seq.append("particles")

        if sim.phase is Phase.DANGER:
            tint = self._tint_surface(size)
            tint.set_alpha(int(255 * TINT_PEAK_ALPHA * pulse(sim.clock_ms)))
            surface.blit(tint, (0, 0))
            if seq is not None:
                seq.append("danger_tint")

        font = self._font(40, bold=True)
        self._text(surface, f"Score: {sim.score}", font, (20, 20))
        self._text(surface, f"High Score: {sim.high_score}", font, (20, 70))
        if seq is not None:
            seq.append("hud")

        if sim.game_over:
            self.render_game_over(sim, surface, pygame.time.get_ticks())
            if seq is not None:
                seq.append("game_over")

    def _render_background(self, sim: Simulation, surface: pygame.Surface) -> None:
        size = surface.get_size()
        if size != self._background_size:
            # Window resized: full-screen layers at the old size are never drawn again.
            self._drop_scaled(IMAGE_BACKGROUND, IMAGE_BACKGROUND_DANGER)
            self._background_size = size
        bx = int(sim.background_x)
        calm = self._image(IMAGE_BACKGROUND, size)
        surface.blit(calm, (bx, 0))
        surface.blit(calm, (bx + size[0], 0))
        alpha = blend_alpha(sim.score)
        if alpha > 0:
            danger = self._image(IMAGE_BACKGROUND_DANGER, size)
            danger.set_alpha(int(255 * alpha))
            surface.blit(danger, (bx, 0))
            surface.blit(danger, (bx + size[0], 0))

    def _render_particles(self, sim: Simulation, surface: pygame.Surface) -> None:
        if not sim.particles:
            return
        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        for p in sim.particles:
            color = (*p.color, int(255 * p.alpha))
            pygame.draw.circle(layer, color, (int(p.pos[0]), int(p.pos[1])), PARTICLE_RADIUS)
        surface.blit(layer, (0, 0))

    def render_game_over(self, sim: Simulation, surface: pygame.Surface, time_ms: float) -> None:
        w, h = surface.get_size()
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, OVERLAY_ALPHA))
        surface.blit(overlay, (0, 0))
        message = "YEY!" if sim.won else "patay"
        bob = pulse(time_ms, period=300.0) * 10
        self._text(surface, message, self._font(60, bold=True), (w // 2, h // 2 - 50 - bob), center=True)
        self._text(surface, "Press R to Restart", self._font(30), (w // 2, h // 2 + 20), center=True)


__all__ = ["Renderer", "blend_alpha", "pulse"]
