"""Application entry harness.

Opens the window, wires the services into a ``Simulation`` and drives it
through the ``StateManager``: ``GameState`` while running, a pushed
``GameOverState`` overlay once the session ends.
"""

from __future__ import annotations

import pygame

from dinorun.asset_manager import AssetManager
from dinorun.audio_service import AudioService
from dinorun.highscore import HighScoreStore
from dinorun.input_router import InputRouter
from dinorun.logger import get_logger
from dinorun.particle_system import ParticleSystem
from dinorun.renderer import Renderer
from dinorun.services import ServiceContainer
from dinorun.settings import settings
from dinorun.simulation import Simulation
from dinorun.state_manager import GameOverState, GameState, StateManager

log = get_logger("app")


def main():
    pygame.init()
    pygame.display.set_caption("Dino Run")
    if settings.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode((1280, 720), pygame.RESIZABLE)
    clock = pygame.time.Clock()

    assets = AssetManager.get()
    assets.preload_images()
    audio = AudioService.get()
    services = ServiceContainer(audio=audio, particles=ParticleSystem())
    width, height = screen.get_size()
    sim = Simulation(width, height, services=services, store=HighScoreStore())

    sm = StateManager()
    router = InputRouter()
    sm.set(GameState(sim, Renderer(assets)))

    running = True
    while running:
        # --- Single central event poll ---
        events = pygame.event.get()
        for e in events:
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE:
                sim.resize(e.w, e.h)

        current_name = sm.current.name if sm.current else ""
        actions = router.process(events, current_name)
        sm.handle_actions(actions)

        cur = sm.current
        if isinstance(cur, GameOverState) and cur.closed:
            sm.pop()
            router.reset_touch()

        # --- Update & Render cycle ---
        dt = clock.tick(60) / 1000.0  # 60 FPS cap; dt in seconds
        sm.update(dt)

        cur = sm.current
        if isinstance(cur, GameState) and cur.game_over:
            sm.push(GameOverState(sim))

        current_surface = pygame.display.get_surface()
        if current_surface is not None and current_surface != screen:
            screen = current_surface
        if screen.get_size() != (sim.width, sim.height):
            sim.resize(*screen.get_size())
        sm.render(screen)
        pygame.display.flip()

    audio.stop_all()
    sim.flush_high_score()
    settings.flush()
    log.info("Exiting; high score", sim.high_score)
    pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
