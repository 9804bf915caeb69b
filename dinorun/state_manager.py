"""State management.

A minimal stack based state manager driving the application. ``GameState``
runs the simulation; when the session ends the app pushes a
``GameOverState`` overlay on top of it, which freezes stepping (only the
top state is updated) until a restart pops it again.

Usage Example (see ``app.py`` for the runnable harness):

    sm = StateManager()
    sm.set(GameState(sim, renderer))
    while running:
        sm.handle_actions(router.process(events, sm.current.name))
        sm.update(dt)
        sm.render(screen)
"""

from __future__ import annotations

from typing import List, Sequence

import pygame

from dinorun.logger import get_logger
from dinorun.renderer import Renderer
from dinorun.simulation import DUCK_END, DUCK_START, JUMP, RESTART, TAP_RELEASE, Simulation

_state_log = get_logger("state")


class State:
    """Base class for an application state.

    All methods are optional; the base implementations are no-ops.
    """

    name: str = "State"
    manager: "StateManager | None" = None

    # Lifecycle -----------------------------------------------------
    def on_enter(self, previous: "State | None") -> None:  # pragma: no cover - default no-op
        pass

    def on_exit(self, next_state: "State | None") -> None:  # pragma: no cover - default no-op
        pass

    # Main loop hooks -----------------------------------------------
    def handle_actions(self, actions: Sequence[str]) -> None:  # pragma: no cover
        pass

    def update(self, dt: float) -> None:  # pragma: no cover - default no-op
        pass

    def render(self, surface: pygame.Surface) -> None:  # pragma: no cover - default no-op
        pass


class StateManager:
    """Stack-based state manager.

    Only the top state receives loop callbacks, which lets overlay states
    sit on top of a frozen game state without discarding it.
    """

    def __init__(self) -> None:
        self._stack: List[State] = []
        _state_log.debug("StateManager init (empty stack)")

    # Introspection -------------------------------------------------
    @property
    def current(self) -> State | None:
        return self._stack[-1] if self._stack else None

    def stack_size(self) -> int:
        return len(self._stack)

    # Transitions ---------------------------------------------------
    def push(self, state: State) -> None:
        state.manager = self
        prev = self.current
        self._stack.append(state)
        state.on_enter(prev)
        _state_log.debug("push", state.name, "-> stack:", [s.name for s in self._stack])

    def pop(self) -> State | None:
        if not self._stack:
            return None
        top = self._stack.pop()
        next_state = self.current
        top.on_exit(next_state)
        _state_log.debug("pop", top.name, "-> stack:", [s.name for s in self._stack])
        return top

    def set(self, state: State) -> None:
        state.manager = self
        # Exit all existing states (LIFO) before setting new root.
        while self._stack:
            popped = self._stack.pop()
            popped.on_exit(None if not self._stack else state)
            _state_log.debug("discard", popped.name)
        self._stack.append(state)
        state.on_enter(None)
        _state_log.debug("set", state.name, "(root)")

    # Loop dispatch -------------------------------------------------
    def handle_actions(self, actions: Sequence[str]) -> None:
        if self.current:
            if actions:
                _state_log.debug("actions ->", self.current.name, actions)
            self.current.handle_actions(actions)

    def update(self, dt: float) -> None:
        if self.current:
            self.current.update(dt)

    def render(self, surface: pygame.Surface) -> None:
        if self.current:
            self.current.render(surface)


_GAME_ACTIONS = {
    "jump": JUMP,
    "duck_start": DUCK_START,
    "duck_end": DUCK_END,
    "tap_release": TAP_RELEASE,
}


class GameState(State):
    name = "GameState"

    def __init__(self, sim: Simulation, renderer: Renderer | None = None) -> None:
        self.sim = sim
        self._renderer = renderer

    @property
    def game_over(self) -> bool:
        return self.sim.game_over

    def on_enter(self, previous: "State | None") -> None:
        self.sim.start()

    def handle_actions(self, actions: Sequence[str]) -> None:
        for act in actions:
            intent = _GAME_ACTIONS.get(act)
            if intent is not None:
                self.sim.submit(intent)

    def update(self, dt: float) -> None:
        # StateManager hands out seconds; the simulation clock runs in milliseconds.
        self.sim.step(dt * 1000.0)

    def render(self, surface: pygame.Surface) -> None:
        if self._renderer is None:
            self._renderer = Renderer()
        self._renderer.render(self.sim, surface)


class GameOverState(State):
    """Overlay pushed over a finished GameState; waits for a restart."""

    name = "GameOverState"

    def __init__(self, sim: Simulation) -> None:
        self.sim = sim
        self.closed = False
        self._underlying: State | None = None

    def on_enter(self, previous: "State | None") -> None:
        self._underlying = previous
        _state_log.info("Game over overlay", "won" if self.sim.won else "lost", "score", self.sim.score)

    def handle_actions(self, actions: Sequence[str]) -> None:
        for act in actions:
            if act == "restart":
                self.sim.submit(RESTART)
                if not self.sim.game_over:
                    self.closed = True

    def render(self, surface: pygame.Surface) -> None:
        # The underlying game frame already carries the game-over overlay.
        if self._underlying is not None:
            self._underlying.render(surface)


__all__ = ["State", "StateManager", "GameState", "GameOverState"]
