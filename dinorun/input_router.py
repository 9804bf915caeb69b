"""Centralized input routing.

Transforms raw pygame events into high-level *actions* depending on the
active state. States never parse events themselves.

Design:
- Keyboard: a dict from state name -> list of predicate rules built from
  ``settings.key_bindings``. Each rule is a function(event) -> action|None;
  the first matching rule wins for an event. Duplicate actions in one frame
  are collapsed preserving order of first occurrence.
- Touch: a single tracked gesture. Holding a finger down for
  ``TOUCH_DUCK_HOLD_MS`` emits ``duck_start``; lifting it emits
  ``duck_end`` if a duck started, otherwise ``tap_release``. Any touch
  while the game is over emits ``restart``.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

import pygame

from dinorun.constants import TOUCH_DUCK_HOLD_MS

Action = str
Rule = Callable[[pygame.event.Event], Action | None]

GAME_STATE = "GameState"
GAME_OVER_STATE = "GameOverState"


def _key_rule(key: int, action: Action, event_type=pygame.KEYDOWN) -> Rule:
    def _r(e: pygame.event.Event):
        if e.type == event_type and getattr(e, "key", None) == key:
            return action
        return None

    return _r


class InputRouter:
    """Maps pygame events to semantic actions for the active state."""

    def __init__(self, hold_ms: float = TOUCH_DUCK_HOLD_MS) -> None:
        self._rules: Dict[str, List[Rule]] = {}
        self.hold_ms = hold_ms
        self._touch_start: float | None = None
        self._touch_ducked = False
        self._register_default_rules()

    def _register_default_rules(self) -> None:
        from dinorun.settings import settings

        def bind(keys, action, event_type=pygame.KEYDOWN):
            return [_key_rule(k, action, event_type) for k in keys]

        game_binds = settings.key_bindings.get(GAME_STATE, {})
        game_rules: List[Rule] = []
        game_rules.extend(bind(game_binds.get("jump", []), "jump"))
        game_rules.extend(bind(game_binds.get("duck", []), "duck_start", pygame.KEYDOWN))
        game_rules.extend(bind(game_binds.get("duck", []), "duck_end", pygame.KEYUP))

        over_binds = settings.key_bindings.get(GAME_OVER_STATE, {})
        over_rules: List[Rule] = []
        over_rules.extend(bind(over_binds.get("restart", []), "restart"))

        self._rules.update({GAME_STATE: game_rules, GAME_OVER_STATE: over_rules})

    # ---- Touch ----
    def _touch_action(self, e: pygame.event.Event, state_name: str, now_ms: float) -> Action | None:
        if e.type == pygame.FINGERDOWN:
            if state_name == GAME_OVER_STATE:
                return "restart"
            self._touch_start = now_ms
            self._touch_ducked = False
            return None
        if e.type == pygame.FINGERUP:
            if self._touch_start is None:
                return None
            ducked = self._touch_ducked
            self._touch_start = None
            self._touch_ducked = False
            return "duck_end" if ducked else "tap_release"
        return None

    def _poll_touch_hold(self, state_name: str, now_ms: float) -> Action | None:
        if state_name != GAME_STATE or self._touch_start is None or self._touch_ducked:
            return None
        if now_ms - self._touch_start >= self.hold_ms:
            self._touch_ducked = True
            return "duck_start"
        return None

    def reset_touch(self) -> None:
        self._touch_start = None
        self._touch_ducked = False

    # ---- Main entry ----
    def process(
        self,
        events: Iterable[pygame.event.Event],
        state_name: str,
        now_ms: float | None = None,
    ) -> List[Action]:
        if now_ms is None:
            now_ms = pygame.time.get_ticks()
        rules = self._rules.get(state_name, [])
        actions: List[Action] = []

        def add(a: Action) -> None:
            if a not in actions:  # de-duplicate per frame
                actions.append(a)

        for e in events:
            a = self._touch_action(e, state_name, now_ms)
            if a:
                add(a)
                continue
            for rule in rules:
                a = rule(e)
                if a:
                    add(a)
                    break  # stop at first rule match for this event
        held = self._poll_touch_hold(state_name, now_ms)
        if held:
            add(held)
        return actions


__all__ = ["InputRouter", "Action", "GAME_STATE", "GAME_OVER_STATE"]
