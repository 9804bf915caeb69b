import random

import pytest

from dinorun.particle_system import ParticleSystem
from dinorun.services import NullAudio, ServiceContainer
from dinorun.simulation import Simulation, Status
from dinorun.state_manager import GameOverState, GameState, State, StateManager


class DummyState(State):
    def __init__(self, label: str, tracker: list):
        self.label = label
        self.tracker = tracker

    def on_enter(self, previous):  # record transitions
        self.tracker.append(f"enter:{self.label}:{previous.label if previous else 'None'}")

    def on_exit(self, next_state):
        self.tracker.append(f"exit:{self.label}:{next_state.label if next_state else 'None'}")


class RecordingRenderer:
    def __init__(self):
        self.frames = 0

    def render(self, sim, surface, capture_sequence=None):
        self.frames += 1


def make_sim():
    rng = random.Random(3)
    audio = NullAudio()
    sim = Simulation(800, 600, services=ServiceContainer(audio=audio, particles=ParticleSystem(rng=rng)), rng=rng)
    sim.spawner.tick = lambda dt, score: False
    return sim, audio


def test_push_and_current():
    sm = StateManager()
    t = []
    a = DummyState("A", t)
    sm.push(a)
    assert sm.current is a
    assert t == ["enter:A:None"]


def test_push_push_pop():
    sm = StateManager()
    t = []
    a = DummyState("A", t)
    b = DummyState("B", t)
    sm.push(a)
    sm.push(b)
    assert sm.stack_size() == 2
    popped = sm.pop()
    assert popped is b
    assert sm.current is a
    assert t == ["enter:A:None", "enter:B:A", "exit:B:A"]


def test_set_replaces_stack():
    sm = StateManager()
    t = []
    a = DummyState("A", t)
    b = DummyState("B", t)
    c = DummyState("C", t)
    sm.push(a)
    sm.push(b)
    sm.set(c)
    assert sm.current is c
    assert sm.stack_size() == 1
    assert t == [
        "enter:A:None",
        "enter:B:A",
        "exit:B:C",
        "exit:A:None",
        "enter:C:None",
    ]


def test_pop_empty_returns_none():
    sm = StateManager()
    assert sm.pop() is None


def test_game_state_starts_music_and_steps_in_milliseconds():
    sim, audio = make_sim()
    sm = StateManager()
    sm.set(GameState(sim, RecordingRenderer()))
    assert ("play", "start") in audio.calls
    assert ("play", "calm") in audio.calls
    sm.update(0.25)
    assert sim.clock_ms == pytest.approx(250)
    assert sim.score == 2


def test_game_state_forwards_actions_as_intents():
    sim, _ = make_sim()
    sm = StateManager()
    sm.set(GameState(sim, RecordingRenderer()))
    sm.handle_actions(["jump", "bogus"])
    sm.update(0.016)
    assert sim.player.velocity < 0
    assert not sim.player.grounded


def test_game_over_overlay_freezes_and_restarts():
    sim, audio = make_sim()
    renderer = RecordingRenderer()
    sm = StateManager()
    game = GameState(sim, renderer)
    sm.set(game)
    sm.update(0.5)
    sim.status = Status.LOST
    assert game.game_over

    over = GameOverState(sim)
    sm.push(over)
    score = sim.score
    sm.update(1.0)
    assert sim.score == score  # only the top state steps

    sm.render(None)
    assert renderer.frames == 1  # overlay draws through the frozen game frame

    sm.handle_actions(["jump"])
    assert not over.closed

    sm.handle_actions(["restart"])
    assert over.closed
    assert sim.status is Status.RUNNING
    assert sim.score == 0
    sm.pop()
    assert sm.current is game
