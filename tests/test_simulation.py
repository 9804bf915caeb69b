import json
import random

import pytest

from dinorun.constants import PLAYER_X, STAND_SIZE
from dinorun.entities import Obstacle
from dinorun.highscore import HIGH_SCORE_KEY, HighScoreStore
from dinorun.particle_system import ParticleSystem
from dinorun.services import NullAudio, ServiceContainer
from dinorun.simulation import (
    DUCK_END,
    DUCK_START,
    JUMP,
    RESTART,
    TAP_RELEASE,
    Phase,
    Simulation,
    Status,
    game_speed,
    phase_for_score,
)


class MemoryStore:
    def __init__(self, high_score=0):
        self.high_score = high_score
        self.flushes = 0
        self.writes = []

    def flush(self):
        self.flushes += 1

    def __setattr__(self, key, value):
        if key == "high_score" and "writes" in self.__dict__:
            self.writes.append(value)
        super().__setattr__(key, value)


def make_sim(width=800, height=600, spawn=False, store=None, seed=1):
    rng = random.Random(seed)
    audio = NullAudio()
    services = ServiceContainer(audio=audio, particles=ParticleSystem(rng=rng))
    sim = Simulation(width, height, services=services, store=store, rng=rng)
    if not spawn:
        sim.spawner.tick = lambda dt, score: False
    return sim, audio


def plays(audio, name):
    return sum(1 for call in audio.calls if call == ("play", name))


# ---- Difficulty / phase helpers ----


def test_game_speed_is_monotonic_and_capped():
    speeds = [game_speed(s) for s in range(0, 2001)]
    assert speeds[0] == 8
    assert speeds == sorted(speeds)
    assert max(speeds) == 15
    assert game_speed(350) == 15


def test_phase_window():
    assert phase_for_score(999) is Phase.CALM
    assert phase_for_score(1000) is Phase.DANGER
    assert phase_for_score(1499) is Phase.DANGER
    assert phase_for_score(1500) is Phase.CALM


# ---- Scoring ----


@pytest.mark.parametrize("frames", [[100] * 10, [1000], [250, 250, 250, 250], [33, 67, 900]])
def test_score_rate_is_frame_rate_independent(frames):
    sim, _ = make_sim()
    for dt in frames:
        sim.step(dt)
        assert sim.player.grounded
    assert sim.score == 10


def test_fractional_time_carries_over():
    sim, _ = make_sim()
    sim.step(150)
    assert sim.score == 1
    sim.step(50)
    assert sim.score == 2
    assert sim.score_timer == 0


def test_high_score_persisted_when_exceeded():
    store = MemoryStore(high_score=3)
    sim, _ = make_sim(store=store)
    assert sim.high_score == 3
    sim.step(300)
    assert store.writes == []
    sim.step(100)
    assert sim.high_score == 4
    assert store.writes == [4]
    assert store.flushes == 0


def test_reaching_ceiling_wins_on_same_step():
    store = MemoryStore()
    sim, _ = make_sim(store=store)
    sim.score = 1999
    sim.milestone = 1900
    sim.step(1000)
    assert sim.score == 2000
    assert sim.status is Status.WON
    assert sim.game_over and sim.won
    assert store.flushes == 1
    sim.step(1000)
    assert sim.score == 2000


# ---- Milestones ----


def test_milestone_fires_once_when_jumping_past_boundary():
    sim, audio = make_sim()
    sim.score = 999
    sim.milestone = 900
    sim.step(600)
    assert sim.score == 1005
    assert len(sim.particles) == 30
    assert plays(audio, "congrats") == 1
    sim.step(100)
    assert len(sim.particles) == 30
    assert sim.milestone == 1000


def test_milestone_fires_for_every_boundary_crossed():
    sim, _ = make_sim()
    sim.score = 850
    sim.milestone = 800
    sim.step(25000)
    assert sim.score == 1100
    assert sim.milestone == 1100
    assert len(sim.particles) == 90


def test_no_milestone_at_session_start():
    sim, _ = make_sim()
    sim.step(100)
    assert sim.particles == []


# ---- Phase / music ----


def test_danger_phase_entry_and_about_to_end_cue():
    sim, audio = make_sim()
    sim.score = 999
    sim.milestone = 900
    sim.step(100)
    assert sim.phase is Phase.DANGER
    assert ("pause", "calm") in audio.calls
    assert plays(audio, "danger") == 1

    sim.score = 1399
    sim.milestone = 1300
    sim.step(100)
    assert plays(audio, "about_to_end") == 1
    sim.step(100)
    sim.step(100)
    assert plays(audio, "about_to_end") == 1
    assert plays(audio, "danger") == 1  # not restarted every frame

    sim.score = 1499
    sim.milestone = 1400
    sim.step(100)
    assert sim.phase is Phase.CALM
    assert ("pause", "danger") in audio.calls
    assert audio.is_playing("calm")


def test_about_to_end_rearmed_per_danger_entry():
    sim, audio = make_sim()
    sim.score = 1449
    sim.milestone = 1400
    sim.step(100)
    assert plays(audio, "about_to_end") == 1
    audio.finish("about_to_end")
    sim.score = 1600
    sim.milestone = 1600
    sim.step(100)
    assert sim.phase is Phase.CALM
    sim.score = 1450
    sim.step(100)
    assert sim.phase is Phase.DANGER
    assert plays(audio, "about_to_end") == 2


# ---- Obstacles / collisions ----


def test_obstacle_pruned_after_leaving_viewport():
    sim, _ = make_sim(width=800)
    bird = Obstacle.bird(800, 0, phase=0.0)
    sim.obstacles.append(bird)
    for _ in range(106):  # 848 < 800 + 50
        sim.step(0)
    assert bird in sim.obstacles
    sim.step(0)  # 856 >= 850
    assert bird not in sim.obstacles
    assert not sim.game_over


def test_collision_ends_game_with_burst_and_silence():
    sim, audio = make_sim()
    sim.step(50)
    sim.obstacles.append(Obstacle.cactus(PLAYER_X + 60, sim.ground_y))
    sim.step(50)
    assert sim.status is Status.LOST
    assert len(sim.particles) == 80
    assert plays(audio, "death") == 1
    assert ("pause", "calm") in audio.calls and ("pause", "danger") in audio.calls
    assert sim.score == 0  # scoring skipped on the fatal frame

    before = (sim.score, sim.clock_ms, list(sim.player.pos))
    sim.step(1000)
    assert (sim.score, sim.clock_ms, list(sim.player.pos)) == before


def test_record_run_writes_high_score_file_once_at_game_over(tmp_path):
    path = tmp_path / "highscore.json"
    sim, _ = make_sim(store=HighScoreStore(str(path)))
    for _ in range(600):
        sim.step(16)
    assert sim.score == 96
    assert sim.store.dirty
    assert not path.exists()

    sim.obstacles.append(Obstacle.cactus(PLAYER_X + 60, sim.ground_y))
    sim.step(16)
    assert sim.status is Status.LOST
    assert json.loads(path.read_text()) == {HIGH_SCORE_KEY: 96}
    assert not sim.store.dirty
    assert HighScoreStore(str(path)).high_score == 96


def test_ducking_slips_under_low_bird():
    sim, _ = make_sim()
    bird = Obstacle.bird(PLAYER_X + 30, sim.ground_y - 150, phase=0.0)
    sim.obstacles.append(bird)
    sim.submit(DUCK_START)
    sim.step(0)
    assert not sim.game_over


def test_spawner_adds_obstacles_at_right_edge():
    sim, _ = make_sim(spawn=True)
    sim.step(1501)
    assert sim.obstacles
    assert all(o.pos[0] <= sim.width for o in sim.obstacles)


# ---- Intents ----


def test_intents_apply_at_next_step():
    sim, _ = make_sim()
    sim.submit(JUMP)
    assert sim.player.grounded
    sim.step(16)
    assert not sim.player.grounded
    assert sim.player.velocity < 0


def test_duck_intents():
    sim, _ = make_sim()
    sim.submit(DUCK_START)
    sim.step(16)
    assert sim.player.ducking
    sim.submit(DUCK_END)
    sim.step(16)
    assert not sim.player.ducking


def test_tap_release_jumps_once_per_gesture():
    sim, _ = make_sim()
    sim.submit(JUMP)
    sim.step(16)
    while not sim.player.grounded:
        sim.step(16)
    sim.submit(TAP_RELEASE)  # gesture already jumped: only ends it
    sim.step(16)
    assert sim.player.grounded
    assert not sim.player.has_jumped
    sim.submit(TAP_RELEASE)
    sim.step(16)
    assert not sim.player.grounded


def test_tap_release_ends_duck():
    sim, _ = make_sim()
    sim.submit(DUCK_START)
    sim.step(16)
    sim.submit(TAP_RELEASE)
    sim.step(16)
    assert not sim.player.ducking
    assert sim.player.grounded


def test_unknown_intent_is_ignored():
    sim, _ = make_sim()
    sim.submit("fly")
    sim.step(16)
    assert sim.player.grounded


@pytest.mark.parametrize("dt", [-16, float("nan"), float("inf"), None])
def test_invalid_delta_is_zero_effect(dt):
    sim, _ = make_sim()
    sim.submit(JUMP)
    snapshot = (sim.score_timer, sim.clock_ms, list(sim.player.pos), sim.background_x)
    sim.step(dt)
    assert (sim.score_timer, sim.clock_ms, list(sim.player.pos), sim.background_x) == snapshot
    sim.step(16)
    assert not sim.player.grounded  # the queued jump survived the bad frame


def test_player_never_sinks_below_ground():
    sim, _ = make_sim(spawn=True, seed=7)
    rng = random.Random(3)
    for _ in range(600):
        if sim.game_over:
            break
        if rng.random() < 0.5:
            sim.submit(rng.choice([JUMP, DUCK_START, DUCK_END, TAP_RELEASE]))
        sim.step(16)
        x, y, w, h = sim.player_rect()
        assert y + h <= sim.ground_y
        assert (y + h == sim.ground_y) == sim.player.grounded


def test_background_wraps_within_one_viewport():
    sim, _ = make_sim(width=100)
    for _ in range(100):
        sim.step(0)
        assert -sim.width < sim.background_x <= 0


# ---- Lifecycle ----


def test_restart_only_from_game_over():
    sim, _ = make_sim()
    sim.step(500)
    assert sim.restart() is False
    sim.submit(RESTART)
    assert sim.score == 5


def test_restart_resets_session():
    sim, audio = make_sim()
    sim.score = 1200
    sim.milestone = 1100
    sim.step(100)
    sim.submit(DUCK_START)
    sim.step(16)
    sim.obstacles.append(Obstacle.cactus(PLAYER_X + 60, sim.ground_y))
    sim.step(16)
    assert sim.game_over

    sim.submit(RESTART)
    assert sim.status is Status.RUNNING
    assert sim.score == 0
    assert sim.obstacles == []
    assert sim.particles == []
    assert sim.phase is Phase.CALM
    assert sim.player.grounded and not sim.player.ducking
    assert sim.player.pos == [PLAYER_X, sim.ground_y - STAND_SIZE[1]]
    assert audio.is_playing("calm")
    assert not audio.is_playing("danger")
    assert sim.high_score == 1201


def test_movement_intents_dropped_while_game_over():
    sim, _ = make_sim()
    sim.status = Status.LOST
    sim.submit(JUMP)
    sim.submit(DUCK_START)
    assert sim._pending == []
    sim.submit(RESTART)
    sim.step(16)
    assert sim.player.grounded and not sim.player.ducking


def test_start_plays_intro_and_calm_loop():
    sim, audio = make_sim()
    sim.start()
    assert plays(audio, "start") == 1
    assert audio.is_playing("calm")


def test_resize_moves_ground_line_with_entities():
    sim, _ = make_sim(width=800, height=600)
    cactus = Obstacle.cactus(500, sim.ground_y)
    sim.obstacles.append(cactus)
    sim.resize(1024, 768)
    assert sim.ground_y == 718
    assert sim.player.pos[1] + STAND_SIZE[1] == 718
    assert cactus.pos[1] + cactus.height == 718
    sim.step(16)
    assert sim.player.grounded
