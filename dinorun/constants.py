"""Gameplay and tuning constants.

All distances are in viewport pixels, velocities in pixels per frame and
timers in milliseconds.
"""

# Viewport
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
GROUND_HEIGHT = 50  # ground strip thickness; ground line = height - this

# Player
PLAYER_X = 50
STAND_SIZE = (100, 100)
DUCK_SIZE = (120, 60)
GRAVITY_ACCEL = 0.6  # added to vertical velocity every frame
JUMP_VELOCITY = -15
FAST_FALL_FACTOR = 2  # gravity multiplier while airborne and ducking

# Difficulty
BASE_SPEED = 8
SPEED_PER_POINT = 0.02
MAX_SPEED = 15
BACKGROUND_PARALLAX = 0.5  # background scrolls at half the obstacle speed

# Spawning
BASE_SPAWN_INTERVAL_MS = 1500
MIN_SPAWN_INTERVAL_MS = 1000
SPAWN_INTERVAL_PER_POINT_MS = 5
CACTUS_PROBABILITY = 0.6
CLUSTER_PROBABILITY = 0.3
CLUSTER_MIN = 2
CLUSTER_MAX = 3
CLUSTER_GAP = 10
CACTUS_BASE_SIZE = (50, 50)
CACTUS_SCALE_SOLO = 0.5  # solitary cactus scale in [1, 1 + this)
CACTUS_SCALE_CLUSTER = 0.3
BIRD_SIZE = (50, 50)
BIRD_ALTITUDE = 150  # bird top sits this far above the ground line...
BIRD_ALTITUDE_JITTER = 50  # ...plus up to this much more
BIRD_BOB_AMPLITUDE = 1.5
BIRD_BOB_PERIOD_MS = 200

# Score / phases
SCORE_TICK_MS = 100  # one point per tick
WIN_SCORE = 2000
MILESTONE_STEP = 100
DANGER_START = 1000
DANGER_END = 1500
DANGER_PEAK = 1250  # cross-fade peak inside the danger window
ABOUT_TO_END_SCORE = 1400

# Particles
PARTICLE_SPEED = 4  # velocity components in [-speed/2, speed/2)
PARTICLE_LIFE_MIN = 50
PARTICLE_LIFE_JITTER = 30
PARTICLE_FADE_TICKS = 80  # opacity = life / this
PARTICLE_RADIUS = 3
MILESTONE_BURST = 30
COLLISION_BURST = 80

# Input
TOUCH_DUCK_HOLD_MS = 200

# Resource handles (opaque ids resolved by the asset / audio services)
IMAGE_PLAYER = "player"
IMAGE_BIRD = "bird"
IMAGE_CACTUS = "cactus"
IMAGE_BACKGROUND = "background"
IMAGE_BACKGROUND_DANGER = "background2"
SOUND_START = "start"
SOUND_CALM = "calm"
SOUND_JUMP = "jump"
SOUND_DEATH = "death"
SOUND_DANGER = "danger"
SOUND_CONGRATS = "congrats"
SOUND_ABOUT_TO_END = "about_to_end"

__all__ = [name for name in globals().keys() if name.isupper()]
