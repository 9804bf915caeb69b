import os
import random

from dinorun.logger import get_logger

log = get_logger("rng")


def _env_seed() -> int | None:
    raw = os.environ.get("DINORUN_SEED")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        log.warn("Ignoring non-integer DINORUN_SEED", repr(raw))
        return None


class RNGService:
    """Shared source of the game's (purely visual) randomness."""

    _instance: "RNGService | None" = None

    def __init__(self, seed: int | None = None):
        self._generator = random.Random(seed)
        log.debug(f"RNG initialized with seed: {seed!r}")

    @classmethod
    def get(cls) -> "RNGService":
        if cls._instance is None:
            cls._instance = cls(_env_seed())
        return cls._instance

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._generator.random()

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._generator.randint(a, b)
