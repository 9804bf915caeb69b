"""Service interfaces & simple adapter implementations.

The simulation depends on narrow protocol-style ports instead of pygame
objects. This keeps the per-frame step testable headless and lets the host
decide how side effects are actually carried out.

Current scope:
- AudioPort        -> play / pause / rewind / is_playing by sound id
- ParticleSystem   -> burst spawning for milestone and collision effects

Audio calls are fire-and-forget: the simulation never waits on them and the
adapters swallow playback errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Tuple

from dinorun.particle_system import ParticleSystem


# ---- Protocols ----
class AudioPort(Protocol):
    def play(self, name: str) -> None: ...  # noqa: D401

    def pause(self, name: str) -> None: ...

    def rewind(self, name: str) -> None: ...

    def is_playing(self, name: str) -> bool: ...


class NullAudio:
    """Silent AudioPort used headless; remembers what is 'playing'."""

    def __init__(self) -> None:
        self._playing: Dict[str, bool] = {}
        self.calls: List[Tuple[str, str]] = []

    def play(self, name: str) -> None:
        self.calls.append(("play", name))
        self._playing[name] = True

    def pause(self, name: str) -> None:
        self.calls.append(("pause", name))
        self._playing[name] = False

    def rewind(self, name: str) -> None:
        self.calls.append(("rewind", name))

    def is_playing(self, name: str) -> bool:
        return self._playing.get(name, False)

    def finish(self, name: str) -> None:
        """Pretend a one-shot sound reached its end."""
        self._playing[name] = False


@dataclass
class ServiceContainer:
    audio: AudioPort = field(default_factory=NullAudio)
    particles: ParticleSystem = field(default_factory=ParticleSystem)

    def play(self, name: str) -> None:
        """Start ``name`` from the beginning unless it is already playing."""
        if not self.audio.is_playing(name):
            self.audio.rewind(name)
            self.audio.play(name)

    def replay(self, name: str) -> None:
        """Rewind ``name`` and make sure it is playing."""
        self.audio.rewind(name)
        if not self.audio.is_playing(name):
            self.audio.play(name)

    def pause(self, *names: str) -> None:
        for name in names:
            self.audio.pause(name)

    def emit_burst(self, pos: Tuple[float, float], count: int) -> None:
        self.particles.spawn_burst(pos, count)


__all__ = ["AudioPort", "NullAudio", "ServiceContainer"]
