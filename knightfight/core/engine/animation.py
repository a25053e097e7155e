"""Frame-based animation clock.

An AnimationClip tracks playhead progression for one named action and is
the single source of truth for whether an attack can connect right now.
It never reads fighter state; fighters query it.

Animation resources (sprite sheets) live outside the core. The core only
asks a provider for frame geometry and a ready flag. Readiness is passed
through to snapshots for the presentation layer and never changes timing.
"""

from typing import Optional, Protocol

from ..config import ClipSpec, DEFAULT_CLIP_SPECS, DEFAULT_FRAME_DURATION_MS
from ..data.game_enums import FighterAction


class AnimationClip:
    """Mutable playhead over an immutable ClipSpec.

    Owned by exactly one fighter; clips are never shared.
    """

    def __init__(self, name: str, spec: ClipSpec):
        self.name = name
        self.spec = spec
        self.frame_index = 0
        self.elapsed_in_frame = 0.0
        self.finished = False
        # Set when the last advance stepped onto a hit-window frame
        self.swept_hit_window = False

    @property
    def frame_count(self) -> int:
        return self.spec.frame_count

    @property
    def loop(self) -> bool:
        return self.spec.loop

    def advance(self, delta_ms: float) -> None:
        """Accumulate time and step frames.

        Looping clips wrap to frame 0. Non-looping clips clamp to the last
        frame and set finished once that frame's duration has elapsed.
        A long delta can step over the whole hit window; swept_hit_window
        records that it was crossed.
        """
        self.swept_hit_window = False
        if self.finished or delta_ms <= 0:
            return

        self.elapsed_in_frame += delta_ms
        frame_duration = self.spec.frame_duration_ms

        while self.elapsed_in_frame >= frame_duration:
            self.elapsed_in_frame -= frame_duration

            if self.frame_index + 1 < self.spec.frame_count:
                self.frame_index += 1
            elif self.spec.loop:
                self.frame_index = 0
            else:
                self.frame_index = self.spec.frame_count - 1
                self.elapsed_in_frame = 0.0
                self.finished = True
                break

            if self.is_in_hit_window():
                self.swept_hit_window = True

    def is_in_hit_window(self) -> bool:
        """True iff the playhead lies inside the configured hit window."""
        window = self.spec.hit_window
        if window is None:
            return False
        first, last = window
        return first <= self.frame_index <= last

    def reset(self) -> None:
        """Zero the playhead."""
        self.frame_index = 0
        self.elapsed_in_frame = 0.0
        self.finished = False
        self.swept_hit_window = False

    def __repr__(self) -> str:
        return (f"AnimationClip({self.name!r}, frame={self.frame_index}/{self.frame_count}, "
                f"finished={self.finished})")


class AnimationProvider(Protocol):
    """Source of per-action frame geometry (sprite sheets, in practice)."""

    def clip_spec(self, action: FighterAction) -> Optional[ClipSpec]:
        """Frame geometry for an action, or None if the resource has none."""
        ...

    def is_ready(self, action: FighterAction) -> bool:
        """Whether the visual resource for an action has finished loading."""
        ...


class AnimationLibrary:
    """In-memory animation provider.

    Actions without a spec fall back to the default geometry for that
    action. Everything is ready unless listed in `not_ready`.
    """

    def __init__(self,
                 specs: Optional[dict[FighterAction, ClipSpec]] = None,
                 not_ready: Optional[set[FighterAction]] = None):
        self._specs = dict(specs) if specs is not None else dict(DEFAULT_CLIP_SPECS)
        self._not_ready = set(not_ready or ())

    def clip_spec(self, action: FighterAction) -> Optional[ClipSpec]:
        return self._specs.get(action)

    def is_ready(self, action: FighterAction) -> bool:
        return action not in self._not_ready

    def mark_ready(self, action: FighterAction) -> None:
        self._not_ready.discard(action)


def build_clips(provider: AnimationProvider) -> dict[FighterAction, AnimationClip]:
    """Create one fresh clip per action for a single fighter.

    Missing geometry is imputed from the defaults so the state machine
    always has a clip to advance.
    """
    clips = {}
    for action in FighterAction:
        spec = provider.clip_spec(action)
        if spec is None:
            spec = DEFAULT_CLIP_SPECS.get(action, ClipSpec(1, DEFAULT_FRAME_DURATION_MS, loop=False))
        clips[action] = AnimationClip(action.value, spec)
    return clips
