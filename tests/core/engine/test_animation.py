"""
Unit tests for the animation clock.

Covers frame stepping, looping and finishing semantics, the hit-window
predicate, and clip construction from animation providers.
"""

import pytest

from knightfight.core.config import ClipSpec, ConfigError, DEFAULT_CLIP_SPECS
from knightfight.core.data import FighterAction
from knightfight.core.engine import AnimationClip, AnimationLibrary, build_clips


def make_clip(frames=6, duration=100.0, loop=False, hit_window=None):
    return AnimationClip("test", ClipSpec(frames, duration, loop=loop, hit_window=hit_window))


class TestAnimationClip:
    """Test AnimationClip frame progression."""

    def test_starts_at_first_frame(self):
        """A fresh clip sits on frame 0 and is not finished."""
        clip = make_clip()
        assert clip.frame_index == 0
        assert not clip.finished
        assert not clip.swept_hit_window

    def test_advance_accumulates_partial_frames(self):
        """Time shorter than a frame does not step the playhead."""
        clip = make_clip(duration=100.0)
        clip.advance(60.0)
        assert clip.frame_index == 0
        clip.advance(60.0)
        assert clip.frame_index == 1
        assert clip.elapsed_in_frame == pytest.approx(20.0)

    def test_large_delta_steps_several_frames(self):
        """One long tick can cross several frame boundaries."""
        clip = make_clip(duration=100.0)
        clip.advance(350.0)
        assert clip.frame_index == 3

    def test_non_looping_clip_clamps_and_finishes(self):
        """Non-looping clips stop on the last frame once it has played."""
        clip = make_clip(frames=3, duration=100.0, loop=False)
        clip.advance(250.0)
        assert clip.frame_index == 2
        assert not clip.finished

        clip.advance(50.0)
        assert clip.frame_index == 2
        assert clip.finished

        clip.advance(1000.0)
        assert clip.frame_index == 2

    def test_looping_clip_wraps(self):
        """Looping clips wrap to frame 0 and never finish."""
        clip = make_clip(frames=4, duration=100.0, loop=True)
        clip.advance(400.0)
        assert clip.frame_index == 0
        assert not clip.finished

        clip.advance(1000.0)
        assert clip.frame_index == 2
        assert not clip.finished

    def test_non_positive_delta_is_ignored(self):
        """Zero or negative time leaves the clip untouched."""
        clip = make_clip()
        clip.advance(0.0)
        clip.advance(-50.0)
        assert clip.frame_index == 0
        assert clip.elapsed_in_frame == 0.0

    def test_reset(self):
        """Reset returns the playhead to the start."""
        clip = make_clip(frames=2, duration=100.0)
        clip.advance(500.0)
        assert clip.finished

        clip.reset()
        assert clip.frame_index == 0
        assert clip.elapsed_in_frame == 0.0
        assert not clip.finished


class TestHitWindow:
    """Test the hit-window predicate."""

    def test_true_only_inside_window(self):
        """The predicate follows the inclusive frame range exactly."""
        clip = make_clip(frames=6, duration=100.0, hit_window=(2, 4))
        observed = []
        for _ in range(6):
            observed.append((clip.frame_index, clip.is_in_hit_window()))
            clip.advance(100.0)

        assert observed == [
            (0, False), (1, False), (2, True), (3, True), (4, True), (5, False),
        ]

    def test_no_window_never_connects(self):
        """Clips without a window never report one."""
        clip = make_clip(hit_window=None)
        for _ in range(10):
            assert not clip.is_in_hit_window()
            clip.advance(100.0)

    def test_window_on_last_frame_stays_true_when_clamped(self):
        """A window covering the final frame holds while the clip is clamped there."""
        clip = make_clip(frames=3, duration=100.0, hit_window=(2, 2))
        clip.advance(1000.0)
        assert clip.finished
        assert clip.is_in_hit_window()

    def test_long_delta_sweeps_over_window(self):
        """Stepping across the whole window in one advance is recorded."""
        clip = make_clip(frames=6, duration=100.0, hit_window=(2, 3))
        clip.advance(450.0)
        assert clip.frame_index == 4
        assert not clip.is_in_hit_window()
        assert clip.swept_hit_window

        clip.advance(50.0)
        assert not clip.swept_hit_window

    def test_sweep_only_counts_frames_stepped_onto(self):
        """Advances that stay outside the window never report a sweep."""
        clip = make_clip(frames=6, duration=100.0, hit_window=(2, 3))
        clip.advance(150.0)
        assert clip.frame_index == 1
        assert not clip.swept_hit_window

        clip.advance(100.0)
        assert clip.is_in_hit_window()
        assert clip.swept_hit_window

        clip.reset()
        assert not clip.swept_hit_window


class TestClipConfiguration:
    """Test clip specs and providers."""

    def test_invalid_specs_fail_fast(self):
        """Non-positive frame counts and durations are configuration errors."""
        with pytest.raises(ConfigError):
            ClipSpec(0, 100.0)
        with pytest.raises(ConfigError):
            ClipSpec(4, 0.0)
        with pytest.raises(ConfigError):
            ClipSpec(4, 100.0, hit_window=(2, 4))

    def test_build_clips_covers_every_action(self):
        """Every action gets its own fresh clip."""
        clips = build_clips(AnimationLibrary())
        assert set(clips) == set(FighterAction)
        assert clips[FighterAction.ATTACK].spec == DEFAULT_CLIP_SPECS[FighterAction.ATTACK]

    def test_missing_geometry_is_imputed(self):
        """Providers without a spec for an action fall back to the defaults."""
        library = AnimationLibrary(specs={FighterAction.IDLE: ClipSpec(2, 50.0)})
        clips = build_clips(library)
        assert clips[FighterAction.IDLE].frame_count == 2
        assert clips[FighterAction.ATTACK].spec == DEFAULT_CLIP_SPECS[FighterAction.ATTACK]

    def test_clips_are_not_shared(self):
        """Two fighters built from one provider own separate clips."""
        library = AnimationLibrary()
        first = build_clips(library)
        second = build_clips(library)
        first[FighterAction.WALK].advance(500.0)
        assert second[FighterAction.WALK].frame_index == 0

    def test_readiness(self):
        """Readiness is tracked per action and can be flipped on."""
        library = AnimationLibrary(not_ready={FighterAction.ATTACK})
        assert not library.is_ready(FighterAction.ATTACK)
        assert library.is_ready(FighterAction.IDLE)
        library.mark_ready(FighterAction.ATTACK)
        assert library.is_ready(FighterAction.ATTACK)
