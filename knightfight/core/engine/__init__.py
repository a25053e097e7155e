"""Simulation engine primitives.

- animation.py: frame clock and hit-window queries
- physics.py: per-tick kinematics and stage bounds
- scheduler.py: generation-guarded deferred tasks
"""

from .animation import AnimationClip, AnimationLibrary, AnimationProvider, build_clips
from .physics import KinematicBody, PhysicsIntegrator
from .scheduler import DeferredScheduler, DeferredTask

__all__ = [
    "AnimationClip",
    "AnimationLibrary",
    "AnimationProvider",
    "build_clips",
    "KinematicBody",
    "PhysicsIntegrator",
    "DeferredScheduler",
    "DeferredTask",
]
