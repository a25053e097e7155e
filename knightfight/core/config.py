"""Match configuration.

This module defines the configuration objects consumed by the combat core
and the loader that builds them from YAML files. Every object validates
itself on construction and raises ConfigError for values that can only
come from a setup bug (non-positive frame counts, negative durations, ...).

Example YAML:

    stageWidth: 1024
    boundsPadding: 50
    floor: 450
    initialPositions:
      controlled: 200
      autonomous: 700
    stages:
      - name: Castle Arena
      - name: Dark Dungeon
        floor: 440
    combat:
      attackRange: 100
      baseDamage: 12
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .data.game_enums import FighterAction


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def _pick(data: dict[str, Any], key: str, default: Any) -> Any:
    """Read a camelCase key, falling back to its snake_case spelling."""
    if key in data:
        return data[key]
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
    return data.get(snake, default)


@dataclass(frozen=True)
class ClipSpec:
    """Immutable frame geometry for one animation clip.

    hit_window is an inclusive (first, last) frame range; None means the
    clip can never connect.
    """
    frame_count: int
    frame_duration_ms: float
    loop: bool = True
    hit_window: Optional[tuple[int, int]] = None

    def __post_init__(self):
        _require(self.frame_count > 0, f"frame_count must be positive, got {self.frame_count}")
        _require(self.frame_duration_ms > 0,
                 f"frame_duration_ms must be positive, got {self.frame_duration_ms}")
        if self.hit_window is not None:
            first, last = self.hit_window
            _require(0 <= first <= last < self.frame_count,
                     f"hit_window {self.hit_window} outside clip of {self.frame_count} frames")

    @property
    def duration_ms(self) -> float:
        return self.frame_count * self.frame_duration_ms

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClipSpec":
        """Create clip spec from YAML data."""
        window = _pick(data, "hitWindow", None)
        if window is not None:
            window = (int(window[0]), int(window[1]))
        fps = _pick(data, "fps", None)
        if fps is not None:
            _require(fps > 0, f"fps must be positive, got {fps}")
            duration = 1000.0 / fps
        else:
            duration = _pick(data, "frameDurationMs", DEFAULT_FRAME_DURATION_MS)
        return cls(
            frame_count=int(_pick(data, "frames", _pick(data, "frameCount", 1))),
            frame_duration_ms=float(duration),
            loop=bool(data.get("loop", True)),
            hit_window=window,
        )


# 8 frames per second
DEFAULT_FRAME_DURATION_MS = 125.0

DEFAULT_CLIP_SPECS: dict[FighterAction, ClipSpec] = {
    FighterAction.IDLE: ClipSpec(4, DEFAULT_FRAME_DURATION_MS, loop=True),
    FighterAction.WALK: ClipSpec(8, DEFAULT_FRAME_DURATION_MS, loop=True),
    FighterAction.ATTACK: ClipSpec(6, DEFAULT_FRAME_DURATION_MS, loop=False, hit_window=(2, 4)),
    FighterAction.BLOCK: ClipSpec(4, DEFAULT_FRAME_DURATION_MS, loop=True),
    FighterAction.DODGE: ClipSpec(6, DEFAULT_FRAME_DURATION_MS, loop=False),
    FighterAction.DEFEATED: ClipSpec(1, DEFAULT_FRAME_DURATION_MS, loop=False),
}


def parse_clip_specs(data: dict[str, Any]) -> dict[FighterAction, ClipSpec]:
    """Parse an `animations:` mapping keyed by action name."""
    specs = dict(DEFAULT_CLIP_SPECS)
    for name, clip_data in (data or {}).items():
        try:
            action = FighterAction(str(name).lower())
        except ValueError:
            raise ConfigError(f"Unknown action '{name}' in animation config")
        specs[action] = ClipSpec.from_dict(clip_data)
    return specs


@dataclass(frozen=True)
class FighterConfig:
    """Per-fighter vitals, costs and timings."""
    max_health: float = 100.0
    max_stamina: float = 100.0
    width: float = 80.0
    move_speed: float = 5.0
    attack_stamina_cost: float = 20.0
    dodge_stamina_cost: float = 30.0
    stamina_regen: float = 0.5  # per tick
    attack_cooldown_ms: float = 500.0
    dodge_cooldown_ms: float = 600.0
    dodge_impulse: float = 8.0
    block_max_hold_ms: float = 600.0
    walk_stop_speed: float = 0.5

    def __post_init__(self):
        _require(self.max_health > 0, "max_health must be positive")
        _require(self.max_stamina >= 0, "max_stamina cannot be negative")
        _require(self.width > 0, "width must be positive")
        _require(self.move_speed >= 0, "move_speed cannot be negative")
        _require(self.attack_stamina_cost >= 0 and self.dodge_stamina_cost >= 0,
                 "stamina costs cannot be negative")
        _require(self.stamina_regen >= 0, "stamina_regen cannot be negative")
        _require(self.attack_cooldown_ms >= 0, "attack_cooldown_ms cannot be negative")
        _require(self.dodge_cooldown_ms >= 0, "dodge_cooldown_ms cannot be negative")
        _require(self.block_max_hold_ms > 0, "block_max_hold_ms must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FighterConfig":
        defaults = cls()
        return cls(
            max_health=float(_pick(data, "maxHealth", defaults.max_health)),
            max_stamina=float(_pick(data, "maxStamina", defaults.max_stamina)),
            width=float(_pick(data, "width", defaults.width)),
            move_speed=float(_pick(data, "moveSpeed", defaults.move_speed)),
            attack_stamina_cost=float(_pick(data, "attackStaminaCost", defaults.attack_stamina_cost)),
            dodge_stamina_cost=float(_pick(data, "dodgeStaminaCost", defaults.dodge_stamina_cost)),
            stamina_regen=float(_pick(data, "staminaRegen", defaults.stamina_regen)),
            attack_cooldown_ms=float(_pick(data, "attackCooldownMs", defaults.attack_cooldown_ms)),
            dodge_cooldown_ms=float(_pick(data, "dodgeCooldownMs", defaults.dodge_cooldown_ms)),
            dodge_impulse=float(_pick(data, "dodgeImpulse", defaults.dodge_impulse)),
            block_max_hold_ms=float(_pick(data, "blockMaxHoldMs", defaults.block_max_hold_ms)),
            walk_stop_speed=float(_pick(data, "walkStopSpeed", defaults.walk_stop_speed)),
        )


@dataclass(frozen=True)
class CombatTuning:
    """Hit resolution constants."""
    attack_range: float = 100.0
    base_damage: float = 12.0
    damage_variance: float = 0.0
    block_reduction: float = 0.7
    hit_delay_ms: float = 0.0

    def __post_init__(self):
        _require(self.attack_range > 0, "attack_range must be positive")
        _require(self.base_damage >= 0, "base_damage cannot be negative")
        _require(0 <= self.damage_variance <= self.base_damage,
                 "damage_variance must lie within [0, base_damage]")
        _require(0 <= self.block_reduction < 1, "block_reduction must lie within [0, 1)")
        _require(self.hit_delay_ms >= 0, "hit_delay_ms cannot be negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CombatTuning":
        defaults = cls()
        return cls(
            attack_range=float(_pick(data, "attackRange", defaults.attack_range)),
            base_damage=float(_pick(data, "baseDamage", defaults.base_damage)),
            damage_variance=float(_pick(data, "damageVariance", defaults.damage_variance)),
            block_reduction=float(_pick(data, "blockReduction", defaults.block_reduction)),
            hit_delay_ms=float(_pick(data, "hitDelayMs", defaults.hit_delay_ms)),
        )


@dataclass(frozen=True)
class PhysicsTuning:
    """Per-tick integration constants."""
    gravity: float = 0.8
    friction: float = 0.85

    def __post_init__(self):
        _require(self.gravity >= 0, "gravity cannot be negative")
        _require(0 < self.friction < 1, "friction must lie within (0, 1)")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhysicsTuning":
        defaults = cls()
        return cls(
            gravity=float(_pick(data, "gravity", defaults.gravity)),
            friction=float(_pick(data, "friction", defaults.friction)),
        )


@dataclass(frozen=True)
class AITuning:
    """Decision engine constants."""
    aggression: float = 0.6
    close_range: float = 120.0
    medium_range: float = 300.0

    def __post_init__(self):
        _require(0 <= self.aggression <= 1, "aggression must lie within [0, 1]")
        _require(0 < self.close_range < self.medium_range,
                 "ranges must satisfy 0 < close_range < medium_range")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AITuning":
        defaults = cls()
        return cls(
            aggression=float(_pick(data, "aggression", defaults.aggression)),
            close_range=float(_pick(data, "closeRange", defaults.close_range)),
            medium_range=float(_pick(data, "mediumRange", defaults.medium_range)),
        )


@dataclass(frozen=True)
class StageConfig:
    """One arena."""
    name: str
    floor: float = 450.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_floor: float = 450.0) -> "StageConfig":
        return cls(name=data.get("name", "Unnamed Stage"),
                   floor=float(data.get("floor", default_floor)))


DEFAULT_STAGES = (
    StageConfig("Castle Arena"),
    StageConfig("Dark Dungeon"),
    StageConfig("Royal Courtyard"),
)


@dataclass(frozen=True)
class InitialPositions:
    """Horizontal spawn coordinates per role."""
    controlled: float = 200.0
    autonomous: float = 700.0


@dataclass(frozen=True)
class MatchConfig:
    """Everything the match controller needs to build a round."""
    stage_width: float = 1024.0
    bounds_padding: float = 50.0
    initial_positions: InitialPositions = field(default_factory=InitialPositions)
    stages: tuple[StageConfig, ...] = DEFAULT_STAGES
    max_rounds: int = 3
    fighter: FighterConfig = field(default_factory=FighterConfig)
    combat: CombatTuning = field(default_factory=CombatTuning)
    physics: PhysicsTuning = field(default_factory=PhysicsTuning)
    ai: AITuning = field(default_factory=AITuning)
    animations: dict[FighterAction, ClipSpec] = field(
        default_factory=lambda: dict(DEFAULT_CLIP_SPECS))

    def __post_init__(self):
        _require(len(self.stages) > 0, "at least one stage is required")
        _require(self.max_rounds > 0, "max_rounds must be positive")
        _require(self.bounds_padding >= 0, "bounds_padding cannot be negative")
        min_x, max_x = self.horizontal_bounds
        _require(min_x <= max_x, "stage is too narrow for its padding and fighter width")
        for role, x in (("controlled", self.initial_positions.controlled),
                        ("autonomous", self.initial_positions.autonomous)):
            _require(min_x <= x <= max_x,
                     f"initial position for {role} ({x}) is outside stage bounds [{min_x}, {max_x}]")

    @property
    def horizontal_bounds(self) -> tuple[float, float]:
        """Allowed range for a fighter's center."""
        half_width = self.fighter.width / 2
        return (self.bounds_padding + half_width,
                self.stage_width - self.bounds_padding - half_width)

    def stage(self, index: int) -> StageConfig:
        return self.stages[index % len(self.stages)]

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "MatchConfig":
        """Create a match configuration from YAML data."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Match configuration must be a mapping")
        defaults = cls()

        default_floor = float(data.get("floor", DEFAULT_STAGES[0].floor))
        if "stages" in data:
            stages = tuple(StageConfig.from_dict(s, default_floor) for s in data["stages"] or [])
        else:
            stages = tuple(StageConfig(s.name, default_floor) for s in DEFAULT_STAGES)

        positions_data = _pick(data, "initialPositions", {}) or {}
        positions = InitialPositions(
            controlled=float(positions_data.get("controlled", defaults.initial_positions.controlled)),
            autonomous=float(positions_data.get("autonomous", defaults.initial_positions.autonomous)),
        )

        return cls(
            stage_width=float(_pick(data, "stageWidth", defaults.stage_width)),
            bounds_padding=float(_pick(data, "boundsPadding", defaults.bounds_padding)),
            initial_positions=positions,
            stages=stages,
            max_rounds=int(_pick(data, "maxRounds", defaults.max_rounds)),
            fighter=FighterConfig.from_dict(data.get("fighter") or {}),
            combat=CombatTuning.from_dict(data.get("combat") or {}),
            physics=PhysicsTuning.from_dict(data.get("physics") or {}),
            ai=AITuning.from_dict(data.get("ai") or {}),
            animations=parse_clip_specs(data.get("animations") or {}),
        )


def load_match_config(file_path: Union[str, Path]) -> MatchConfig:
    """Load a match configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Match config file not found: {file_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML match config: {e}")

    return MatchConfig.from_dict(data)
