from __future__ import annotations

from dataclasses import dataclass

from mission_trajectories.constants import (
    DEFAULT_REBASE_THRESHOLD,
    DEFAULT_SAMPLE_COUNT,
    REAL_PLANET_SCALE_FACTOR,
    SCENE_UNITS_PER_AU,
    SURFACE_RADIUS_AU,
)
from mission_trajectories.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class EngineConfig:
    sample_count: int = DEFAULT_SAMPLE_COUNT
    rebase_threshold: float = DEFAULT_REBASE_THRESHOLD
    scene_units_per_au: float = SCENE_UNITS_PER_AU
    planet_scale_factor: float = REAL_PLANET_SCALE_FACTOR
    surface_radius_au: float = SURFACE_RADIUS_AU


def make_engine_config(
    sample_count: int | None = None,
    rebase_threshold: float | None = None,
    *,
    scene_units_per_au: float | None = None,
    planet_scale_factor: float | None = None,
    surface_radius_au: float | None = None,
) -> EngineConfig:
    """Build an EngineConfig, falling back to the defaults for anything left as None."""
    cfg = EngineConfig(
        sample_count=DEFAULT_SAMPLE_COUNT if sample_count is None else int(sample_count),
        rebase_threshold=DEFAULT_REBASE_THRESHOLD if rebase_threshold is None else float(rebase_threshold),
        scene_units_per_au=SCENE_UNITS_PER_AU if scene_units_per_au is None else float(scene_units_per_au),
        planet_scale_factor=REAL_PLANET_SCALE_FACTOR if planet_scale_factor is None else float(planet_scale_factor),
        surface_radius_au=SURFACE_RADIUS_AU if surface_radius_au is None else float(surface_radius_au),
    )
    if cfg.sample_count < 1:
        raise ConfigurationError(f"sample_count must be at least 1, got {cfg.sample_count}")
    if cfg.rebase_threshold <= 0.0:
        raise ConfigurationError(f"rebase_threshold must be positive, got {cfg.rebase_threshold}")
    if cfg.scene_units_per_au <= 0.0:
        raise ConfigurationError(f"scene_units_per_au must be positive, got {cfg.scene_units_per_au}")
    if cfg.planet_scale_factor < 1.0:
        raise ConfigurationError(f"planet_scale_factor must be >= 1, got {cfg.planet_scale_factor}")
    if cfg.surface_radius_au < 0.0:
        raise ConfigurationError(f"surface_radius_au must be non-negative, got {cfg.surface_radius_au}")
    return cfg


DEFAULT_ENGINE_CONFIG = EngineConfig()
